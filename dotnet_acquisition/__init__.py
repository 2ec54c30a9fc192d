"""dotnet-runtime-acquisition — install a .NET runtime via the dotnet-install scripts."""

__version__ = "0.1.0"
