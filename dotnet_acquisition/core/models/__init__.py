"""
Domain models for runtime acquisition.

All models are re-exported here for convenient access:

    from dotnet_acquisition.core.models import InstallRequest, ProcessOutcome, FailureKind
"""

from dotnet_acquisition.core.models.events import (
    AcquisitionCompleted,
    AcquisitionEvent,
    InstallError,
    MissingNativeDependencies,
    OfflineFailure,
    ScriptError,
    ScriptOutput,
    UnexpectedError,
)
from dotnet_acquisition.core.models.request import (
    FailureKind,
    InstallRequest,
    ProcessOutcome,
    ResolvedCommand,
)

__all__ = [
    # events.py
    "AcquisitionCompleted",
    "AcquisitionEvent",
    "InstallError",
    "MissingNativeDependencies",
    "OfflineFailure",
    "ScriptError",
    "ScriptOutput",
    "UnexpectedError",
    # request.py
    "FailureKind",
    "InstallRequest",
    "ProcessOutcome",
    "ResolvedCommand",
]
