"""
Acquisition pipeline: build the installer command, run it, classify the outcome.
"""
