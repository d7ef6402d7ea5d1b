"""Core components for the Note Sight application."""

# Import interfaces for easier access
from .interfaces import (
    ICaptureDevice,
    IPitchAnalyzer,
    IDetectionSession,
)

__all__ = ["ICaptureDevice", "IPitchAnalyzer", "IDetectionSession"]
