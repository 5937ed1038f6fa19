from __future__ import annotations


class VoxgenError(Exception):
    """Base class for content generation failures."""


class ConfigurationError(VoxgenError, ValueError):
    """Invalid generator input, rejected before anything is allocated."""


class ResourceExhaustionError(VoxgenError, MemoryError):
    """The requested grid does not fit the configured or available memory."""
