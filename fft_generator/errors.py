"""Error kinds raised by the kernel generator.

Anything derived from FFTGeneratorError is a build-time programming error:
the specialization space is inconsistent and generation must stop. The build
driver catches these at its boundary and reports the offending key.
"""

from __future__ import annotations


class FFTGeneratorError(Exception):
    """Base class for fatal generator errors."""


class UnsupportedConfigurationError(FFTGeneratorError, ValueError):
    """A scheme / classification combination has no generation rule."""

    def __init__(self, message: str, key: object = None):
        super().__init__(message)
        self.key = key


class GeometryError(FFTGeneratorError, ValueError):
    """No work-group geometry satisfies the divisibility invariants."""

    def __init__(self, message: str, length: int | None = None):
        super().__init__(message)
        self.length = length


class DuplicateSpecializationError(FFTGeneratorError, ValueError):
    """Two generated entry points share a specialization key or a name."""

    def __init__(self, message: str, key: object = None):
        super().__init__(message)
        self.key = key


class ArtifactWriteError(FFTGeneratorError, OSError):
    """One or more artifacts could not be written."""

    def __init__(self, failed: list[str]):
        super().__init__(f"Failed to write {len(failed)} artifact(s): {', '.join(failed)}")
        self.failed = list(failed)
