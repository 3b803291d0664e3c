"""Error types raised by part-stacker.

A part that cannot be placed is not an error: the engine marks it
UNPLACED and moves on. Only malformed input raises.
"""


class StackerError(Exception):
    """Base class for part-stacker errors."""


class InvalidDimensionsError(StackerError, ValueError):
    """A container or part dimension is zero, negative or not finite."""


class ManifestError(StackerError):
    """A part manifest could not be read or validated."""
