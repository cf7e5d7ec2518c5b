"""
Error taxonomy for the frontier pipeline.

Every error is a precondition failure detected before any computation runs
and aborts the whole run. They subclass ValueError so callers that already
catch bad-input errors keep working.
"""


class FrontierError(ValueError):
    """Base class for all pipeline precondition failures."""


class InsufficientData(FrontierError):
    """A price or return series is too short for the requested statistic."""


class LengthMismatch(FrontierError):
    """Paired return series have different lengths."""


class DimensionMismatch(FrontierError):
    """Vector and matrix dimensions disagree."""


class InvalidDimension(FrontierError):
    """A weight vector of zero or negative length was requested."""
