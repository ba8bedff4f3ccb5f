"""Exception hierarchy for microfx.

Nothing here is fatal to the host: configuration errors are raised
synchronously before any element is touched, everything else is a no-op
or a logged callback failure.
"""


class MicrofxError(Exception):
    """Base class for all microfx errors."""


class ConfigurationError(MicrofxError, ValueError):
    """Invalid effect or timeline configuration (negative duration, NaN, unknown ease...)."""


class ElementContractError(MicrofxError, TypeError):
    """Element does not expose the canonical opacity/micro fields."""


class CompletionCancelled(MicrofxError):
    """Raised when awaiting a completion whose timeline was killed."""
