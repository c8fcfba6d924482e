class AIUpstreamError(RuntimeError):
    """Raised when the AI provider fails (timeouts, network errors, service unavailable)."""
    pass


class AIContractError(RuntimeError):
    """Raised when the AI adapter violates its contract (bad format or missing data)."""
    pass


class InvalidTransitionError(RuntimeError):
    """Raised when an intent is not allowed from the current flow state."""
    pass


class GenerationInProgressError(InvalidTransitionError):
    """Raised when a generation or refinement is started while another is in flight."""
    pass


class UnknownOptionError(LookupError):
    pass


class UnknownItemError(LookupError):
    pass


class SessionNotFoundError(LookupError):
    pass


class InputUnavailableError(ValueError):
    """Raised when a required capture (audio, photo) is missing; nothing is started."""
    pass
