"""Exception hierarchy for SlideThinker."""


class SlideThinkerError(Exception):
    """Base class for all SlideThinker errors."""


class ModelGatewayError(SlideThinkerError):
    """A chat-completion call failed or the model is not configured."""

    def __init__(self, message: str):
        super().__init__(f"Model call failed: {message}")


class SearchProviderError(SlideThinkerError):
    """An external search provider returned an error."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider} search failed: {message}")
        self.provider = provider


class ThinkingInvariantError(SlideThinkerError):
    """An internal contract of the thinking loop was broken."""


class ThinkingCancelledError(SlideThinkerError):
    """The session was cancelled at a phase boundary."""
