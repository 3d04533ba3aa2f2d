class GenerationError(RuntimeError):
    """Raised when the text model returns empty or non-conformant output."""

    def __init__(self, message: str, *, reason: str = "invalid_response", raw: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason
        self.raw = raw


class AlternativesError(GenerationError):
    """Raised when alternatives for a swap cannot be generated or parsed."""
