"""Error taxonomy shared by the browser, fetch and extraction layers."""


class ScraperError(Exception):
    """Base error. Carries a human-readable message and the originating cause."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.message = message
        self.cause = cause

    def __str__(self) -> str:
        if self.cause is not None and str(self.cause) not in self.message:
            return f"{self.message}: {self.cause}"
        return self.message


class ValidationError(ScraperError):
    """A caller-supplied argument failed a precondition. Raised before any I/O."""


class AutomationError(ScraperError):
    """Browser launch, navigation, selector wait or page script failure."""


class FetchError(ScraperError):
    """Plain HTTP fetch failed (connection error or non-2xx status)."""


class ExtractionFieldError(ScraperError):
    """A single field could not be extracted. Never escapes extract_field()."""


def validate(condition: bool, message: str) -> None:
    """Raise ValidationError with `message` unless `condition` holds."""
    if not condition:
        raise ValidationError(message)
