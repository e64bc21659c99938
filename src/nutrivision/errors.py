"""Application error taxonomy."""


class NutriVisionError(Exception):
    """Base error converted to an `{error, details}` response at the API edge."""

    status_code = 500

    def __init__(self, message: str, details: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class AuthError(NutriVisionError):
    """No authenticated session for the request."""

    status_code = 401


class ValidationError(NutriVisionError):
    """A required request field is missing or invalid."""

    status_code = 400


class AnalysisProviderError(NutriVisionError):
    """An upstream AI provider failed or returned unusable content."""

    status_code = 502


class ParseError(AnalysisProviderError):
    """Provider output could not be parsed into structured data."""


class PersistenceError(NutriVisionError):
    """A read or write against the data store failed."""

    status_code = 500


class WaterIntakeSyncError(PersistenceError):
    """The water intake endpoint rejected or failed a save."""
