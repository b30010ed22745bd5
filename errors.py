"""Error taxonomy shared by the feature handlers and the HTTP layer.

Every error carries the HTTP status it maps to, so the app's error handler
can render ``{"error": message}`` without knowing which feature raised it.
"""


class CreatorKitError(Exception):
    """Base class for errors surfaced to API callers."""

    status_code = 500

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code

    def to_dict(self):
        return {'error': self.message}


class ConfigurationError(CreatorKitError):
    """Raised when a required API key or setting is missing."""

    status_code = 500


class InvalidInputError(CreatorKitError):
    """Raised when a required request field is missing or malformed."""

    status_code = 400


class NotFoundError(CreatorKitError):
    """Raised when a requested video or transcript does not exist."""

    status_code = 404


class RateLimitExceeded(CreatorKitError):
    """Raised when a client has used up its request window."""

    status_code = 429

    def __init__(self, retry_after, message='Too many requests. Please try again later.'):
        super().__init__(message)
        self.retry_after = retry_after

    def to_dict(self):
        return {'error': self.message, 'retryAfter': self.retry_after}


class UpstreamServiceError(CreatorKitError):
    """Raised when an external API (Groq, YouTube) fails.

    Connection failures and timeouts use 503; an upstream error reply uses 500
    and carries the upstream message where one was returned.
    """

    status_code = 500
