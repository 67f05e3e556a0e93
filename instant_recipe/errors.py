"""Application errors and their HTTP mapping."""


class RecipeAppError(Exception):
    """Base class for errors surfaced to API callers as {"error": message}."""

    status_code = 500
    message = "Internal error"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)

    def to_response_body(self) -> dict:
        return {"error": self.message}


class Unauthorized(RecipeAppError):
    """No authenticated user on the request."""

    status_code = 401
    message = "Unauthorized"


class NotFound(RecipeAppError):
    """Requested row does not exist or is not visible to the caller."""

    status_code = 404
    message = "Not found"


class RateLimitExceeded(RecipeAppError):
    """Daily generation cap reached."""

    status_code = 429

    def __init__(self, limit: int, used: int):
        self.limit = limit
        self.used = used
        super().__init__(f"Daily recipe generation limit reached ({limit} recipes per day)")

    def to_response_body(self) -> dict:
        return {"error": self.message, "used": self.used, "remaining": 0, "limit": self.limit}


class UpstreamUnavailable(RecipeAppError):
    """Completion API or datastore failure."""

    status_code = 500
    message = "Upstream service unavailable"


class RecipeValidationError(RecipeAppError):
    """Completion payload could not be turned into a recipe."""

    status_code = 500
    message = "Generated recipe was malformed"

    def __init__(self, message: str | None = None, payload=None):
        self.payload = payload
        super().__init__(message)


class SchemaDegraded(Exception):
    """The generation counter table is missing.

    Handled inside the rate limiter, never surfaced to callers.
    """
