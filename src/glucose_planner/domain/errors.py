"""Error taxonomy shared by services, adapters and the API."""


class GlucosePlannerError(Exception):
    """Base error; ``retryable`` tells callers whether trying again can help."""

    retryable: bool = False


class StoreUnavailableError(GlucosePlannerError):
    """Raised when the profile/plan store cannot be read or written."""

    retryable = True


class CatalogUnavailableError(GlucosePlannerError):
    """Raised by recipe catalogs on transport, timeout or non-2xx failures."""

    retryable = True


class RecipeNotFoundError(GlucosePlannerError):
    """Raised when a recipe id cannot be resolved."""


class ProfileNotFoundError(GlucosePlannerError):
    """Raised when a user has no diabetes profile yet."""


class InvalidReadingError(GlucosePlannerError):
    """Raised when a new glucose reading is outside the accepted domain."""
