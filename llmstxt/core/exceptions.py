class LlmsTxtError(Exception):
    """Base exception for the llms.txt service."""

    pass


class OriginError(LlmsTxtError):
    """Raised when the storefront Admin API cannot supply a resource."""

    def __init__(self, resource: str, message: str):
        self.resource = resource
        super().__init__(f"Failed to fetch {resource}: {message}")


class OriginQueryFailed(OriginError):
    """Raised on GraphQL errors, HTTP errors or transport failures."""

    pass


class OriginDataMissing(OriginError):
    """Raised when a successful response lacks the expected data shape."""

    pass


class QuotaResolutionFailed(LlmsTxtError):
    """Raised when a subscription tier has no entry in the limit table."""

    def __init__(self, tier: str):
        self.tier = tier
        super().__init__(f"Unrecognized subscription tier '{tier}'")


class CacheError(LlmsTxtError):
    """Base class for llms.txt cache store failures."""

    def __init__(self, shop: str, message: str):
        self.shop = shop
        super().__init__(message)


class CacheWriteFailed(CacheError):
    """Raised when the generated content could not be saved."""

    pass


class CacheReadFailed(CacheError):
    """Raised when the cache store could not be read."""

    pass


class ShopNotInstalled(LlmsTxtError):
    """Raised when no installation record exists for a shop domain."""

    def __init__(self, shop: str):
        self.shop = shop
        super().__init__(f"Shop '{shop}' is not installed")
