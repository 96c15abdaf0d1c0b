"""
Custom exception hierarchy for the garage proxy.

Every exception carries the HTTP status the gateway answers with, so route
handlers can simply let them propagate:

- ValidationError: missing or malformed client input (400)
- UpstreamError: Shopify rejected the query or mutation (400)
- TransportError: Shopify could not be reached (500)
- ConfigurationError: credentials or settings missing (500)
- GatewayError: raised client-side when the gateway answers with a failure

None of these are retried automatically.
"""
from typing import Any, List, Optional


class GarageProxyException(Exception):
    """Base exception for the garage proxy."""

    status_code: int = 500

    def __init__(self, message: str, errors: Optional[List[Any]] = None):
        self.message = message
        self.errors = errors
        super().__init__(message)

    def to_body(self) -> dict:
        body: dict = {"error": self.message}
        if self.errors:
            body["errors"] = self.errors
        return body


# ============================================
# CLIENT ERRORS
# ============================================
class ValidationError(GarageProxyException):
    """Invalid input data - retrying won't help."""

    status_code = 400


# ============================================
# UPSTREAM ERRORS - Shopify answered, but said no
# ============================================
class UpstreamError(GarageProxyException):
    """Shopify rejected the request."""

    status_code = 400

    def __init__(self, service: str, message: str, errors: Optional[List[Any]] = None):
        self.service = service
        super().__init__(message, errors)


class ShopifyGraphQLError(UpstreamError):
    """Top-level GraphQL `errors` in a Shopify response."""

    def __init__(self, errors: List[Any]):
        first = errors[0] if errors else {}
        message = first.get("message") if isinstance(first, dict) else str(first)
        super().__init__("Shopify", message or "Shopify GraphQL error", errors)


class ShopifyUserError(UpstreamError):
    """`userErrors` returned by a Shopify mutation."""

    def __init__(self, mutation: str, user_errors: List[dict]):
        self.mutation = mutation
        message = user_errors[0].get("message") if user_errors else None
        super().__init__("Shopify", message or f"{mutation} failed", user_errors)


# ============================================
# SERVER-SIDE ERRORS
# ============================================
class TransportError(GarageProxyException):
    """Connection or timeout error talking to an upstream service."""

    status_code = 500


class ConfigurationError(GarageProxyException):
    """Required configuration is missing. Needs a config fix, not a retry."""

    status_code = 500


# ============================================
# WIDGET-SIDE ERRORS
# ============================================
class GatewayError(GarageProxyException):
    """The garage gateway answered with a non-success status or was unreachable."""

    def __init__(self, message: str, status_code: Optional[int] = None, errors: Optional[List[Any]] = None):
        self.status_code = status_code if status_code is not None else 500
        super().__init__(message, errors)
