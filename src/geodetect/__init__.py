from .base_client import ResultsPage
from .client import GeodetectClient
from .client import GeodetectClient as APIClient
from .exceptions import (
    APIError,
    GeodetectError,
    OperationFailed,
    TimedOut,
    TransportError,
    ValidationError,
)

__all__ = [
    "APIClient",
    "GeodetectClient",
    "ResultsPage",
    "APIError",
    "GeodetectError",
    "OperationFailed",
    "TimedOut",
    "TransportError",
    "ValidationError",
]
