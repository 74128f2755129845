"""
Errors raised by the geodetect client.

Everything inherits from `GeodetectError`, so callers can catch that to handle
any failure coming from this library.
"""
from __future__ import annotations

import json
from typing import Any, Iterable


class GeodetectError(Exception):
    """Base class for all the geodetect errors"""

    pass


class ValidationError(GeodetectError, ValueError):
    """
    A caller-supplied argument failed a pre-flight check

    Raised before any request is sent to the server.
    """

    def __init__(self, field: str, value: Any, allowed: Iterable[Any] | str):
        self.field = field
        self.value = value
        if isinstance(allowed, str):
            self.allowed = allowed
        else:
            self.allowed = ", ".join(str(a) for a in allowed)
        super().__init__(
            "Invalid %s %r; allowed values: %s." % (field, value, self.allowed)
        )


class APIError(GeodetectError):
    """Generic API error exception, carrying the HTTP status code and raw body"""

    def __init__(self, message: str, status_code: int | None = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class OperationFailed(APIError):
    """An awaited operation reached the 'failed' status"""

    def __init__(self, operation_id: str, errors: Any = None):
        message = "Operation %s failed" % operation_id
        if errors:
            message += ": %s" % json.dumps(errors)
        super().__init__(message)
        self.operation_id = operation_id
        self.errors = errors


class TimedOut(GeodetectError):
    """An operation did not reach a terminal status before the deadline"""

    def __init__(self, operation_id: str, timeout: float):
        super().__init__(
            "Operation %s did not complete within %s seconds" % (operation_id, timeout)
        )
        self.operation_id = operation_id
        self.timeout = timeout


class TransportError(GeodetectError):
    """The request never got an HTTP answer (DNS, connection, timeout)"""

    pass
