"""HTTP middleware: request ID and security headers.

Applied in tenantdesk.main; the last one added is outermost.
"""

from tenantdesk.middleware.request_id import (
    RequestIDLogFilter,
    RequestIDMiddleware,
    get_request_id,
)
from tenantdesk.middleware.security_headers import SecurityHeadersMiddleware

__all__ = [
    "RequestIDLogFilter",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "get_request_id",
]
