"""Security headers middleware for a JSON API. Raw ASGI.

Responses carry tenant data, so they are marked non-cacheable. Headers an
endpoint sets itself are left untouched.
"""

from typing import Callable

API_SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
    "Cache-Control": "no-store",
    "Content-Security-Policy": "default-src 'none'; frame-ancestors 'none'",
}

HSTS_HEADER = ("Strict-Transport-Security", "max-age=31536000; includeSubDomains")


def SecurityHeadersMiddleware(
    app: Callable,
    headers: dict[str, str] | None = None,
    hsts: bool = True,
) -> Callable:
    """Append headers to every HTTP response unless already present."""
    resolved = dict(API_SECURITY_HEADERS if headers is None else headers)
    if hsts:
        resolved.setdefault(*HSTS_HEADER)
    encoded = [(k.lower().encode("latin-1"), v.encode("latin-1")) for k, v in resolved.items()]

    async def asgi_app(scope: dict, receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await app(scope, receive, send)
            return

        async def send_wrapper(message: dict) -> None:
            if message["type"] == "http.response.start":
                existing = list(message.get("headers", []))
                present = {name.lower() for name, _ in existing}
                existing.extend(h for h in encoded if h[0] not in present)
                message["headers"] = existing
            await send(message)

        await app(scope, receive, send_wrapper)

    return asgi_app
