from datetime import UTC, datetime

from fastapi import Request
from fastapi.responses import JSONResponse

from portfolio.schemas.manifest import ErrorResponse

CONFIG_MISSING_MESSAGE = "R2 configuration missing"

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "X-XSS-Protection": "1; mode=block",
    "Referrer-Policy": "strict-origin-when-cross-origin",
    "Permissions-Policy": "camera=(), microphone=(), geolocation=()",
}

NO_STORE = "no-cache, no-store, must-revalidate"


def cache_control(max_age: int, refresh: bool = False) -> str:
    return NO_STORE if refresh else f"public, max-age={max_age}"


def json_headers(cache: str) -> dict[str, str]:
    return {"Cache-Control": cache, **SECURITY_HEADERS}


def error_response(message: str, status_code: int = 500, details: str | None = None) -> JSONResponse:
    body = ErrorResponse(error=message, generated=datetime.now(UTC), details=details)
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers={"Cache-Control": NO_STORE},
    )


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("cf-connecting-ip")
    if forwarded:
        return forwarded
    return request.client.host if request.client else "unknown"
