import secrets

from fastapi import HTTPException, Request, Security
from fastapi.security import APIKeyHeader
from starlette import status

from .config import get_settings


_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def require_api_key(request: Request, api_key: str | None = Security(_api_key_header)) -> None:
    if request.method == "OPTIONS":
        return
    expected = get_settings().api_key
    if not expected:
        return
    if api_key is None or not secrets.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid API key",
            headers={"WWW-Authenticate": "ApiKey"},
        )
