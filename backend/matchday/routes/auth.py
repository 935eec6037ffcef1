import jwt
from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from starlette import status

from matchday.config import config
from matchday.models.auth import AuthContext

security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_auth_token(token: str) -> AuthContext:
    try:
        claims = jwt.decode(token, config.jwt_secret, algorithms=[config.jwt_algorithm])
    except jwt.PyJWTError as exc:
        raise _unauthorized("Authentication token is invalid or expired") from exc

    if claims.get("sub") is None:
        raise _unauthorized("Authentication token is invalid")

    try:
        return AuthContext.model_validate(claims)
    except PydanticValidationError as exc:
        raise _unauthorized("Authentication token is invalid") from exc


async def auth_context(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> AuthContext:
    if credentials is None:
        raise _unauthorized("Authentication token is missing")

    return decode_auth_token(credentials.credentials)
