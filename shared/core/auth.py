from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import ExpiredSignatureError, JWTError, jwt
from pydantic import ValidationError as PydanticValidationError

from shared.utils.app_status_code import AppStatusCode
from shared.core.config import settings
from shared.helpers.json_response_helper import error_response
from shared.core.schemas import UserToken

security = HTTPBearer()


def verify_token(token: str) -> UserToken:
    """Decode a JWT issued by the auth service into a ``UserToken``."""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET,
                             algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        return error_response(
            message="Token has expired",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_EXPIRED),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    except JWTError:
        return error_response(
            message="Invalid or expired token",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )

    try:
        user = UserToken(**payload)
    except PydanticValidationError:
        return error_response(
            message="Invalid token structure",
            status_code=str(AppStatusCode.AUTHENTICATION_TOKEN_INVALID),
            http_status=status.HTTP_401_UNAUTHORIZED
        )
    return user


def validate_current_token(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UserToken:
    return verify_token(credentials.credentials)


def create_access_token(data: dict) -> str:
    """Sign a token with the shared secret (used by tooling and tests)."""
    return jwt.encode(data.copy(), settings.JWT_SECRET,
                      algorithm=settings.JWT_ALGORITHM)
