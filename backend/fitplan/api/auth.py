import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from fitplan.database import get_db
from fitplan.crud import user as crud_user
from fitplan.models.user import User
from fitplan.utils.errors import ConfigurationError, InvalidTokenError, TokenExpiredError
from fitplan.utils.security import decode_access_token

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or credentials.scheme.lower() != "bearer" or not credentials.credentials:
        raise _unauthorized("Unauthorized. No token provided or malformed token.")

    try:
        payload = decode_access_token(credentials.credentials)
    except ConfigurationError:
        logger.error("JWT_SECRET is not configured; cannot verify tokens.")
        raise HTTPException(status_code=500, detail="Server configuration error (auth).")
    except TokenExpiredError:
        raise _unauthorized("Unauthorized. Token has expired.")
    except InvalidTokenError:
        raise _unauthorized("Unauthorized. Invalid token.")

    user_id = payload.get("userId")
    if user_id is None:
        raise _unauthorized("Unauthorized. Invalid token.")

    # Check if user still exists in DB
    user = crud_user.get_user(db, user_id=user_id)
    if user is None:
        raise _unauthorized("Unauthorized. User no longer exists.")

    return user
