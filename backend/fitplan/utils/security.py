import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import VerifyMismatchError, VerificationError, InvalidHashError
from jose import jwt, JWTError, ExpiredSignatureError

import config
from fitplan.utils.errors import (
    ConfigurationError,
    InvalidTokenError,
    PasswordHashingError,
    TokenExpiredError,
)

logger = logging.getLogger(__name__)

# Argon2 password hasher (OWASP recommended)
pwd_hasher = PasswordHasher(
    time_cost=2,
    memory_cost=102400,  # 100 MB
    parallelism=8,
    hash_len=32,
    salt_len=16,
)


def hash_password(password: str) -> str:
    try:
        return pwd_hasher.hash(password)
    except Exception as e:
        logger.error(f"Error hashing password: {e}")
        raise PasswordHashingError() from e


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Returns True on match. Never raises: any failure counts as "no match"."""
    try:
        return pwd_hasher.verify(hashed_password, plain_password)
    except VerifyMismatchError:
        return False
    except (VerificationError, InvalidHashError) as e:
        logger.error(f"Error verifying password: {e}")
        return False
    except Exception as e:
        logger.error(f"Unexpected error verifying password: {e}")
        return False


def _secret() -> str:
    if not config.JWT_SECRET:
        raise ConfigurationError("JWT_SECRET is not configured.")
    return config.JWT_SECRET


# Token Logic
def create_access_token(user_id: str, email: str, expires_minutes: Optional[int] = None) -> str:
    now = datetime.now(timezone.utc)
    minutes = expires_minutes if expires_minutes is not None else config.ACCESS_TOKEN_EXPIRE_MINUTES
    to_encode = {
        "userId": user_id,
        "email": email,
        "iat": now,
        "exp": now + timedelta(minutes=minutes),
    }
    return jwt.encode(to_encode, _secret(), algorithm=config.ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Verifies signature and expiry. Expired and malformed tokens raise different errors."""
    secret = _secret()
    try:
        return jwt.decode(token, secret, algorithms=[config.ALGORITHM])
    except ExpiredSignatureError as e:
        raise TokenExpiredError("Token has expired.") from e
    except JWTError as e:
        raise InvalidTokenError("Invalid token.") from e
