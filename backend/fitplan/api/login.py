import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from fitplan.database import get_db
from fitplan.crud import user as crud_user
from fitplan.schemas.user import AuthResponse, UserCredentials, UserResponse
from fitplan.utils.errors import ConfigurationError, EmailAlreadyInUseError, PasswordHashingError
from fitplan.utils.security import verify_password, create_access_token

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


def _issue_token(user) -> str:
    try:
        return create_access_token(user_id=user.id, email=user.email)
    except ConfigurationError:
        logger.error("JWT_SECRET is not configured; cannot issue tokens.")
        raise HTTPException(status_code=500, detail="Server configuration error (auth).")


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
def register(credentials: UserCredentials, db: Session = Depends(get_db)):
    """
    Create a new account and log it in straight away.
    """
    try:
        new_user = crud_user.create_user(db, email=credentials.email, password=credentials.password)
    except EmailAlreadyInUseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except PasswordHashingError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "message": "User registered successfully.",
        "token": _issue_token(new_user),
        "user": UserResponse.model_validate(new_user),
    }


@router.post("/login", response_model=AuthResponse)
def login(credentials: UserCredentials, db: Session = Depends(get_db)):
    user = crud_user.find_user_by_email(db, email=credentials.email)
    # Same answer for unknown email and wrong password
    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return {
        "message": "Login successful.",
        "token": _issue_token(user),
        "user": UserResponse.model_validate(user),
    }
