import logging

from sqlalchemy import func
from sqlalchemy.orm import Session

from fitplan.models.user import User
from fitplan.utils.errors import EmailAlreadyInUseError
from fitplan.utils.security import hash_password

logger = logging.getLogger(__name__)

"""
User CRUD
---------
Credential records: lookup, creation. Records are never updated or deleted.
"""


def get_user(db: Session, user_id: str):
    return db.query(User).filter(User.id == user_id).first()


def find_user_by_email(db: Session, email: str):
    # Exact match. Emails are stored lowercased, so mixed-case input will not match.
    return db.query(User).filter(User.email == email).first()


def email_in_use(db: Session, email: str) -> bool:
    return db.query(User).filter(func.lower(User.email) == email.lower()).first() is not None


def create_user(db: Session, email: str, password: str) -> User:
    if email_in_use(db, email):
        raise EmailAlreadyInUseError()

    db_user = User(
        email=email.lower(),
        password_hash=hash_password(password),
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info(f"Created user {db_user.id}")
    return db_user
