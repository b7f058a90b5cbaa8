"""Account registration, authentication and partial updates."""
from __future__ import annotations

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from heartline.core import security
from heartline.core.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationFailedError,
)
from heartline.core.settings import settings
from heartline.models import Account
from heartline.schemas.user import AccountUpdateRequest, RegisterRequest

from .matching import MatchEngine

logger = logging.getLogger(__name__)

__all__ = [
    "authenticate",
    "calculate_age",
    "get_account",
    "parse_birthday",
    "register_account",
    "update_account",
]


def calculate_age(birth_date: date, today: date | None = None) -> int:
    """Return completed years since ``birth_date``."""
    today = today or date.today()
    age = today.year - birth_date.year
    if (today.month, today.day) < (birth_date.month, birth_date.day):
        age -= 1
    return age


def parse_birthday(value: str | date) -> date:
    """Accept a date or an ISO-8601 date/datetime string."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError as err:
        raise ValidationFailedError("Invalid birth date format", code="INVALID_BIRTHDAY") from err


def _checked_age(birthday: date) -> int:
    age = calculate_age(birthday)
    if age < settings.minimum_age:
        raise ValidationFailedError(
            f"You must be at least {settings.minimum_age} years old",
            code="UNDERAGE",
        )
    return age


def _email_taken(db: Session, email: str, exclude_id: str | None = None) -> bool:
    stmt = select(Account.id).where(Account.email == email)
    if exclude_id is not None:
        stmt = stmt.where(Account.id != exclude_id)
    return db.scalars(stmt).first() is not None


def get_account(db: Session, account_id: str) -> Account:
    """Return the account or raise ``NotFoundError``."""
    account = db.get(Account, account_id)
    if account is None:
        raise NotFoundError("User not found", code="USER_NOT_FOUND")
    return account


def register_account(db: Session, payload: RegisterRequest) -> Account:
    """Create an account together with its matching profile.

    Both rows are committed together; a duplicate email discovered at commit
    time is reported the same way as one found up front.
    """
    if len(payload.password) < settings.password_min_length:
        raise ValidationFailedError(
            f"Password must be at least {settings.password_min_length} characters long",
            code="WEAK_PASSWORD",
        )
    email = payload.email.lower()
    if _email_taken(db, email):
        raise ConflictError("Email already registered", code="EMAIL_EXISTS")

    birthday = parse_birthday(payload.birthday)
    age = _checked_age(birthday)

    account = Account(
        name=payload.name.strip(),
        email=email,
        password_hash=security.hash_password(payload.password),
        gender=payload.gender,
        birthday=birthday,
        age=age,
    )
    try:
        db.add(account)
        db.flush()
        MatchEngine(db).ensure_profile(account.id)
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Email already registered", code="EMAIL_EXISTS") from err
    except Exception:
        db.rollback()
        raise
    db.refresh(account)
    logger.info("Registered account %s", account.id)
    return account


def authenticate(db: Session, email: str, password: str) -> Account:
    """Return the account for valid credentials.

    Unknown email and wrong password are indistinguishable to the caller.
    """
    account = db.scalars(select(Account).where(Account.email == email.lower())).first()
    if account is None or not security.verify_password(password, account.password_hash):
        logger.debug("Failed login for %s", email)
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")
    return account


def update_account(db: Session, account: Account, payload: AccountUpdateRequest) -> Account:
    """Apply the provided fields; a new birthday also updates the profile age."""
    changes = payload.model_dump(exclude_unset=True, exclude_none=True)
    if not changes:
        raise ValidationFailedError("No fields to update", code="NO_UPDATE_FIELDS")

    if "email" in changes:
        changes["email"] = changes["email"].lower()
        if _email_taken(db, changes["email"], exclude_id=account.id):
            raise ConflictError("Email already in use", code="EMAIL_EXISTS")

    birthday = parse_birthday(changes.pop("birthday")) if "birthday" in changes else None
    if birthday is not None:
        changes["age"] = _checked_age(birthday)
        changes["birthday"] = birthday

    for key, value in changes.items():
        setattr(account, key, value)

    try:
        if birthday is not None:
            profile = MatchEngine(db).ensure_profile(account.id)
            profile.age = account.age
        db.commit()
    except IntegrityError as err:
        db.rollback()
        raise ConflictError("Email already in use", code="EMAIL_EXISTS") from err
    except Exception:
        db.rollback()
        raise
    db.refresh(account)
    return account
