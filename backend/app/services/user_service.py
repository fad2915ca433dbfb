"""
User Service

Users are referenced by inventory movements (who recorded the change).
Passwords are hashed with bcrypt (cost factor 12); the hash is the only
thing stored. There are no login endpoints in this backend.
"""

import bcrypt
from ..extensions import db
from ..models import User
from ..validation import ConflictError, ValidationError

MIN_PASSWORD_LENGTH = 8


def hash_password(password: str) -> str:
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
    return hashed.decode('utf-8')  # Store as string in database


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        # Malformed hash in the database
        return False


def create_user(*, username: str, password: str, name: str, email: str, role: str = "user") -> User:
    username = (username or "").strip()
    if not username:
        raise ValidationError("username is required")
    if get_user_by_username(username) is not None:
        raise ConflictError("Username already exists")

    user = User(
        username=username,
        password=hash_password(password),
        name=name.strip(),
        email=email.strip().lower(),
        role=role,
    )
    db.session.add(user)
    db.session.commit()
    return user


def get_user(user_id: str) -> User | None:
    return db.session.get(User, user_id)


def get_user_by_username(username: str) -> User | None:
    return db.session.query(User).filter_by(username=username).first()
