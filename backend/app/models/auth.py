from __future__ import annotations

from ..extensions import db
from .common import generate_id


class User(db.Model):
    """
    Application user.

    Movements may reference the user who recorded them. The password column
    holds a bcrypt hash and is never serialized.
    """
    __tablename__ = "users"

    id = db.Column(db.String(36), primary_key=True, default=generate_id)
    username = db.Column(db.String(64), nullable=False, unique=True)
    password = db.Column(db.String(255), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(32), nullable=False, default="user")

    def __repr__(self) -> str:
        return f"<User id={self.id} username={self.username!r}>"

    def to_summary(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
        }

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "username": self.username,
            "name": self.name,
            "email": self.email,
            "role": self.role,
        }
