# Overview: Pytest coverage for user creation and password hashing.

import pytest
from app.models import User
from app.services.user_service import (
    create_user, get_user, get_user_by_username, hash_password, verify_password,
)
from app.validation import ConflictError, ValidationError


class TestPasswordHashing:

    def test_hash_and_verify(self):
        hashed = hash_password("correct-horse")

        assert hashed != "correct-horse"
        assert verify_password("correct-horse", hashed)
        assert not verify_password("wrong-horse!", hashed)

    def test_short_password_rejected(self):
        with pytest.raises(ValidationError):
            hash_password("short")

    def test_malformed_hash_does_not_verify(self):
        assert verify_password("whatever1", "not-a-bcrypt-hash") is False


class TestCreateUser:

    def test_create_and_lookup(self, db_session):
        user = create_user(
            username=" maria ", password="s3cret-pass", name="Maria", email="Maria@Example.com",
        )

        assert user.username == "maria"
        assert user.role == "user"
        assert get_user(user.id).id == user.id
        assert get_user_by_username("maria").id == user.id
        assert "password" not in user.to_dict()

    def test_duplicate_username(self, db_session):
        create_user(username="maria", password="s3cret-pass", name="Maria", email="m@example.com")

        with pytest.raises(ConflictError):
            create_user(username="maria", password="0ther-pass", name="Other", email="o@example.com")
        assert db_session.query(User).count() == 1

    def test_blank_username(self, db_session):
        with pytest.raises(ValidationError):
            create_user(username="  ", password="s3cret-pass", name="X", email="x@example.com")
