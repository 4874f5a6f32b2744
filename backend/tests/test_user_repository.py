"""
Tests for the SQLAlchemy user store.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from userdir.exceptions import EmailAlreadyUsedError, LoginAlreadyUsedError, StoreError
from userdir.repositories import UserRepository
from userdir.repositories.user import conflict_from_integrity_error


class TestUniqueIndexBackstop:
    """Concurrent writers that both passed the pre-checks are stopped by the indexes."""

    @pytest.mark.asyncio
    async def test_duplicate_login_surfaces_as_login_conflict(self, user_repo):
        await user_repo.create({"login": "alice", "email": "alice@example.com"})

        with pytest.raises(LoginAlreadyUsedError):
            await user_repo.create({"login": "alice", "email": "other@example.com"})

        assert await user_repo.count() == 1

    @pytest.mark.asyncio
    async def test_duplicate_email_surfaces_as_email_conflict(self, user_repo):
        await user_repo.create({"login": "alice", "email": "alice@example.com"})

        with pytest.raises(EmailAlreadyUsedError):
            await user_repo.create({"login": "bob", "email": "alice@example.com"})

    @pytest.mark.asyncio
    async def test_session_is_usable_after_a_conflict(self, user_repo):
        await user_repo.create({"login": "alice", "email": "alice@example.com"})
        with pytest.raises(LoginAlreadyUsedError):
            await user_repo.create({"login": "alice", "email": "other@example.com"})

        bob = await user_repo.create({"login": "bob", "email": "bob@example.com"})

        assert bob.id > 0


class TestConflictMapping:
    def test_postgres_login_index_message(self):
        exc = IntegrityError("INSERT", {}, Exception('duplicate key value violates unique constraint "ix_users_login"'))
        assert isinstance(conflict_from_integrity_error(exc), LoginAlreadyUsedError)

    def test_postgres_email_index_message(self):
        exc = IntegrityError("INSERT", {}, Exception('duplicate key value violates unique constraint "ix_users_email"'))
        assert isinstance(conflict_from_integrity_error(exc), EmailAlreadyUsedError)

    def test_duplicate_value_in_detail_does_not_pick_the_index(self):
        message = (
            'duplicate key value violates unique constraint "ix_users_login"\n'
            "DETAIL:  Key (login)=(users.email) already exists."
        )
        exc = IntegrityError("INSERT", {}, Exception(message))
        assert isinstance(conflict_from_integrity_error(exc), LoginAlreadyUsedError)

    def test_driver_constraint_name_is_preferred(self):
        driver_error = Exception("duplicate key value violates unique constraint")
        driver_error.constraint_name = "ix_users_email"
        exc = IntegrityError("INSERT", {}, driver_error)
        assert isinstance(conflict_from_integrity_error(exc), EmailAlreadyUsedError)

    def test_constraint_name_on_the_wrapped_cause(self):
        cause = Exception("duplicate key")
        cause.constraint_name = "ix_users_login"
        adapted = Exception("<class 'UniqueViolationError'>: duplicate key")
        adapted.__cause__ = cause
        exc = IntegrityError("INSERT", {}, adapted)
        assert isinstance(conflict_from_integrity_error(exc), LoginAlreadyUsedError)

    def test_other_integrity_errors_are_store_errors(self):
        exc = IntegrityError("INSERT", {}, Exception("NOT NULL constraint failed: users.created_at"))
        assert isinstance(conflict_from_integrity_error(exc), StoreError)


class TestWrites:
    @pytest.mark.asyncio
    async def test_create_ignores_caller_supplied_id(self, user_repo):
        user = await user_repo.create({"id": 500, "login": "alice", "email": "alice@example.com"})

        assert user.id != 500

    @pytest.mark.asyncio
    async def test_update_unknown_id_returns_none(self, user_repo):
        assert await user_repo.update(404, {"login": "ghost"}) is None

    @pytest.mark.asyncio
    async def test_update_does_not_touch_activation_fields(self, user_repo):
        user = await user_repo.create(
            {"login": "alice", "email": "alice@example.com", "activation_key": "k1"}
        )

        updated = await user_repo.update(user.id, {"activated": True, "activation_key": "k2", "mobile": "0901"})

        assert updated.activated is False
        assert updated.activation_key == "k1"
        assert updated.mobile == "0901"

    @pytest.mark.asyncio
    async def test_delete_by_login(self, user_repo):
        await user_repo.create({"login": "alice", "email": "alice@example.com"})

        assert await user_repo.delete_by_login("ALICE") is True
        assert await user_repo.delete_by_login("alice") is False


class TestOperationalFailures:
    @pytest.mark.asyncio
    async def test_lookup_failure_raises_store_error(self):
        session = MagicMock()
        session.scalars = AsyncMock(side_effect=OperationalError("SELECT", {}, Exception("connection lost")))

        with pytest.raises(StoreError):
            await UserRepository(session).get_by_login("alice")

    @pytest.mark.asyncio
    async def test_commit_failure_rolls_back_and_raises_store_error(self):
        session = MagicMock()
        session.commit = AsyncMock(side_effect=OperationalError("COMMIT", {}, Exception("connection lost")))
        session.rollback = AsyncMock()

        with pytest.raises(StoreError):
            await UserRepository(session).create({"login": "alice", "email": "alice@example.com"})

        session.rollback.assert_awaited_once()
