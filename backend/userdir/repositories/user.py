from collections.abc import Sequence
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from userdir.exceptions import EmailAlreadyUsedError, LoginAlreadyUsedError, StoreError, UserDirectoryError
from userdir.models.user import User

# Fragments identifying which unique index rejected a write, across PostgreSQL and SQLite messages
_LOGIN_INDEX_MARKERS = ("ix_users_login", "users.login")
_EMAIL_INDEX_MARKERS = ("ix_users_email", "users.email")


def apply_dict_updates(entity: object, update_data: dict[str, Any], excluded_attrs: set[str] | None) -> None:
    """
    Applies key-value pairs from a dictionary to an ORM entity, skipping
    excluded and unknown attributes.
    """
    excluded_attrs = excluded_attrs if excluded_attrs else set()
    for key, value in update_data.items():
        if key in excluded_attrs:
            continue
        if hasattr(entity, key):
            setattr(entity, key, value)


def _violated_constraint(exc: IntegrityError) -> str:
    """Name of the rejected constraint, or the first line of the driver message naming it."""
    # asyncpg exposes the name directly; SQLAlchemy's adapter keeps it as the cause
    for candidate in (exc.orig, getattr(exc.orig, "__cause__", None)):
        constraint_name = getattr(candidate, "constraint_name", None)
        if constraint_name:
            return constraint_name.lower()
    # Later DETAIL lines echo the duplicate values
    lines = str(exc.orig).splitlines()
    return lines[0].lower() if lines else ""


def conflict_from_integrity_error(exc: IntegrityError) -> UserDirectoryError:
    """Maps a unique-index violation raised at write time onto the matching conflict."""
    message = _violated_constraint(exc)
    if any(marker in message for marker in _EMAIL_INDEX_MARKERS):
        return EmailAlreadyUsedError()
    if any(marker in message for marker in _LOGIN_INDEX_MARKERS):
        return LoginAlreadyUsedError()
    return StoreError(f"Integrity error while writing user: {exc.orig}")


class UserRepository:
    """
    The user store: alternate-key reads and writes over the users table.
    "Not found" is returned as None; operational failures raise StoreError.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # --- 1. LOOKUPS ---

    async def get_by_id(self, user_id: int) -> User | None:
        """Retrieves a User by their primary ID."""
        return await self._first(select(User).where(User.id == user_id))

    async def get_by_login(self, login: str) -> User | None:
        """Logins are stored lower-cased, so the key is lower-cased before matching."""
        return await self._first(select(User).where(User.login == login.lower()))

    async def get_by_email(self, email: str) -> User | None:
        """Case-insensitive email match."""
        return await self._first(select(User).where(func.lower(User.email) == email.lower()))

    async def get_by_mobile(self, mobile: str) -> User | None:
        """
        Exact mobile match. Mobile numbers are not unique, so the oldest
        record (lowest id) wins when several share a number.
        """
        stmt = select(User).where(User.mobile == mobile).order_by(User.id).limit(1)
        return await self._first(stmt)

    async def get_page(self, offset: int = 0, limit: int = 20) -> Sequence[User]:
        stmt = select(User).order_by(User.id).offset(offset).limit(limit)
        try:
            return (await self.session.scalars(stmt)).all()
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to list users: {e}") from e

    async def count(self) -> int:
        try:
            return await self.session.scalar(select(func.count(User.id))) or 0
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to count users: {e}") from e

    # --- 2. WRITES ---

    async def create(self, create_data: dict[str, Any]) -> User:
        """Creates a new User record and persists it."""
        user = User()
        apply_dict_updates(user, create_data, {"id", "created_at", "updated_at"})
        self.session.add(user)
        await self._commit()
        await self.session.refresh(user)
        return user

    async def update(self, user_id: int, update_data: dict[str, Any]) -> User | None:
        """Updates an existing user; returns None when the id does not resolve."""
        user_to_update = await self.get_by_id(user_id)
        if not user_to_update:
            return None

        sensitive_fields = {"id", "activated", "activation_key", "created_at", "updated_at"}
        apply_dict_updates(entity=user_to_update, update_data=update_data, excluded_attrs=sensitive_fields)

        await self._commit()
        await self.session.refresh(user_to_update)
        return user_to_update

    async def delete_by_login(self, login: str) -> bool:
        """Deletes the user owning login. Returns False when there was nothing to delete."""
        user = await self.get_by_login(login)
        if not user:
            return False
        await self.session.delete(user)
        await self._commit()
        return True

    # --- 3. HELPERS ---

    async def _first(self, stmt) -> User | None:
        try:
            return (await self.session.scalars(stmt)).first()
        except SQLAlchemyError as e:
            raise StoreError(f"User lookup failed: {e}") from e

    async def _commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            raise conflict_from_integrity_error(e) from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise StoreError(f"User write failed: {e}") from e
