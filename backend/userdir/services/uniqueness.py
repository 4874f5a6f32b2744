"""
Uniqueness Validator
Decides whether a candidate login/email may be written without colliding
with another user's record. Performs lookups only, never writes.

The store's unique indexes remain the final guard: two concurrent requests
can both pass these checks before either commits, and the repository turns
the resulting index violation into the same conflict errors.
"""

from enum import Enum

from userdir.exceptions import EmailAlreadyUsedError, LoginAlreadyUsedError
from userdir.models.user import User
from userdir.services.identity_resolver import IdentityResolver


class IdentityField(str, Enum):
    LOGIN = "login"
    EMAIL = "email"


# Create reports a login clash before an email clash; update checks email first.
CREATE_CHECK_ORDER = (IdentityField.LOGIN, IdentityField.EMAIL)
UPDATE_CHECK_ORDER = (IdentityField.EMAIL, IdentityField.LOGIN)

_CONFLICTS = {
    IdentityField.LOGIN: LoginAlreadyUsedError,
    IdentityField.EMAIL: EmailAlreadyUsedError,
}


class UniquenessValidator:
    def __init__(self, resolver: IdentityResolver):
        self._resolver = resolver

    async def validate_for_create(self, login: str, email: str) -> None:
        """Raise on any existing user holding login or email."""
        await self._validate(CREATE_CHECK_ORDER, login, email, own_id=None)

    async def validate_for_update(self, user_id: int, login: str, email: str) -> None:
        """Raise only when another user (id != user_id) holds login or email."""
        await self._validate(UPDATE_CHECK_ORDER, login, email, own_id=user_id)

    async def _validate(self, order, login: str, email: str, own_id: int | None) -> None:
        candidates = {IdentityField.LOGIN: login, IdentityField.EMAIL: email}
        for field in order:
            existing = await self._lookup(field, candidates[field])
            if existing is not None and existing.id != own_id:
                raise _CONFLICTS[field]()

    async def _lookup(self, field: IdentityField, value: str) -> User | None:
        if field is IdentityField.LOGIN:
            return await self._resolver.find_by_login(value.lower())
        return await self._resolver.find_by_email(value)
