"""
Existence Checker
Unauthenticated existence queries used by registration and OTP flows.
"""

from userdir.schemas.user import MobileExistence
from userdir.services.identity_resolver import IdentityResolver
from userdir.services.placeholder_email import mask_if_placeholder


class ExistenceChecker:
    def __init__(self, resolver: IdentityResolver):
        self._resolver = resolver

    async def exists_by_login(self, login: str) -> bool:
        """A row only counts when it carries a real (positive) id."""
        user = await self._resolver.find_by_login(login)
        return user is not None and user.id is not None and user.id > 0

    async def exists_by_mobile(self, mobile: str) -> MobileExistence:
        user = await self._resolver.find_by_mobile(mobile)
        if user is None or user.id is None or user.id <= 0:
            return MobileExistence(exists=False)
        return MobileExistence(
            exists=True,
            user_id=user.id,
            login=user.login,
            email=mask_if_placeholder(user),
            activated=user.activated,
        )
