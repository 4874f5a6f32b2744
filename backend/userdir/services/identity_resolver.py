"""
Identity Resolver
Resolves users by any alternate key (login, email, mobile, id).
"""

from userdir.exceptions import InvalidKeyError
from userdir.models.user import User
from userdir.repositories import UserRepository
from userdir.schemas.user import UserResponse
from userdir.services.placeholder_email import mask_if_placeholder


def require_key(value: str | None, key_name: str) -> str:
    """Reject empty or blank string keys before any lookup runs."""
    if value is None or not value.strip():
        raise InvalidKeyError(key_name)
    return value


def require_id(user_id: int | None) -> int:
    if user_id is None or user_id <= 0:
        raise InvalidKeyError("UserId")
    return user_id


def to_public_view(user: User) -> UserResponse:
    """Response view of a stored user with the placeholder email masked out."""
    view = UserResponse.model_validate(user)
    return view.model_copy(update={"email": mask_if_placeholder(user)})


class IdentityResolver:
    """
    find_by_* return the stored record (or None) and are used internally,
    e.g. by the uniqueness checks. get_by_* return the masked public view.
    """

    def __init__(self, user_repo: UserRepository):
        self._user_repo = user_repo

    # --- 1. RAW LOOKUPS ---

    async def find_by_login(self, login: str) -> User | None:
        require_key(login, "Username")
        return await self._user_repo.get_by_login(login.lower())

    async def find_by_email(self, email: str) -> User | None:
        require_key(email, "Email")
        return await self._user_repo.get_by_email(email)

    async def find_by_mobile(self, mobile: str) -> User | None:
        require_key(mobile, "Mobile")
        return await self._user_repo.get_by_mobile(mobile)

    async def find_by_id(self, user_id: int) -> User | None:
        require_id(user_id)
        return await self._user_repo.get_by_id(user_id)

    # --- 2. PUBLIC VIEWS ---

    async def get_by_login(self, login: str) -> UserResponse | None:
        return self._view(await self.find_by_login(login))

    async def get_by_email(self, email: str) -> UserResponse | None:
        return self._view(await self.find_by_email(email))

    async def get_by_mobile(self, mobile: str) -> UserResponse | None:
        return self._view(await self.find_by_mobile(mobile))

    async def get_by_id(self, user_id: int) -> UserResponse | None:
        return self._view(await self.find_by_id(user_id))

    @staticmethod
    def _view(user: User | None) -> UserResponse | None:
        if user is None:
            return None
        return to_public_view(user)
