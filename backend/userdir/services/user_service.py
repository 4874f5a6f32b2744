"""
User Service
Creates, updates, fetches and deletes directory users on top of the
identity resolver and the uniqueness validator.
"""

import asyncio
import logging
import math
import secrets

from userdir.exceptions import AlreadyIdentifiedError, NotificationError, UserNotFoundError
from userdir.repositories import UserRepository
from userdir.schemas.common import PaginatedResponse
from userdir.schemas.user import UserCreate, UserCreationResult, UserResponse, UserUpdate
from userdir.services.identity_resolver import IdentityResolver, require_key, to_public_view
from userdir.services.notifications import ActivationNotifier
from userdir.services.placeholder_email import derive_placeholder, is_placeholder
from userdir.services.uniqueness import UniquenessValidator

logger = logging.getLogger(__name__)


def resolve_email(login: str, email: str | None) -> str:
    """Stored form of a candidate email: lower-cased, or the login's placeholder when blank."""
    if email is None or not email.strip():
        return derive_placeholder(login)
    return email.strip().lower()


class UserService:
    def __init__(self, user_repo: UserRepository, notifier: ActivationNotifier):
        self._user_repo = user_repo
        self._notifier = notifier
        self._resolver = IdentityResolver(user_repo)
        self._validator = UniquenessValidator(self._resolver)

    # --- 1. REGISTRATION ---

    async def create_user(self, data: UserCreate) -> UserCreationResult:
        """
        Persists a new, not yet activated user, then asks the notifier to send
        the activation message. A notification failure is reported in the
        result and never undoes the insert.
        """
        if data.id is not None:
            raise AlreadyIdentifiedError()

        login = data.login.lower()
        email = resolve_email(login, data.email)
        await self._validator.validate_for_create(login, email)

        create_data = data.model_dump(exclude={"id", "login", "email"})
        create_data.update(
            login=login,
            email=email,
            activated=False,
            activation_key=secrets.token_urlsafe(20),
        )
        created_user = await self._user_repo.create(create_data)
        logger.info(f"Created user '{created_user.login}' (id={created_user.id})")

        notification_error = None
        try:
            # Publishing to the broker blocks, so it runs off the event loop
            await asyncio.to_thread(self._notifier.send_activation, created_user)
        except NotificationError as e:
            notification_error = e.message
            logger.warning(f"User '{created_user.login}' created but activation notification failed: {e}")

        return UserCreationResult(
            user=to_public_view(created_user),
            notified=notification_error is None,
            notification_error=notification_error,
        )

    # --- 2. UPDATE ---

    async def update_user(self, data: UserUpdate) -> UserResponse:
        """
        Updates an existing user. Keeping one's own login or email is never a
        conflict; an id that does not resolve raises UserNotFoundError.
        An email left out of the request keeps the stored one.
        """
        stored_user = await self._resolver.find_by_id(data.id)
        if stored_user is None:
            raise UserNotFoundError(data.id)

        login = data.login.lower()
        email = data.email if "email" in data.model_fields_set else stored_user.email
        # The old login's placeholder follows a rename instead of becoming a real address
        if email is not None and is_placeholder(stored_user.login, email.strip().lower()):
            email = None
        email = resolve_email(login, email)
        await self._validator.validate_for_update(data.id, login, email)

        update_data = data.model_dump(exclude={"id", "login", "email"}, exclude_unset=True)
        update_data.update(login=login, email=email)

        updated_user = await self._user_repo.update(data.id, update_data)
        if updated_user is None:
            raise UserNotFoundError(data.id)

        logger.info(f"Updated user '{updated_user.login}' (id={updated_user.id})")
        return to_public_view(updated_user)

    # --- 3. RETRIEVAL ---

    async def get_user_by_login(self, login: str) -> UserResponse | None:
        return await self._resolver.get_by_login(login)

    async def get_user_by_mobile(self, mobile: str) -> UserResponse | None:
        return await self._resolver.get_by_mobile(mobile)

    async def get_user_by_id(self, user_id: int) -> UserResponse | None:
        return await self._resolver.get_by_id(user_id)

    async def list_users(self, page: int = 1, page_size: int = 20) -> PaginatedResponse[UserResponse]:
        total = await self._user_repo.count()
        users = await self._user_repo.get_page(offset=(page - 1) * page_size, limit=page_size)
        return PaginatedResponse[UserResponse](
            items=[to_public_view(user) for user in users],
            total=total,
            page=page,
            page_size=page_size,
            total_pages=math.ceil(total / page_size) if total else 0,
        )

    # --- 4. DELETION ---

    async def delete_user(self, login: str) -> None:
        """Deleting a login that does not exist is not an error."""
        require_key(login, "Username")
        deleted = await self._user_repo.delete_by_login(login)
        if deleted:
            logger.info(f"Deleted user '{login.lower()}'")
        else:
            logger.debug(f"Delete requested for unknown user '{login.lower()}'")
