"""
API Dependencies
Reusable FastAPI dependencies wiring the store, notifier and services per request.
"""

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from userdir.database import get_db
from userdir.repositories import UserRepository
from userdir.services.existence import ExistenceChecker
from userdir.services.identity_resolver import IdentityResolver
from userdir.services.notifications import ActivationNotifier, CeleryActivationNotifier
from userdir.services.user_service import UserService


async def get_user_repository(db: AsyncSession = Depends(get_db)) -> UserRepository:
    return UserRepository(db)


def get_activation_notifier() -> ActivationNotifier:
    return CeleryActivationNotifier()


async def get_user_service(
    user_repo: UserRepository = Depends(get_user_repository),
    notifier: ActivationNotifier = Depends(get_activation_notifier),
) -> UserService:
    return UserService(user_repo, notifier)


async def get_identity_resolver(
    user_repo: UserRepository = Depends(get_user_repository),
) -> IdentityResolver:
    return IdentityResolver(user_repo)


async def get_existence_checker(
    resolver: IdentityResolver = Depends(get_identity_resolver),
) -> ExistenceChecker:
    """Existence checks are public: no authentication dependency here."""
    return ExistenceChecker(resolver)
