"""
Lookup Router
Alternate-key lookups and existence checks. Every response is an envelope
returned with HTTP 200; the outcome lives in its error code.
"""

import logging
from typing import Awaitable, Callable, Type

from fastapi import APIRouter, Depends, Path, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from userdir.api.dependencies import get_existence_checker, get_identity_resolver
from userdir.config import settings
from userdir.exceptions import InvalidKeyError, StoreError
from userdir.schemas.common import EnvelopeResponse, ResponseErrorCode
from userdir.schemas.user import MobileExistence, UserResponse
from userdir.services.existence import ExistenceChecker
from userdir.services.identity_resolver import IdentityResolver

logger = logging.getLogger(__name__)

router = APIRouter()
limiter = Limiter(key_func=get_remote_address, enabled=settings.rate_limit_enabled)


async def _envelope(response_cls: Type[EnvelopeResponse], action: Callable[[], Awaitable]) -> EnvelopeResponse:
    try:
        data = await action()
    except InvalidKeyError as e:
        return response_cls(error=ResponseErrorCode.INVALID_DATA, message="invalid", exception=e.message)
    except StoreError as e:
        logger.error(f"Lookup failed: {e}")
        return response_cls(error=ResponseErrorCode.SYSTEM_ERROR, message="system_error", exception=e.message)
    return response_cls(error=ResponseErrorCode.SUCCESSFUL, message="successful", data=data)


@router.get("/getinfobymobile/{mobile}", response_model=EnvelopeResponse[UserResponse])
async def get_user_by_mobile(
    mobile: str,
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    """Get user information by mobile number."""
    logger.debug(f"Request to get user by mobile: {mobile}")
    return await _envelope(EnvelopeResponse[UserResponse], lambda: resolver.get_by_mobile(mobile))


@router.get("/getinfobyusername/{username}", response_model=EnvelopeResponse[UserResponse])
async def get_user_by_username(
    username: str = Path(..., pattern=settings.login_regex),
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    """Get user information by username (login)."""
    logger.debug(f"Request to get user by username: {username}")
    return await _envelope(EnvelopeResponse[UserResponse], lambda: resolver.get_by_login(username))


@router.get("/getinfobyuserid/{user_id}", response_model=EnvelopeResponse[UserResponse])
async def get_user_by_user_id(
    user_id: int,
    resolver: IdentityResolver = Depends(get_identity_resolver),
):
    """Get user information by numeric user id."""
    logger.debug(f"Request to get user by id: {user_id}")
    return await _envelope(EnvelopeResponse[UserResponse], lambda: resolver.get_by_id(user_id))


@router.get("/checkexists/username/{username}", response_model=EnvelopeResponse[bool])
@limiter.limit(settings.rate_limit_existence)
async def check_exists_by_username(
    request: Request,
    username: str = Path(..., pattern=settings.login_regex),
    checker: ExistenceChecker = Depends(get_existence_checker),
):
    """
    Check whether a username is already registered.
    Does not require authentication.
    """
    return await _envelope(EnvelopeResponse[bool], lambda: checker.exists_by_login(username))


@router.get("/checkexists/mobile/{mobile}", response_model=EnvelopeResponse[MobileExistence])
@limiter.limit(settings.rate_limit_existence)
async def check_exists_by_mobile(
    request: Request,
    mobile: str,
    checker: ExistenceChecker = Depends(get_existence_checker),
):
    """
    Check whether a mobile number is already registered, with enough detail
    (login, activation state) to drive registration and OTP flows.
    Does not require authentication.
    """
    return await _envelope(EnvelopeResponse[MobileExistence], lambda: checker.exists_by_mobile(mobile))
