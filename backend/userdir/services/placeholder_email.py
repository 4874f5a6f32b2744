"""
Placeholder Email Policy
Mobile-first registrations carry no real email; the store still needs one,
so a synthetic address derived from the login stands in for it.
"""

PLACEHOLDER_EMAIL_SUFFIX = ".no-email@hdmon.com"


def derive_placeholder(login: str) -> str:
    """Synthetic email for a login without a real address."""
    return login + PLACEHOLDER_EMAIL_SUFFIX


def is_placeholder(login: str, email: str | None) -> bool:
    return email is not None and email == derive_placeholder(login)


def mask_if_placeholder(user) -> str:
    """
    Email as it may be shown to a caller: "" when the stored email is the
    user's own placeholder, otherwise the stored email unchanged.

    The caller must have resolved the user already; a missing record is not
    accepted here.
    """
    if user is None:
        raise ValueError("mask_if_placeholder requires a resolved user")
    if is_placeholder(user.login, user.email):
        return ""
    return user.email
