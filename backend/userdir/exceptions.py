"""
User Directory Errors
Typed outcomes raised by the identity core and mapped onto HTTP by the API layer.
"""


class UserDirectoryError(Exception):
    """Base class for every error the directory core raises."""

    error_key = "error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidKeyError(UserDirectoryError):
    """An alternate key is empty, blank, or a non-positive id."""

    error_key = "invalidkey"

    def __init__(self, key_name: str):
        super().__init__(f"The {key_name} cannot be empty!")
        self.key_name = key_name


class LoginAlreadyUsedError(UserDirectoryError):
    error_key = "userexists"

    def __init__(self):
        super().__init__("Login name already used!")


class EmailAlreadyUsedError(UserDirectoryError):
    error_key = "emailexists"

    def __init__(self):
        super().__init__("Email is already in use!")


class AlreadyIdentifiedError(UserDirectoryError):
    error_key = "idexists"

    def __init__(self):
        super().__init__("A new user cannot already have an ID")


class UserNotFoundError(UserDirectoryError):
    error_key = "notfound"

    def __init__(self, user_id: int | None):
        super().__init__(f"User {user_id} not found")
        self.user_id = user_id


class NotificationError(UserDirectoryError):
    """The activation notification could not be dispatched."""

    error_key = "notifyfailed"


class StoreError(UserDirectoryError):
    """The user store reported an operational failure."""

    error_key = "system_error"
