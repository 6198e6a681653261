"""Repository errors shared by every storage backend."""


class RepositoryError(RuntimeError):
    """Raised when the storage backend fails unexpectedly."""


class DuplicateUserError(Exception):
    """Username or email is already registered."""


class UserNotFoundError(Exception):
    """No user matches the given username or email."""


class InvalidCredentialsError(Exception):
    """Password does not match the stored credential."""


class DuplicateGameError(Exception):
    """A catalog entry with the same name or slug already exists."""
