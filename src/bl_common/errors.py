"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: User
  2xxx: Post
  9xxx: System / input
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: User ---

class UserNotFoundError(AppError):
    def __init__(self, user_id: int) -> None:
        super().__init__(1001, f"User not found: {user_id}", 404)


class EmailExistsError(AppError):
    def __init__(self, email: str | None = None) -> None:
        detail = f": {email}" if email else ""
        super().__init__(1002, f"Email already exists{detail}", 409)


# --- 2xxx: Post ---

class PostNotFoundError(AppError):
    def __init__(self, post_id: int) -> None:
        super().__init__(2001, f"Post not found: {post_id}", 404)


# --- 9xxx: System ---

class InvalidPaginationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9001, f"Invalid pagination: {detail}", 422)


class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class CacheUnavailableError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Cache unavailable: {detail}", 503)


class InvalidInputError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Invalid input: {detail}", 422)
