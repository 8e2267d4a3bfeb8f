"""
Inkwell: domain-specific HTTP exceptions.

Every exception carries a preset status code and detail message so callers
never specify these at the call site. Four families map the error taxonomy
of the social graph and engagement core:

  NotFound          404  referenced user / post / comment / reply is missing
  Forbidden         403  actor is neither the owner nor an admin
  InvalidOperation  400  e.g. following yourself
  ConsistencyFault  500  a post-condition re-check did not converge

Notification failures never surface here; the emitter logs and drops them.
"""
from fastapi import HTTPException, status


# ── NotFound ──────────────────────────────────────────────────────────────────

class NotFound(HTTPException):
    def __init__(self, resource: str = "Resource") -> None:
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"{resource} not found.",
        )


class UserNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("User")


class PostNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Post")


class CommentNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Comment")


class ReplyNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Reply")


class NotificationNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Notification")


# ── Forbidden ─────────────────────────────────────────────────────────────────

class Forbidden(HTTPException):
    def __init__(self, action: str = "perform this action") -> None:
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"Not authorized to {action}.",
        )


# ── InvalidOperation ──────────────────────────────────────────────────────────

class InvalidOperation(HTTPException):
    def __init__(self, detail: str = "Invalid operation.") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class CannotFollowSelf(InvalidOperation):
    def __init__(self) -> None:
        super().__init__("You cannot follow yourself.")


class FollowLimitExceeded(InvalidOperation):
    def __init__(self) -> None:
        super().__init__("You have reached the maximum number of accounts you can follow.")


# ── Conflict ──────────────────────────────────────────────────────────────────

class UserAlreadyExists(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="A user with this username or email already exists.",
        )


# ── Rate limiting ─────────────────────────────────────────────────────────────

class CommentRateLimited(HTTPException):
    def __init__(self, limit: int, window_seconds: int) -> None:
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many comments. Limit is {limit} per {window_seconds} seconds.",
        )


# ── ConsistencyFault ──────────────────────────────────────────────────────────

class ConsistencyFault(HTTPException):
    """A write did not converge to the state it was meant to produce.

    Needs operator attention or a reconciliation run; never retried silently.
    """

    def __init__(self, detail: str) -> None:
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )


# ── Service-to-service ────────────────────────────────────────────────────────

class InternalTokenInvalid(HTTPException):
    def __init__(self) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid internal service token.",
        )
