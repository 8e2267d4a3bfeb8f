"""
Social graph domain: limits and result messages.
"""
from __future__ import annotations

# Hard limit on the number of users one account can follow
FOLLOW_LIMIT: int = 5_000

MSG_FOLLOWED = "followed"
MSG_ALREADY_FOLLOWING = "already following"
MSG_UNFOLLOWED = "unfollowed"
MSG_NOT_FOLLOWING = "not following"
