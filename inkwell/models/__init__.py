from inkwell.models.comment import Comment, Reply
from inkwell.models.follow import Follow
from inkwell.models.like import Like
from inkwell.models.notification import Notification
from inkwell.models.post import Post
from inkwell.models.user import User

__all__ = [
    "User",
    "Follow",
    "Post",
    "Comment",
    "Reply",
    "Like",
    "Notification",
]
