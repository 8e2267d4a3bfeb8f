import enum

import sqlalchemy as sa

from inkwell.shared.constants import Role


class LikeTargetType(str, enum.Enum):
    POST = "POST"
    COMMENT = "COMMENT"
    REPLY = "REPLY"


class NotificationType(str, enum.Enum):
    LIKE = "like"
    COMMENT = "comment"
    REPLY = "reply"
    FOLLOW = "follow"


def _values(e: type[enum.Enum]) -> list[str]:
    return [x.value for x in e]


like_target_type_enum = sa.Enum(
    LikeTargetType, name="liketargettype", values_callable=_values
)
notification_type_enum = sa.Enum(
    NotificationType, name="notificationtype", values_callable=_values
)
user_role_enum = sa.Enum(Role, name="userrole", values_callable=_values)
