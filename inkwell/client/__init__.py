from inkwell.client.api import InkwellAPIError, InkwellClient
from inkwell.client.optimistic import (
    OptimisticToggle,
    ToggleSnapshot,
    ToggleState,
    follow_toggle,
    post_like_toggle,
)

__all__ = [
    "InkwellAPIError",
    "InkwellClient",
    "OptimisticToggle",
    "ToggleSnapshot",
    "ToggleState",
    "follow_toggle",
    "post_like_toggle",
]
