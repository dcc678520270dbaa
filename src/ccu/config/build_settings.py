"""
Build target groups and the selected-group accessors.

Each build target group owns its own symbol list. The host exposes the
selected group through a public accessor, and the group it is actually
building through an internal one that is only consulted when the public
accessor reports UNKNOWN.
"""

import logging
from enum import Enum
from typing import Callable, Optional, Union

logger = logging.getLogger(__name__)

ACTIVE_GROUP_ACCESSOR = "_active_group"


class BuildTargetGroup(Enum):
    """Build target group enumeration."""

    UNKNOWN = "unknown"
    STANDALONE = "standalone"
    SERVER = "server"
    ANDROID = "android"
    IOS = "ios"
    WEBGL = "webgl"

    @classmethod
    def from_string(cls, value: Optional[str]) -> "BuildTargetGroup":
        """Convert string to BuildTargetGroup, defaulting to UNKNOWN if invalid."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value.strip().lower())
        except ValueError:
            return cls.UNKNOWN


class BuildSettings:
    """
    The host's build selection.

    Attributes:
        selected_group: Group chosen in the host (may be UNKNOWN)
    """

    def __init__(
        self,
        selected_group: BuildTargetGroup = BuildTargetGroup.UNKNOWN,
        active_group: Union[BuildTargetGroup, Callable[[], BuildTargetGroup], None] = None,
    ):
        """
        Initialize build settings.

        Args:
            selected_group: Group reported by the public accessor
            active_group: Group (or callable returning it) the host is
                actually building; only used as a fallback
        """
        self.selected_group = selected_group
        self._active_group = active_group


def resolve_group(settings: BuildSettings) -> BuildTargetGroup:
    """
    Resolve the build target group a pass should operate on.

    When the selected group is UNKNOWN the internal active-group accessor is
    probed by name. If that is also missing, UNKNOWN is returned and the
    symbol store applies its own default behavior for it.

    Args:
        settings: Host build settings

    Returns:
        Resolved group, possibly UNKNOWN
    """
    group = settings.selected_group
    if group is not BuildTargetGroup.UNKNOWN:
        return group

    accessor = getattr(settings, ACTIVE_GROUP_ACCESSOR, None)
    if accessor is None:
        return group

    fallback = accessor() if callable(accessor) else accessor
    if isinstance(fallback, BuildTargetGroup):
        logger.debug(f"Selected group unknown, using active group {fallback.value}")
        return fallback
    return group
