"""ColumnPolicy -- maps a board column name to the metadata its cards carry.

The four Eisenhower quadrant columns put cards in the backlog with fixed
urgent/important flags. Any other column name becomes the status verbatim.
"""

from __future__ import annotations

from .types import TargetState

QUADRANT_STATUS = "backlog"

DEFAULT_QUADRANTS: dict[str, tuple[bool, bool]] = {
    "\u26aa Eliminate (NI & NU)": (False, False),
    "\U0001f7e0 Delegate (NI & U)": (True, False),
    "\U0001f7e1 Schedule (I & NU)": (False, True),
    "\U0001f534 Do First (I & U)": (True, True),
}


class ColumnPolicy:
    """Quadrant table plus the rule for plain status columns."""

    def __init__(
        self,
        quadrants: dict[str, tuple[bool, bool]],
        quadrant_status: str = QUADRANT_STATUS,
    ) -> None:
        self.quadrants = dict(quadrants)
        self.quadrant_status = quadrant_status

    def is_quadrant(self, column: str) -> bool:
        return column in self.quadrants

    def resolve(self, column: str) -> TargetState:
        """Target state for cards sitting in ``column``.

        Heading text must match a quadrant exactly, decorative emoji
        included; anything else is treated as a status column.
        """
        flags = self.quadrants.get(column)
        if flags is None:
            return TargetState(status=column)
        urgent, important = flags
        return TargetState(
            status=self.quadrant_status,
            urgent=urgent,
            important=important,
        )

    @staticmethod
    def default_policy() -> ColumnPolicy:
        """Build the policy with the stock quadrant headings."""
        return ColumnPolicy(DEFAULT_QUADRANTS)


def resolve(column: str) -> TargetState:
    """Resolve a column name with the default policy."""
    return _DEFAULT.resolve(column)


_DEFAULT = ColumnPolicy.default_policy()
