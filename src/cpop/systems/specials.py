"""Decide which special tile (if any) a swap's first clear creates, and where."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from cpop.components.board_config import Ruleset
from cpop.components.board_position import Position
from cpop.components.tile import Axis, SpecialKind
from cpop.systems.match import Match, MatchGroup, group_matches

SPECIAL_RANK = {
    SpecialKind.SCREEN_CLEAR: 3,
    SpecialKind.COLOR_BOMB: 2,
    SpecialKind.AREA_BOMB: 1,
    SpecialKind.LINE_CLEAR: 1,
}


@dataclass(frozen=True, slots=True)
class SpecialPlan:
    position: Position
    kind: SpecialKind
    group: MatchGroup
    axis: Optional[Axis] = None


def classify_group(group: MatchGroup, ruleset: Ruleset) -> Optional[SpecialKind]:
    """Map a merged shape to a special kind using its deduplicated cell count and extent."""
    if group.size == 4:
        return ruleset.four_match_special
    if group.size >= 5:
        if group.is_straight():
            return SpecialKind.COLOR_BOMB
        return SpecialKind.SCREEN_CLEAR if ruleset.screen_clear_enabled else SpecialKind.COLOR_BOMB
    return None


def choose_special(
    matches: Iterable[Match],
    origin: Position,
    destination: Position,
    ruleset: Ruleset,
) -> Optional[SpecialPlan]:
    """Pick at most one special for the swap.

    The strongest qualifying group wins; ties go to the group holding the swap
    destination, then the origin, then the group with the smallest cell.
    """
    candidates = []
    for group in group_matches(matches):
        kind = classify_group(group, ruleset)
        if kind is not None:
            candidates.append((group, kind))
    if not candidates:
        return None

    def _priority(item):
        group, kind = item
        if destination in group.positions:
            proximity = 0
        elif origin in group.positions:
            proximity = 1
        else:
            proximity = 2
        return (-SPECIAL_RANK[kind], proximity, min(group.positions))

    group, kind = min(candidates, key=_priority)
    if destination in group.positions:
        position = destination
    elif origin in group.positions:
        position = origin
    else:
        position = min(group.positions)
    axis = _line_axis(group) if kind is SpecialKind.LINE_CLEAR else None
    return SpecialPlan(position=position, kind=kind, group=group, axis=axis)


def _line_axis(group: MatchGroup) -> Axis:
    longest = max(group.matches, key=lambda match: match.size)
    if longest.axis is not None:
        return longest.axis
    return Axis.ROW if group.width >= group.height else Axis.COL
