from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from cpop.components.board import Board
from cpop.components.board_config import MatchRule
from cpop.components.board_position import Position, PositionLike, as_position
from cpop.components.tile import Axis


@dataclass(frozen=True, slots=True)
class Match:
    """A maximal same-kind run (``axis`` set) or flood-fill region (``axis`` None)."""
    kind: str
    positions: FrozenSet[Position]
    axis: Optional[Axis] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", _positions(self.positions))

    @property
    def size(self) -> int:
        return len(self.positions)

    def sorted_positions(self) -> List[Position]:
        return sorted(self.positions)


@dataclass(frozen=True, slots=True)
class MatchGroup:
    """Intersecting matches of one kind merged into a single shape (T, L, plus...)."""
    kind: str
    positions: FrozenSet[Position]
    matches: Tuple[Match, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "positions", _positions(self.positions))

    @property
    def size(self) -> int:
        return len(self.positions)

    @property
    def height(self) -> int:
        rows = [pos.row for pos in self.positions]
        return max(rows) - min(rows) + 1

    @property
    def width(self) -> int:
        cols = [pos.col for pos in self.positions]
        return max(cols) - min(cols) + 1

    def is_straight(self) -> bool:
        return self.height == 1 or self.width == 1

    def longest_run(self) -> int:
        return max(match.size for match in self.matches)


def _positions(cells: Iterable[PositionLike]) -> FrozenSet[Position]:
    return frozenset(as_position(cell) for cell in cells)


def find_matches(board: Board) -> FrozenSet[Match]:
    """Detect every match on the board according to its match rule."""
    if board.config.match_rule is MatchRule.FLOOD:
        return frozenset(_flood_regions(board))
    return frozenset(_line_runs(board, Axis.ROW) + _line_runs(board, Axis.COL))


def _line_runs(board: Board, axis: Axis) -> List[Match]:
    minimum = board.config.min_match
    outer, inner = (board.rows, board.cols) if axis is Axis.ROW else (board.cols, board.rows)
    matches: List[Match] = []
    for major in range(outer):
        run: List[Position] = []
        last_kind = None
        for minor in range(inner):
            pos = Position(major, minor) if axis is Axis.ROW else Position(minor, major)
            kind = board.kind_at(pos)
            if kind is not None and kind == last_kind:
                run.append(pos)
                continue
            if len(run) >= minimum:
                matches.append(Match(last_kind, frozenset(run), axis))
            run = [pos] if kind is not None else []
            last_kind = kind
        if len(run) >= minimum:
            matches.append(Match(last_kind, frozenset(run), axis))
    return matches


def _flood_regions(board: Board) -> List[Match]:
    minimum = board.config.min_match
    visited: Set[Position] = set()
    matches: List[Match] = []
    for start in board.positions():
        if start in visited:
            continue
        kind = board.kind_at(start)
        if kind is None:
            continue
        region = [start]
        visited.add(start)
        queue = deque([start])
        while queue:
            current = queue.popleft()
            for neighbor in board.neighbors(current):
                if neighbor in visited or board.kind_at(neighbor) != kind:
                    continue
                visited.add(neighbor)
                region.append(neighbor)
                queue.append(neighbor)
        if len(region) >= minimum:
            matches.append(Match(kind, frozenset(region)))
    return matches


def clear_set(matches: Iterable[Match]) -> FrozenSet[Position]:
    """Union of all matched positions; intersecting runs contribute each cell once."""
    positions: Set[Position] = set()
    for match in matches:
        positions |= match.positions
    return frozenset(positions)


def group_matches(matches: Iterable[Match]) -> List[MatchGroup]:
    """Merge same-kind matches that share a cell. Groups come back in a stable order."""
    pending = sorted(matches, key=lambda m: (m.sorted_positions()[0], m.axis is Axis.COL))
    groups: List[MatchGroup] = []
    while pending:
        first = pending.pop(0)
        members = [first]
        cells = set(first.positions)
        changed = True
        while changed:
            changed = False
            for candidate in pending[:]:
                if candidate.kind == first.kind and cells & candidate.positions:
                    cells |= candidate.positions
                    members.append(candidate)
                    pending.remove(candidate)
                    changed = True
        groups.append(MatchGroup(first.kind, frozenset(cells), tuple(members)))
    return groups


def has_match_through(board: Board, positions: Iterable[Position]) -> bool:
    targets = set(positions)
    return any(match.positions & targets for match in find_matches(board))
