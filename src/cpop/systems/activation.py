from __future__ import annotations

from collections import Counter, deque
from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Set, Tuple

from cpop.components.board import Board
from cpop.components.board_position import Position
from cpop.components.tile import Axis, SpecialKind, Tile
from cpop.utils.grid import offset_cells, ring_offsets


@dataclass(frozen=True, slots=True)
class Activation:
    """One special tile going off: where, what, and every cell it reaches."""
    position: Position
    kind: SpecialKind
    affected: FrozenSet[Position]
    target_kind: Optional[str] = None


def most_common_kind(board: Board) -> Optional[str]:
    counts = Counter(board.kind_map().values())
    if not counts:
        return None
    order = {kind: index for index, kind in enumerate(board.config.palette)}
    return max(counts, key=lambda kind: (counts[kind], -order.get(kind, len(order))))


def activate(board: Board, pos: Position, partner: Optional[Tile] = None, *, by_swap: bool = False) -> Activation:
    """Affected cells for the special at ``pos``.

    ``partner`` is the tile it was swapped with when ``by_swap`` is set. A
    colour bomb swapped with another special has no colour to target.
    """
    tile = board.tile_at(pos)
    if tile is None or tile.special is None:
        raise ValueError(f"No special tile at {tuple(pos)}")
    special = tile.special
    target_kind: Optional[str] = None
    if special is SpecialKind.AREA_BOMB:
        cells = {pos, *offset_cells(pos, ring_offsets(board.shape), board.rows, board.cols)}
    elif special is SpecialKind.COLOR_BOMB:
        if by_swap:
            if partner is not None and not partner.is_special:
                target_kind = partner.kind
        else:
            target_kind = most_common_kind(board)
        cells = {pos}
        if target_kind is not None:
            cells |= {p for p, kind in board.kind_map().items() if kind == target_kind}
    elif special is SpecialKind.SCREEN_CLEAR:
        cells = set(board.positions())
    else:
        if tile.axis is Axis.COL:
            cells = {Position(row, pos.col) for row in range(board.rows)}
        else:
            cells = {Position(pos.row, col) for col in range(board.cols)}
    affected = frozenset(p for p in cells if board.tile_at(p) is not None)
    return Activation(position=pos, kind=special, affected=affected, target_kind=target_kind)


def expand_clear_set(
    board: Board,
    initial: Iterable[Position],
    *,
    swap_partners: Mapping[Position, Optional[Tile]] | None = None,
    protected: Iterable[Position] = (),
) -> Tuple[FrozenSet[Position], List[Activation]]:
    """Grow a clear-set until every special inside it has gone off.

    ``swap_partners`` maps a swapped special's cell to the tile it was swapped
    with; those activate as swap activations. ``protected`` cells (a freshly
    promoted special) are never cleared.
    """
    partners: Dict[Position, Optional[Tile]] = dict(swap_partners or {})
    shielded: Set[Position] = set(protected)
    cleared: Set[Position] = set()
    queue: deque = deque()
    for pos in sorted(set(initial) | set(partners)):
        if pos in shielded or board.tile_at(pos) is None:
            continue
        cleared.add(pos)
        queue.append(pos)
    activations: List[Activation] = []
    fired: Set[Position] = set()
    while queue:
        pos = queue.popleft()
        tile = board.tile_at(pos)
        if tile is None or tile.special is None or pos in fired:
            continue
        fired.add(pos)
        activation = activate(board, pos, partners.get(pos), by_swap=pos in partners)
        activations.append(activation)
        for cell in sorted(activation.affected):
            if cell in cleared or cell in shielded:
                continue
            cleared.add(cell)
            queue.append(cell)
    return frozenset(cleared), activations


def wave_order(positions: Iterable[Position]) -> Tuple[Tuple[Position, ...], ...]:
    """Row-by-row sequence presentation plays for a screen clear."""
    rows: Dict[int, List[Position]] = {}
    for pos in sorted(positions):
        rows.setdefault(pos.row, []).append(pos)
    return tuple(tuple(rows[row]) for row in sorted(rows))
