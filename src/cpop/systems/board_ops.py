from __future__ import annotations

import logging
from collections import deque
from typing import List, Mapping, Optional, Set, Tuple, Union

from cpop.components.board import Board, cells_from_grid, mutable_grid
from cpop.components.board_config import BoardConfig, MatchRule
from cpop.components.board_position import Position, PositionLike, as_position
from cpop.components.tile import Tile
from cpop.errors import InvalidPosition, NotAdjacent
from cpop.systems.match import find_matches, has_match_through
from cpop.utils import grid as geometry
from cpop.utils.tile_generator import TileGenerator

logger = logging.getLogger(__name__)

Grid = List[List[Optional[Tile]]]
Swap = Tuple[Position, Position]


def create_board(config: Union[BoardConfig, Mapping]) -> Board:
    """Fill every cell with generated base tiles, re-rolling layouts that start with a match.

    When ``config.ensure_playable`` is set the layout should also offer at least one
    valid swap. Grids too small to ever offer one (1x1, 2x2...) fall back to the
    first match-free layout rolled.
    """
    if not isinstance(config, BoardConfig):
        config = BoardConfig.from_mapping(config)
    generator = TileGenerator.seeded(config)
    stable: Optional[Board] = None
    for attempt in range(config.max_attempts):
        generator.next_id = 0
        layout = _roll_layout(config, generator, keep=None)
        board = Board(config, cells_from_grid(layout), rng_state=generator.state(), next_id=generator.next_id)
        if find_matches(board):
            continue
        if not config.ensure_playable or has_valid_move(board):
            logger.debug("Board %dx%d ready after %d attempt(s)", config.rows, config.cols, attempt + 1)
            return board
        if stable is None:
            stable = board
    if stable is not None:
        logger.warning("No %dx%d layout with a valid swap after %d attempts, using one without",
                       config.rows, config.cols, config.max_attempts)
        return stable
    raise RuntimeError("Unable to create board without matches")


def reshuffle(board: Board) -> Board:
    """Re-roll every base tile (new ids) keeping specials in place; used on stalemate."""
    generator = TileGenerator.resume(board.config, board.rng_state, next_id=board.next_id)
    for _ in range(board.config.max_attempts):
        layout = _roll_layout(board.config, generator, keep=board)
        candidate = board.with_cells(cells_from_grid(layout), rng_state=generator.state(), next_id=generator.next_id)
        if not find_matches(candidate) and has_valid_move(candidate):
            return candidate
    raise RuntimeError("Unable to reshuffle board into a playable layout")


def _roll_layout(config: BoardConfig, generator: TileGenerator, keep: Optional[Board]) -> Grid:
    layout: Grid = [[None] * config.cols for _ in range(config.rows)]
    for row in range(config.rows):
        for col in range(config.cols):
            if keep is not None:
                existing = keep.cells[row][col]
                if existing is not None and existing.is_special:
                    layout[row][col] = existing
                    continue
            if config.match_rule is MatchRule.FLOOD:
                excluded = _flood_exclusions(config, layout, Position(row, col))
            else:
                excluded = _line_exclusions(layout, row, col)
            layout[row][col] = generator.new_tile(row, col, exclude=excluded)
    return layout


def _line_exclusions(layout: Grid, row: int, col: int) -> Set[str]:
    excluded: Set[str] = set()
    # Prevent horizontal triple: if last two cells share a kind, exclude it.
    if col >= 2:
        left1, left2 = _kind(layout, row, col - 1), _kind(layout, row, col - 2)
        if left1 is not None and left1 == left2:
            excluded.add(left1)
    # Prevent vertical triple the same way.
    if row >= 2:
        up1, up2 = _kind(layout, row - 1, col), _kind(layout, row - 2, col)
        if up1 is not None and up1 == up2:
            excluded.add(up1)
    return excluded


def _flood_exclusions(config: BoardConfig, layout: Grid, pos: Position) -> Set[str]:
    """Kinds that would join already placed neighbours into a region >= min_match."""
    offsets = geometry.neighbor_offsets(config.shape)
    excluded: Set[str] = set()
    for kind in config.palette:
        seen: Set[Position] = {pos}
        queue = deque([pos])
        while queue and len(seen) < config.min_match:
            current = queue.popleft()
            for neighbor in geometry.offset_cells(current, offsets, config.rows, config.cols):
                if neighbor in seen or _kind(layout, *neighbor) != kind:
                    continue
                seen.add(neighbor)
                queue.append(neighbor)
        if len(seen) >= config.min_match:
            excluded.add(kind)
    return excluded


def _kind(layout: Grid, row: int, col: int) -> Optional[str]:
    tile = layout[row][col]
    return tile.kind if tile is not None else None


def is_adjacent(a: PositionLike, b: PositionLike, board: Optional[Board] = None) -> bool:
    """True when the positions are one neighbour step apart on the board's grid."""
    if board is None:
        return geometry.is_adjacent(a, b)
    return geometry.is_adjacent(a, b, board.shape)


def validate_move(board: Board, a: PositionLike, b: PositionLike) -> Swap:
    """Normalise and check a swap request; raises before any board change."""
    src, dst = as_position(a), as_position(b)
    for pos in (src, dst):
        if not board.in_bounds(pos):
            raise InvalidPosition(f"Position {tuple(pos)} is outside the {board.rows}x{board.cols} board", src, dst)
    if not is_adjacent(src, dst, board):
        raise NotAdjacent(f"Positions {tuple(src)} and {tuple(dst)} are not neighbours", src, dst)
    return src, dst


def swap_tiles(board: Board, a: PositionLike, b: PositionLike) -> Board:
    """Exchange the tiles at two cells; each cell keeps its own position fields."""
    src, dst = as_position(a), as_position(b)
    for pos in (src, dst):
        if not board.in_bounds(pos):
            raise InvalidPosition(f"Position {tuple(pos)} is outside the {board.rows}x{board.cols} board", src, dst)
    layout = mutable_grid(board)
    src_tile = layout[src.row][src.col]
    dst_tile = layout[dst.row][dst.col]
    layout[src.row][src.col] = dst_tile.moved_to(*src) if dst_tile is not None else None
    layout[dst.row][dst.col] = src_tile.moved_to(*dst) if src_tile is not None else None
    return board.with_cells(cells_from_grid(layout))


def predict_swap_creates_match(board: Board, a: PositionLike, b: PositionLike) -> bool:
    src, dst = as_position(a), as_position(b)
    return has_match_through(swap_tiles(board, src, dst), (src, dst))


def find_valid_swaps(board: Board) -> List[Swap]:
    """Enumerate neighbour swaps that would be accepted: a match forms or a special is involved."""
    swaps: List[Swap] = []
    for pos in board.positions():
        for other in board.neighbors(pos):
            if other <= pos:
                continue
            first, second = board.tile_at(pos), board.tile_at(other)
            if first is None or second is None:
                continue
            if first.is_special or second.is_special or predict_swap_creates_match(board, pos, other):
                swaps.append((pos, other))
    return swaps


def has_valid_move(board: Board) -> bool:
    return bool(find_valid_swaps(board))
