from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Tuple

from cpop.components.board import Board, cells_from_grid, mutable_grid
from cpop.components.board_position import Position
from cpop.utils.tile_generator import TileGenerator


@dataclass(frozen=True, slots=True)
class GravityMove:
    source: Position
    target: Position
    tile_id: int


def remove_tiles(board: Board, positions: Iterable[Position]) -> Board:
    layout = mutable_grid(board)
    for row, col in positions:
        layout[row][col] = None
    return board.with_cells(cells_from_grid(layout))


def compute_gravity_moves(board: Board) -> List[GravityMove]:
    """Moves that compact every column toward the bottom (higher row index)."""
    moves: List[GravityMove] = []
    for col in range(board.cols):
        write_row = board.rows - 1
        for read_row in range(board.rows - 1, -1, -1):
            tile = board.cells[read_row][col]
            if tile is None:
                continue
            if read_row != write_row:
                moves.append(GravityMove(Position(read_row, col), Position(write_row, col), tile.id))
            write_row -= 1
    return moves


def apply_gravity(board: Board) -> Tuple[Board, List[GravityMove]]:
    moves = compute_gravity_moves(board)
    if not moves:
        return board, moves
    layout = mutable_grid(board)
    # Bottom-up order guarantees a target is vacated before anything lands on it.
    for move in moves:
        tile = layout[move.source.row][move.source.col]
        layout[move.source.row][move.source.col] = None
        layout[move.target.row][move.target.col] = tile.moved_to(*move.target)
    return board.with_cells(cells_from_grid(layout)), moves


def refill(board: Board) -> Tuple[Board, List[Position]]:
    """Fill empty cells top-down, column by column, with fresh base tiles."""
    generator = TileGenerator.resume(board.config, board.rng_state, next_id=board.next_id)
    layout = mutable_grid(board)
    spawned: List[Position] = []
    for col in range(board.cols):
        for row in range(board.rows):
            if layout[row][col] is None:
                layout[row][col] = generator.new_tile(row, col)
                spawned.append(Position(row, col))
    if not spawned:
        return board, spawned
    updated = board.with_cells(cells_from_grid(layout), rng_state=generator.state(), next_id=generator.next_id)
    return updated, spawned


def settle_columns(board: Board, cleared: Iterable[Position]) -> Tuple[Board, List[GravityMove], List[Position]]:
    """Remove cleared cells, drop survivors and refill; returns the full board plus metadata."""
    emptied = remove_tiles(board, cleared)
    dropped, moves = apply_gravity(emptied)
    filled, spawned = refill(dropped)
    return filled, moves, spawned
