from dataclasses import dataclass

from cpop.components.board import Board


@dataclass(slots=True)
class BoardState:
    """Session component pointing at the board value currently on screen."""
    board: Board
