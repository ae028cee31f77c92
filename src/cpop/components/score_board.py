from dataclasses import dataclass


@dataclass(slots=True)
class ScoreBoard:
    """Running score shown by the presentation layer.

    ``multiplier`` mirrors the combo of the step being shown and drops back to 1
    once the cascade completes.
    """
    total: int = 0
    multiplier: int = 1
    last_delta: int = 0
    moves: int = 0
