from typing import Callable, Dict

from blinker import Signal

Handler = Callable[..., None]


class EventBus:
    """Named blinker signals shared by the session systems.

    Handlers receive the bus as sender and the payload as keyword arguments.
    """

    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn: Handler):
        signal = self._signals.setdefault(name, Signal(name))
        # Strong refs: systems are usually constructed without being stored.
        signal.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn: Handler):
        signal = self._signals.get(name)
        if signal is not None:
            signal.disconnect(fn)

    def emit(self, name: str, **payload):
        signal = self._signals.get(name)
        if signal is not None:
            signal.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                                # payload: dt=float


# ============================================================================
# SWAP REQUESTS
# ============================================================================
EVENT_TILE_SWAP_REQUEST = "tile_swap_request"      # payload: src=(r,c), dst=(r,c)
EVENT_TILE_SWAP_REJECTED = "tile_swap_rejected"    # payload: src, dst, reason=str, message=str
EVENT_TILE_SWAP_INVALID = "tile_swap_invalid"      # payload: src, dst, attempted=Board
EVENT_TILE_SWAP_VALID = "tile_swap_valid"          # payload: src, dst


# ============================================================================
# RESOLUTION STEPS
# ============================================================================
EVENT_MATCH_CLEARED = "match_cleared"              # payload: positions=[(r,c),...], depth=int
EVENT_SPECIAL_CREATED = "special_created"          # payload: position=(r,c), kind=str
EVENT_SPECIAL_ACTIVATED = "special_activated"      # payload: position=(r,c), kind=str, affected=[(r,c),...], wave=tuple
EVENT_GRAVITY_APPLIED = "gravity_applied"          # payload: moves=[{'from','to','tile_id'},...]
EVENT_REFILL_COMPLETED = "refill_completed"        # payload: new_tiles=[(r,c),...]
EVENT_SCORE_CHANGED = "score_changed"              # payload: delta=int, total=int, multiplier=int
EVENT_CASCADE_STEP = "cascade_step"                # payload: depth=int, positions=[(r,c),...]
EVENT_CASCADE_COMPLETE = "cascade_complete"        # payload: depth=int, score=int
EVENT_BOARD_RESHUFFLED = "board_reshuffled"        # payload: reason=str
EVENT_BOARD_CHANGED = "board_changed"              # payload: reason=str
