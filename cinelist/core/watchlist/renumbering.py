"""
Parked renumbering of watchlist positions.

Positions are unique per list, so rewriting them row by row can collide with
a value another row still holds, both in multi-row UPDATE statements and in
flush order. Every position change therefore goes through two phases inside
the caller's transaction:

1. park: move the affected rows to ``position + PARK_OFFSET (+ delta)``,
   a range no final position can occupy;
2. finalize: write the final values, either by subtracting PARK_OFFSET again
   (shifts) or by assigning 1..N explicitly (reorders).

A failure in either phase propagates and the surrounding session_scope
rolls the whole transaction back.
"""

import logging
from typing import List, Sequence

from sqlalchemy.orm import Session

from cinelist.database import crud

logger = logging.getLogger(__name__)

# Larger than any realistic list length
PARK_OFFSET = 1_000_000


def clamp_position(position: int, upper: int) -> int:
    """Clamp a requested 1-based position into ``[1, upper]``."""
    return max(1, min(position, upper))


def move_to(order: Sequence[str], movie_id: str, new_position: int) -> List[str]:
    """
    Return a new order with ``movie_id`` moved to ``new_position``.

    Args:
        order: Movie ids in current position order
        movie_id: Id to move; must be present in ``order``
        new_position: 1-based target, clamped to ``[1, len(order)]``

    Returns:
        New list of movie ids
    """
    new_order = [m for m in order if m != movie_id]
    index = clamp_position(new_position, len(order)) - 1
    new_order.insert(index, movie_id)
    return new_order


def shift_positions(
    session: Session,
    watchlist_id: int,
    from_position: int,
    delta: int
) -> int:
    """
    Shift every item at or above ``from_position`` by ``delta``.

    Used to open a slot before an insert (delta=+1) and to close the gap
    after a removal (delta=-1).

    Returns:
        Number of items shifted
    """
    parked = crud.offset_positions(
        session, watchlist_id, PARK_OFFSET + delta, min_position=from_position
    )
    if parked:
        crud.offset_positions(session, watchlist_id, -PARK_OFFSET, min_position=PARK_OFFSET)
    session.expire_all()
    logger.debug(
        f"Shifted {parked} items of watchlist {watchlist_id} from position {from_position} by {delta}"
    )
    return parked


def renumber(session: Session, watchlist_id: int, ordered_movie_ids: Sequence[str]) -> None:
    """
    Assign positions 1..N to a watchlist following ``ordered_movie_ids``.

    Args:
        session: Database session (the caller's transaction)
        watchlist_id: Watchlist ID
        ordered_movie_ids: Every movie id of the list, in the desired order
    """
    # Phase 1: park everything out of the 1..N range
    crud.offset_positions(session, watchlist_id, PARK_OFFSET)

    # Phase 2: final positions
    for position, movie_id in enumerate(ordered_movie_ids, start=1):
        crud.set_position(session, watchlist_id, movie_id, position)

    session.expire_all()
