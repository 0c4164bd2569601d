"""
Fractional ordering keys for pool members.

Members are ordered by a REAL position. Appending takes the next whole number
after the current maximum; moving a member gives it the midpoint between its
new neighbours, so a reorder rewrites exactly one row.
"""

import math
from typing import List, Optional, Sequence

from utils.errors import NotFoundError


def next_append_position(max_position: Optional[float]) -> float:
    """Position for a new last member. An empty pool starts at 1.0."""
    return math.floor(max_position or 0.0) + 1.0


def position_for_move(positions: Sequence[float], source_index: int, destination_index: int) -> float:
    """
    Position that puts the member at source_index at destination_index.

    positions must be the current positions in ascending order. Indices are
    0-based and must both be inside the sequence.

    Raises:
        NotFoundError: If either index is out of range
    """
    count = len(positions)
    if not 0 <= source_index < count or not 0 <= destination_index < count:
        raise NotFoundError("Pool position out of range")
    if source_index == destination_index:
        return positions[source_index]

    last_index = count - 1

    if destination_index > source_index:
        # The member lands after the one currently at destination
        lower = positions[destination_index]
        if destination_index == last_index:
            upper = positions[last_index] + 2.0
        else:
            upper = positions[destination_index + 1]
    else:
        # The member lands before the one currently at destination
        lower = positions[destination_index - 1] if destination_index > 0 else 0.0
        upper = positions[destination_index]

    return (lower + upper) / 2.0


def respaced_positions(count: int) -> List[float]:
    """Evenly spaced positions 1.0, 2.0, ... for a pool of `count` members."""
    return [float(index) for index in range(1, count + 1)]
