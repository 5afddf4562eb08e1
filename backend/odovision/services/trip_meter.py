"""
Trip meter discrimination.

Odometer displays often show a small, resettable trip reading next to the
main odometer. Such readings are far below the largest reading of the run.
"""
from typing import Callable, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_FRACTION = 0.1
DEFAULT_MIN_GAP = 1000


def discard_trip_meter(
    items: List[T],
    key: Optional[Callable[[T], int]] = None,
    fraction: float = DEFAULT_FRACTION,
    min_gap: int = DEFAULT_MIN_GAP,
) -> List[T]:
    """
    Drop readings that are almost certainly a trip meter.

    A reading is dropped when it is below `fraction` of the largest reading
    AND more than `min_gap` below it. Order of the survivors is preserved.

    Args:
        items: Mileage values or objects carrying one
        key: Returns the mileage of an item (identity when None)
        fraction: Relative threshold against the largest reading
        min_gap: Absolute gap to the largest reading

    Returns:
        New list with trip meter readings removed
    """
    if len(items) < 2:
        return list(items)

    mileage_of = key or (lambda item: item)
    max_mileage = max(mileage_of(item) for item in items)

    return [
        item for item in items
        if not (
            mileage_of(item) < max_mileage * fraction
            and max_mileage - mileage_of(item) > min_gap
        )
    ]
