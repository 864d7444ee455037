"""
Elevation processing utilities.

This is the SINGLE SOURCE OF TRUTH for elevation calculations.
"""
from typing import Optional, Sequence, Tuple


def calculate_elevation_changes(
    elevations: Sequence[Optional[float]]
) -> Tuple[float, float]:
    """
    Calculate total elevation gain and loss.

    Pairs where either value is missing are skipped, so a gap in
    the elevation data never produces a jump.

    Args:
        elevations: Elevation values in path order (None allowed)

    Returns:
        Tuple of (gain_m, loss_m)
    """
    gain = 0.0
    loss = 0.0

    for i in range(1, len(elevations)):
        previous = elevations[i - 1]
        current = elevations[i]
        if previous is None or current is None:
            continue

        diff = current - previous
        if diff > 0:
            gain += diff
        else:
            loss += abs(diff)

    return gain, loss


def elevation_range(
    elevations: Sequence[Optional[float]]
) -> Tuple[float, float]:
    """
    Min and max of the known elevations.

    Returns:
        Tuple of (min_m, max_m); (0, 0) when no elevation is known
    """
    known = [e for e in elevations if e is not None]
    if not known:
        return 0.0, 0.0
    return min(known), max(known)
