"""
Plausibility scoring for mileage candidates.

Without a prior mileage the score is

    0.40 * digit count plausibility
  + 0.25 * range plausibility
  + 0.35 * recognizer confidence

With a prior mileage most of the digit count and range weight moves to a
proximity term that favours readings at or slightly above the prior.
Either way an optional bonus rewards text rendered larger than the rest
of the run.
"""
from typing import Optional

from .contracts import ObservationMetadata


# Weights without a prior mileage
DIGIT_COUNT_WEIGHT = 0.40
RANGE_WEIGHT = 0.25
CONFIDENCE_WEIGHT = 0.35

# Weights with a prior mileage
PRIOR_DIGIT_COUNT_WEIGHT = 0.15
PRIOR_RANGE_WEIGHT = 0.10
PRIOR_CONFIDENCE_WEIGHT = 0.35
PROXIMITY_WEIGHT = 0.40

AREA_WEIGHT = 0.15

# Proximity to the prior mileage
PRIOR_NEAR_WINDOW = 5_000
PRIOR_DECAY_SPAN = 100_000
FAR_ABOVE_FLOOR = 0.2
BELOW_PRIOR_CEILING = 0.1

TYPICAL_RANGE = (10_000, 300_000)

_DIGIT_COUNT_SCORES = {
    6: 1.0,  # 100,000 - 999,999
    5: 0.9,  # 10,000 - 99,999
    7: 0.8,  # 1,000,000
    4: 0.5,  # 1,000 - 9,999
    3: 0.2,  # 100 - 999
}


def digit_count_plausibility(mileage: int) -> float:
    """Odometers usually show 5-6 digits; 1-2 digits is noise or a trip meter."""
    return _DIGIT_COUNT_SCORES.get(len(str(abs(mileage))), 0.1)


def range_plausibility(mileage: int) -> float:
    """1.0 inside the typical range, smaller but never zero outside it."""
    low, high = TYPICAL_RANGE
    if low <= mileage <= high:
        return 1.0
    if 1_000 <= mileage < low:
        return 0.7
    if high < mileage <= 500_000:
        return 0.6
    if 500_000 < mileage <= 999_999:
        return 0.4
    if 100 <= mileage < 1_000:
        return 0.3
    return 0.1


def proximity_plausibility(mileage: int, prior_mileage: int) -> float:
    """
    How well a reading fits the vehicle's last known mileage.

    Readings from the prior up to PRIOR_NEAR_WINDOW above it score 1.0.
    Further above, the score falls linearly to FAR_ABOVE_FLOOR. Readings
    below the prior never exceed BELOW_PRIOR_CEILING since an odometer does
    not run backwards.
    """
    if mileage >= prior_mileage:
        excess = mileage - prior_mileage - PRIOR_NEAR_WINDOW
        if excess <= 0:
            return 1.0
        decay = min(excess / PRIOR_DECAY_SPAN, 1.0)
        return 1.0 - (1.0 - FAR_ABOVE_FLOOR) * decay

    # prior_mileage > mileage >= 0 here
    return BELOW_PRIOR_CEILING * mileage / prior_mileage


def area_bonus(metadata: Optional[ObservationMetadata], max_area: Optional[float]) -> float:
    """Bonus for text that is large relative to the largest text in the run."""
    if metadata is None or not max_area or max_area <= 0:
        return 0.0
    ratio = min(max(metadata.area / max_area, 0.0), 1.0)
    return AREA_WEIGHT * ratio


def score_candidate(
    mileage: int,
    confidence: float,
    metadata: Optional[ObservationMetadata] = None,
    max_area: Optional[float] = None,
    prior_mileage: Optional[int] = None,
) -> float:
    """
    Score one mileage candidate; higher is more plausible.

    Args:
        mileage: Candidate reading
        confidence: Recognizer confidence of the source observation (0-1)
        metadata: Bounding box information of the source observation
        max_area: Largest observation area seen in the current run
        prior_mileage: Last known mileage of the vehicle

    Returns:
        Plausibility score
    """
    digit_score = digit_count_plausibility(mileage)
    range_score = range_plausibility(mileage)

    if prior_mileage is None:
        score = (
            DIGIT_COUNT_WEIGHT * digit_score
            + RANGE_WEIGHT * range_score
            + CONFIDENCE_WEIGHT * confidence
        )
    else:
        score = (
            PRIOR_DIGIT_COUNT_WEIGHT * digit_score
            + PRIOR_RANGE_WEIGHT * range_score
            + PRIOR_CONFIDENCE_WEIGHT * confidence
            + PROXIMITY_WEIGHT * proximity_plausibility(mileage, prior_mileage)
        )

    return score + area_bonus(metadata, max_area)
