"""Turn intensity percentages into concrete loads from a lifter's 1RMs."""

import logging
import math
from collections.abc import Iterable

from ..models.program import WorkoutWeek

log = logging.getLogger(__name__)

DEFAULT_WEIGHT_INCREMENT = 2.5


def one_rep_max_map(records: list[dict]) -> dict[str, float]:
    """Build an exercise ID -> 1RM (kg) lookup from ``{exerciseId, oneRepMax}`` records.

    Raises:
        ValueError: If the records are not a list of such objects
    """
    if not isinstance(records, list):
        raise ValueError(f"1RM records must be a list, got {type(records).__name__}")

    lookup = {}
    for record in records:
        if not isinstance(record, dict) or "exerciseId" not in record or "oneRepMax" not in record:
            raise ValueError(f"1RM record needs exerciseId and oneRepMax: {record!r}")
        try:
            lookup[record["exerciseId"]] = float(record["oneRepMax"])
        except (TypeError, ValueError):
            raise ValueError(
                f"oneRepMax for {record['exerciseId']} is not a number: {record['oneRepMax']!r}"
            ) from None
    return lookup


def collect_exercise_ids(weeks: Iterable[WorkoutWeek]) -> set[str]:
    """Every exercise ID referenced by the given weeks."""
    return {
        group.exercise_id
        for week in weeks
        for day in week.days
        for group in day.set_groups
        if group.exercise_id
    }


def apply_one_rep_max_weights(
    weeks: list[WorkoutWeek],
    one_rep_maxes: dict[str, float],
    weight_increment: float = DEFAULT_WEIGHT_INCREMENT,
) -> list[WorkoutWeek]:
    """Compute loads for sets that specify an intensity percentage.

    weight = intensity% x 1RM, rounded to the nearest increment. Sets for an
    exercise with no known 1RM get a weight of 0 and keep their intensity
    percentage. The input weeks are not modified.

    Args:
        weeks: Assembled weeks
        one_rep_maxes: Exercise ID -> 1RM in kg
        weight_increment: Smallest plate jump; non-positive values fall back to 2.5

    Returns:
        New weeks with computed weights
    """
    increment = weight_increment if weight_increment > 0 else DEFAULT_WEIGHT_INCREMENT
    enriched = [week.clone() for week in weeks]
    applied = 0
    missing = 0

    for week in enriched:
        for day in week.days:
            for group in day.set_groups:
                one_rep_max = one_rep_maxes.get(group.exercise_id)
                for exercise_set in group.sets:
                    intensity = exercise_set.intensity_percent
                    if intensity is None or intensity <= 0:
                        continue

                    if one_rep_max and one_rep_max > 0:
                        raw_weight = (intensity / 100) * one_rep_max
                        rounded = math.floor(raw_weight / increment + 0.5) * increment
                        exercise_set.weight = round(rounded, 2)
                        applied += 1
                    else:
                        exercise_set.weight = 0
                        missing += 1

    log.info("Applied %d weights, %d missing 1RM values", applied, missing)
    return enriched
