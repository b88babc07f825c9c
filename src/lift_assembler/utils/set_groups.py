"""Set group expansion and volume helpers.

Everything that builds or counts ``SetGroup.sets`` goes through here so the
"one set per intended set" invariant lives in one place.
"""

import copy
import re
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum

from ..models.exercises import CatalogExercise
from ..models.program import ExerciseSet, SetGroup, WeightUnit, WorkoutDay, WorkoutWeek

DEFAULT_REST_SECONDS = 60

_LEADING_INT = re.compile(r"\d+")


class SetProgressionType(str, Enum):
    """How load changes from one set to the next inside a group."""

    LINEAR = "linear"  # +adjustment kg per set
    PERCENTAGE = "percentage"  # +adjustment % per set
    RPE = "rpe"  # +adjustment RPE per set, capped at 10


@dataclass
class ProgressionStep:
    """Adjustment applied to sets ``from_set..to_set`` (1-based, inclusive)."""

    from_set: int
    to_set: int
    adjustment: float


@dataclass
class SetProgression:
    """Intra-group progression used when expanding a base set."""

    type: SetProgressionType
    steps: list[ProgressionStep] = field(default_factory=list)


def default_base_set(
    reps: int | str,
    weight: float | None = None,
    rest: int | None = None,
) -> ExerciseSet:
    """Base set used when a group has no sets to copy from."""
    return ExerciseSet(
        set_number=1,
        reps=reps,
        weight=weight or 0,
        weight_unit=WeightUnit.KG,
        rest_seconds=rest or DEFAULT_REST_SECONDS,
    )


def _apply_set_progression(
    exercise_set: ExerciseSet, set_number: int, progression: SetProgression
) -> None:
    for step in progression.steps:
        if not step.from_set <= set_number <= step.to_set:
            continue
        offset = set_number - step.from_set

        if progression.type == SetProgressionType.LINEAR:
            exercise_set.weight = exercise_set.weight + step.adjustment * offset
        elif progression.type == SetProgressionType.PERCENTAGE:
            multiplier = 1 + (step.adjustment / 100) * offset
            exercise_set.weight = round(exercise_set.weight * multiplier, 1)
        elif progression.type == SetProgressionType.RPE and exercise_set.rpe is not None:
            exercise_set.rpe = min(10, exercise_set.rpe + step.adjustment * offset)


def expand_sets(
    base_set: ExerciseSet,
    count: int,
    progression: SetProgression | None = None,
) -> list[ExerciseSet]:
    """Build ``count`` independent sets numbered 1..count from a base set.

    Args:
        base_set: Parameters shared by every set
        count: Number of sets to generate
        progression: Optional per-set load progression

    Returns:
        List of new ExerciseSet objects
    """
    sets = []
    for set_number in range(1, count + 1):
        exercise_set = copy.deepcopy(base_set)
        exercise_set.set_number = set_number
        if progression is not None:
            _apply_set_progression(exercise_set, set_number, progression)
        sets.append(exercise_set)
    return sets


def regenerate_sets(
    group: SetGroup,
    count: int,
    reps: int | str,
    weight: float | None = None,
    rpe: float | None = None,
    rest: int | None = None,
) -> list[ExerciseSet]:
    """Rebuild a group's sets to exactly ``count`` entries.

    The first existing set is the template; ``reps`` and any supplied
    ``weight``/``rpe``/``rest`` override it. The group is updated in place.
    """
    if group.sets:
        base_set = replace(copy.deepcopy(group.sets[0]), reps=reps)
    else:
        base_set = default_base_set(reps, weight, rest)

    if weight is not None:
        base_set.weight = weight
    if rpe is not None:
        base_set.rpe = rpe
    if rest is not None:
        base_set.rest_seconds = rest

    group.sets = expand_sets(base_set, count)
    return group.sets


def get_expanded_sets(set_groups: Iterable[SetGroup]) -> list[ExerciseSet]:
    """Flatten the sets of several groups."""
    return [s for group in set_groups for s in group.sets]


def count_sets(set_groups: Iterable[SetGroup]) -> int:
    """Total number of sets across groups."""
    return sum(len(group.sets) for group in set_groups)


def reps_as_number(reps: int | str) -> int:
    """Numeric reps for volume maths. Ranges like "8-10" count as their lower bound."""
    if isinstance(reps, int):
        return reps
    match = _LEADING_INT.search(str(reps))
    return int(match.group()) if match else 0


def calculate_set_group_volume(group: SetGroup) -> float:
    """Volume of a group: sum of reps x weight over its sets."""
    return sum(reps_as_number(s.reps) * (s.weight or 0) for s in group.sets)


def calculate_day_volume(day: WorkoutDay) -> float:
    """Volume of a training day."""
    return sum(calculate_set_group_volume(group) for group in day.set_groups)


def calculate_week_volume(week: WorkoutWeek) -> float:
    """Volume of a training week."""
    return sum(calculate_day_volume(day) for day in week.days)


def muscle_group_coverage(
    week: WorkoutWeek,
    catalog: dict[str, CatalogExercise] | None = None,
) -> dict[str, int]:
    """Count weekly sets per muscle.

    Muscles come from the catalog entry of each group's exercise. Groups whose
    exercise is unknown, or has no muscles listed, count toward the day's
    target muscles instead.
    """
    catalog = catalog or {}
    coverage: dict[str, int] = {}

    for day in week.days:
        for group in day.set_groups:
            exercise = catalog.get(group.exercise_id)
            muscles = list(exercise.target_muscles) if exercise else []
            if not muscles:
                muscles = list(day.target_muscles)
            for muscle in muscles:
                coverage[muscle] = coverage.get(muscle, 0) + len(group.sets)

    return coverage
