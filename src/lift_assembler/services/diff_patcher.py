"""Programmatic diff patching for multi-week programs.

Week 1 is the single source of structural truth. Every later week is a fresh
deep clone of Week 1 with that week's progression diff applied on top, so a
week only ever depends on ``(template, diff)`` and never on earlier weeks.
Diffs address set groups by position, which is why nothing may reorder the
template between diff generation and assembly.
"""

import hashlib
import json
import logging
from dataclasses import dataclass, field

from ..models.program import (
    ProgressionChange,
    ProgressionDiffs,
    TrainingPhase,
    WeekDiff,
    WorkoutWeek,
)
from ..utils.set_groups import regenerate_sets

log = logging.getLogger(__name__)

DEFAULT_PERIODIZATION_MODEL = "default"

DEFAULT_PHASE_TABLE: dict[int, TrainingPhase] = {
    1: TrainingPhase.ACCUMULATION,
    2: TrainingPhase.ACCUMULATION,
    3: TrainingPhase.INTENSIFICATION,
    4: TrainingPhase.REALIZATION,
}


class StaleDiffError(ValueError):
    """Raised when diffs were computed against a different template."""


@dataclass
class PhasePolicy:
    """Week number to training phase lookup, per periodization model.

    Weeks missing from a table get ``default_phase``. Unknown models use the
    ``default`` table.
    """

    tables: dict[str, dict[int, TrainingPhase]] = field(
        default_factory=lambda: {DEFAULT_PERIODIZATION_MODEL: dict(DEFAULT_PHASE_TABLE)}
    )
    default_phase: TrainingPhase = TrainingPhase.ACCUMULATION

    def phase_for(
        self,
        week_number: int,
        duration_weeks: int,
        model: str | None = None,
    ) -> TrainingPhase:
        """Get the phase of a week.

        ``duration_weeks`` is part of the signature so tables keyed on program
        length can be plugged in; the built-in tables ignore it.
        """
        table = self.tables.get(model or DEFAULT_PERIODIZATION_MODEL)
        if table is None:
            table = self.tables.get(DEFAULT_PERIODIZATION_MODEL, {})
        return table.get(week_number, self.default_phase)


@dataclass
class SkippedChange:
    """A change that referenced a day or set group absent from the template."""

    week_number: int
    day_number: int
    exercise_index: int
    reason: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "weekNumber": self.week_number,
            "dayNumber": self.day_number,
            "exerciseIndex": self.exercise_index,
            "reason": self.reason,
        }


@dataclass
class PatchLog:
    """What happened while applying diffs."""

    applied: int = 0
    skipped: list[SkippedChange] = field(default_factory=list)


@dataclass
class ConsistencyReport:
    """Result of the structural audit against Week 1."""

    valid: bool
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {"valid": self.valid, "errors": list(self.errors)}


def template_fingerprint(week: WorkoutWeek) -> str:
    """Digest of the structure diffs address: day numbers and set group order.

    Loads, notes and names are left out, so correcting loads does not change
    the fingerprint while reordering or swapping exercises does.
    """
    shape = [
        [day.day_number, [group.exercise_id for group in day.set_groups]]
        for day in week.days
    ]
    payload = json.dumps(shape, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def apply_change(
    week: WorkoutWeek,
    change: ProgressionChange,
    patch_log: PatchLog | None = None,
) -> bool:
    """Apply one progression change to a cloned week in place.

    Returns:
        True if the change was applied, False if it was skipped because the
        day or set group does not exist
    """
    day = week.find_day(change.day_number)
    if day is None:
        log.warning(
            "Day %d not found in week %d, skipping change",
            change.day_number,
            week.week_number,
        )
        _record_skip(patch_log, week, change, "day not found")
        return False

    if change.exercise_index >= len(day.set_groups):
        log.warning(
            "Set group %d not found in day %d of week %d, skipping change",
            change.exercise_index,
            change.day_number,
            week.week_number,
        )
        _record_skip(patch_log, week, change, "set group not found")
        return False

    group = day.set_groups[change.exercise_index]

    # Targets are uniform across the group
    for exercise_set in group.sets:
        exercise_set.reps = change.reps
        if change.weight is not None:
            exercise_set.weight = change.weight
        if change.rpe is not None:
            exercise_set.rpe = change.rpe
        if change.rest is not None:
            exercise_set.rest_seconds = change.rest
        if change.weight_lbs is not None:
            exercise_set.weight_lbs = change.weight_lbs
        if change.intensity_percent is not None:
            exercise_set.intensity_percent = change.intensity_percent

    if change.count is not None and change.count != len(group.sets):
        regenerate_sets(
            group,
            change.count,
            reps=change.reps,
            weight=change.weight,
            rpe=change.rpe,
            rest=change.rest,
        )

    if patch_log is not None:
        patch_log.applied += 1
    return True


def apply_week_diff(
    week: WorkoutWeek,
    diff: WeekDiff,
    patch_log: PatchLog | None = None,
) -> None:
    """Apply every change of a diff in list order, then its notes."""
    for change in diff.changes:
        apply_change(week, change, patch_log)

    if diff.notes:
        week.notes = diff.notes


def assemble_weeks_from_diffs(
    template: WorkoutWeek,
    diffs: ProgressionDiffs,
    duration_weeks: int,
    phase_policy: PhasePolicy | None = None,
    periodization_model: str | None = None,
    patch_log: PatchLog | None = None,
) -> list[WorkoutWeek]:
    """Assemble every week of a program from Week 1 and sparse diffs.

    The template is never mutated. A week without a diff is an unchanged
    clone of the template, and changes pointing at missing days or set
    groups are skipped without aborting the rest of the assembly.

    Args:
        template: Validated Week 1
        diffs: Diffs for weeks 2..N
        duration_weeks: Number of weeks to produce
        phase_policy: Phase lookup; defaults to the 4-week table
        periodization_model: Which table of the policy to use
        patch_log: Optional collector for applied and skipped changes

    Returns:
        Exactly ``duration_weeks`` weeks

    Raises:
        ValueError: If duration_weeks is less than 1
    """
    if duration_weeks < 1:
        raise ValueError(f"duration_weeks must be >= 1, got {duration_weeks}")

    policy = phase_policy or PhasePolicy()
    weeks = []

    for week_number in range(1, duration_weeks + 1):
        week = template.clone()
        week.week_number = week_number
        week.phase = policy.phase_for(week_number, duration_weeks, periodization_model)

        if week_number > 1:
            diff = diffs.get(week_number)
            if diff is not None:
                apply_week_diff(week, diff, patch_log)
            else:
                log.info("No diff for week %d, using template unchanged", week_number)

        weeks.append(week)

    return weeks


def validate_weeks_consistency(weeks: list[WorkoutWeek]) -> ConsistencyReport:
    """Check every week has Week 1's day count and per-day set group counts.

    Read-only; never raises. Callers decide whether drift is fatal.
    """
    if not weeks:
        return ConsistencyReport(valid=False, errors=["No weeks in program"])

    reference = weeks[0]
    expected_days = len(reference.days)
    expected_groups = [len(day.set_groups) for day in reference.days]
    errors = []

    for index, week in enumerate(weeks[1:], start=2):
        if len(week.days) != expected_days:
            errors.append(
                f"Week {index} has {len(week.days)} days, expected {expected_days}"
            )

        for day_index, day in enumerate(week.days):
            expected = expected_groups[day_index] if day_index < len(expected_groups) else 0
            if len(day.set_groups) != expected:
                errors.append(
                    f"Week {index} Day {day_index + 1} has {len(day.set_groups)} "
                    f"exercises, expected {expected}"
                )

    return ConsistencyReport(valid=not errors, errors=errors)


def check_template_fingerprint(
    diffs: ProgressionDiffs,
    *templates: WorkoutWeek,
    strict: bool = False,
) -> bool:
    """Compare the fingerprint the diffs carry with the given templates.

    Diffs are fresh if they match any of the templates, which lets callers
    accept diffs computed either before or after exercise ID correction.

    Returns:
        True if the diffs are stale (fingerprint present and matching none)

    Raises:
        StaleDiffError: If stale and ``strict`` is set
    """
    if diffs.template_fingerprint is None:
        return False

    known = [template_fingerprint(template) for template in templates]
    if diffs.template_fingerprint in known:
        return False

    current = known[0][:12] if known else "unknown"
    message = (
        f"Diffs were computed against template {diffs.template_fingerprint[:12]}, "
        f"current template is {current}"
    )
    if strict:
        raise StaleDiffError(message)
    log.warning("%s; positional changes may land on the wrong exercises", message)
    return True


def _record_skip(
    patch_log: PatchLog | None,
    week: WorkoutWeek,
    change: ProgressionChange,
    reason: str,
) -> None:
    if patch_log is not None:
        patch_log.skipped.append(
            SkippedChange(
                week_number=week.week_number,
                day_number=change.day_number,
                exercise_index=change.exercise_index,
                reason=reason,
            )
        )
