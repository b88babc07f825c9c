"""Exercise ID correction for a generated Week 1 template."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from ..models.exercises import CatalogExercise, CorrectionStats, ExerciseCorrection
from ..models.program import WorkoutWeek
from ..utils.exercise_matcher import CatalogEmptyError, ExerciseMatcher

log = logging.getLogger(__name__)


@dataclass
class TemplateValidation:
    """A template with every exercise reference resolved to the catalog."""

    validated_week: WorkoutWeek
    stats: CorrectionStats = field(default_factory=CorrectionStats)
    corrections: list[ExerciseCorrection] = field(default_factory=list)


def validate_template(
    template: WorkoutWeek,
    catalog: Sequence[CatalogExercise] | ExerciseMatcher,
) -> TemplateValidation:
    """Correct invalid exercise IDs in a Week 1 template.

    Only ``exercise_id`` and ``exercise_name`` are touched, and only on a
    copy. Day target muscles are passed as hints so the fallback tier picks
    an exercise for the right body part.

    Raises:
        CatalogEmptyError: If the catalog has no entries
    """
    matcher = catalog if isinstance(catalog, ExerciseMatcher) else ExerciseMatcher(catalog)
    if not matcher.catalog:
        raise CatalogEmptyError("Exercise catalog is required for exercise ID matching")

    validated = template.clone()
    stats = CorrectionStats()
    corrections = []

    for day in validated.days:
        for group in day.set_groups:
            stats.total += 1

            if matcher.is_valid_id(group.exercise_id):
                stats.valid += 1
                continue

            result = matcher.match(
                group.exercise_name,
                group.exercise_id or None,
                None,
                day.target_muscles,
            )
            if not result.was_correction:
                # Name matched and no ID was supplied: fill the ID in
                stats.valid += 1
                group.exercise_id = result.exercise_id
                group.exercise_name = result.exercise_name
                continue

            stats.corrected += 1
            corrections.append(
                ExerciseCorrection(
                    original_id=group.exercise_id,
                    original_name=group.exercise_name,
                    corrected_id=result.exercise_id,
                    corrected_name=result.exercise_name,
                    match_type=result.match_type,
                    confidence=result.confidence,
                )
            )
            group.exercise_id = result.exercise_id
            group.exercise_name = result.exercise_name

    if stats.corrected:
        log.info(
            "Exercise ID corrections applied: total=%d corrected=%d catalog_size=%d",
            stats.total,
            stats.corrected,
            len(matcher.catalog),
        )
    else:
        log.info(
            "All exercise IDs valid: total=%d catalog_size=%d",
            stats.total,
            len(matcher.catalog),
        )

    return TemplateValidation(validated_week=validated, stats=stats, corrections=corrections)
