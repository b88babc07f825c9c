"""Deterministic resolution of exercise references against a catalog.

Generated programs cannot be trusted to reference real catalog IDs. The
matcher maps a ``(name, id, category, muscles)`` reference to a catalog entry
through an ordered pipeline, first hit wins:

1. valid ID
2. exact name (case-insensitive)
3. normalized name
4. fuzzy (Levenshtein distance)
5. partial (substring)
6. category / muscle fallback
7. first catalog entry
"""

import logging
import re
from collections.abc import Iterable

from ..models.exercises import CatalogExercise, CorrectionStats, MatchResult, MatchType
from ..models.program import SetGroup

log = logging.getLogger(__name__)

# Distances above this are treated as different exercises
FUZZY_MATCH_MAX_DISTANCE = 5

# At the maximum distance confidence bottoms out at 1 - 5 * 0.1 = 0.5
CONFIDENCE_REDUCTION_PER_DISTANCE = 0.1
FUZZY_MATCH_MIN_CONFIDENCE = 0.5

NORMALIZED_MATCH_CONFIDENCE = 0.95
PARTIAL_MATCH_CONFIDENCE = 0.7
CATEGORY_FALLBACK_CONFIDENCE = 0.3
LAST_RESORT_CONFIDENCE = 0.1

_PARENTHETICAL = re.compile(r"\(.*?\)")
_NON_ALPHANUMERIC = re.compile(r"[^a-z0-9\s]")
_WHITESPACE = re.compile(r"\s+")


class CatalogEmptyError(ValueError):
    """Raised when matching is attempted without any reference data."""


def normalize_exercise_name(name: str) -> str:
    """Normalize an exercise name for comparison.

    Lowercases, drops parenthetical qualifiers such as "(paused)", strips
    punctuation and collapses whitespace.
    """
    normalized = name.lower()
    normalized = _PARENTHETICAL.sub("", normalized)
    normalized = _NON_ALPHANUMERIC.sub("", normalized)
    normalized = _WHITESPACE.sub(" ", normalized)
    return normalized.strip()


def levenshtein_distance(a: str, b: str) -> int:
    """Edit distance between two strings (insert, delete, substitute)."""
    if len(a) < len(b):
        a, b = b, a
    if not b:
        return len(a)

    previous = list(range(len(b) + 1))
    for i, char_a in enumerate(a, start=1):
        current = [i]
        for j, char_b in enumerate(b, start=1):
            if char_a == char_b:
                current.append(previous[j - 1])
            else:
                current.append(
                    min(
                        previous[j - 1] + 1,  # substitution
                        current[j - 1] + 1,  # insertion
                        previous[j] + 1,  # deletion
                    )
                )
        previous = current
    return previous[-1]


class ExerciseMatcher:
    """Resolve exercise references against one catalog.

    Lookup indices are built once and never mutated, so a single instance
    can serve concurrent callers.
    """

    def __init__(self, catalog: Iterable[CatalogExercise]):
        self.catalog: list[CatalogExercise] = list(catalog)
        self._by_name: dict[str, CatalogExercise] = {}
        self._by_normalized_name: dict[str, CatalogExercise] = {}
        self._by_id: dict[str, CatalogExercise] = {}
        # Normalized names in catalog order, used by the fuzzy and partial tiers
        self._normalized: list[tuple[str, CatalogExercise]] = []

        for exercise in self.catalog:
            normalized = normalize_exercise_name(exercise.name)
            self._by_name[exercise.name.lower()] = exercise
            self._by_normalized_name[normalized] = exercise
            self._by_id[exercise.id] = exercise
            self._normalized.append((normalized, exercise))

        log.info(
            "ExerciseMatcher initialized: catalog_size=%d unique_names=%d unique_normalized=%d",
            len(self.catalog),
            len(self._by_name),
            len(self._by_normalized_name),
        )

    def is_valid_id(self, exercise_id: str | None) -> bool:
        """Check whether an ID exists in the catalog."""
        return exercise_id is not None and exercise_id in self._by_id

    def get_by_id(self, exercise_id: str) -> CatalogExercise | None:
        """Get a catalog exercise by ID."""
        return self._by_id.get(exercise_id)

    def match(
        self,
        name: str,
        provided_id: str | None = None,
        category: str | None = None,
        target_muscles: list[str] | None = None,
    ) -> MatchResult:
        """Match an exercise reference to the catalog.

        Args:
            name: Exercise name as generated
            provided_id: ID that came with the name, possibly invented
            category: Optional category hint for the fallback tier
            target_muscles: Optional muscle hints for the fallback tier

        Returns:
            The match, its type and confidence

        Raises:
            CatalogEmptyError: If the catalog has no entries
        """
        if not self.catalog:
            raise CatalogEmptyError("Exercise catalog is empty, cannot match exercises")

        # A correct ID is trusted even if the name disagrees
        if provided_id and provided_id in self._by_id:
            exercise = self._by_id[provided_id]
            return MatchResult(
                exercise_id=provided_id,
                exercise_name=exercise.name,
                match_type=MatchType.EXACT,
                confidence=1.0,
                original_id=provided_id,
                was_correction=False,
            )

        corrected = bool(provided_id)

        exercise = self._by_name.get(name.lower())
        if exercise is not None:
            return self._result(exercise, MatchType.EXACT, 1.0, provided_id, corrected)

        normalized_name = normalize_exercise_name(name)
        exercise = self._by_normalized_name.get(normalized_name)
        if exercise is not None:
            return self._result(
                exercise, MatchType.NORMALIZED, NORMALIZED_MATCH_CONFIDENCE, provided_id, corrected
            )

        best_match, best_distance = self._closest(normalized_name)
        if best_match is not None and best_distance <= FUZZY_MATCH_MAX_DISTANCE:
            confidence = max(
                FUZZY_MATCH_MIN_CONFIDENCE,
                1 - best_distance * CONFIDENCE_REDUCTION_PER_DISTANCE,
            )
            return self._result(
                best_match, MatchType.FUZZY, round(confidence, 4), provided_id, corrected
            )

        for candidate_name, exercise in self._normalized:
            if normalized_name in candidate_name or candidate_name in normalized_name:
                return self._result(
                    exercise, MatchType.PARTIAL, PARTIAL_MATCH_CONFIDENCE, provided_id, corrected
                )

        if category or target_muscles:
            fallback = self._first_by_hints(category, target_muscles)
            if fallback is not None:
                return self._result(
                    fallback,
                    MatchType.CATEGORY_FALLBACK,
                    CATEGORY_FALLBACK_CONFIDENCE,
                    provided_id,
                    True,
                )

        last_resort = self.catalog[0]
        log.warning(
            "Using last resort fallback for %r (provided_id=%s): matched %r",
            name,
            provided_id,
            last_resort.name,
        )
        return self._result(
            last_resort,
            MatchType.CATEGORY_FALLBACK,
            LAST_RESORT_CONFIDENCE,
            provided_id,
            True,
        )

    def process_set_groups(
        self, set_groups: list[SetGroup]
    ) -> tuple[list[SetGroup], CorrectionStats]:
        """Resolve the exercise of every set group in place.

        Returns:
            The same set groups with corrected ``exercise_id``/``exercise_name``
            and the correction tally. ``failed`` is always 0 because the
            fallback tiers always produce a match.
        """
        stats = CorrectionStats(total=len(set_groups))

        for group in set_groups:
            result = self.match(group.exercise_name or "", group.exercise_id or None)

            if result.was_correction:
                stats.corrected += 1
                log.info(
                    "Exercise ID corrected: %s (%r) -> %s (%r) via %s, confidence=%.2f",
                    group.exercise_id,
                    group.exercise_name,
                    result.exercise_id,
                    result.exercise_name,
                    result.match_type.value,
                    result.confidence,
                )
            else:
                stats.valid += 1

            group.exercise_id = result.exercise_id
            group.exercise_name = result.exercise_name

        return set_groups, stats

    def _closest(self, normalized_name: str) -> tuple[CatalogExercise | None, int]:
        """Find the catalog entry with the smallest edit distance.

        Ties go to the entry that appears first in the catalog.
        """
        best_match: CatalogExercise | None = None
        best_distance: int | None = None

        for candidate_name, exercise in self._normalized:
            distance = levenshtein_distance(normalized_name, candidate_name)
            if best_distance is None or distance < best_distance:
                best_distance = distance
                best_match = exercise
                if distance == 0:
                    break

        return best_match, best_distance if best_distance is not None else 0

    def _first_by_hints(
        self, category: str | None, target_muscles: list[str] | None
    ) -> CatalogExercise | None:
        """First catalog entry satisfying every supplied hint."""
        hints = [m.lower() for m in target_muscles or []]

        for exercise in self.catalog:
            if category and exercise.category != category:
                continue
            if hints:
                muscles = [m.lower() for m in exercise.target_muscles]
                if not any(hint in muscle for hint in hints for muscle in muscles):
                    continue
            return exercise

        return None

    @staticmethod
    def _result(
        exercise: CatalogExercise,
        match_type: MatchType,
        confidence: float,
        provided_id: str | None,
        was_correction: bool,
    ) -> MatchResult:
        return MatchResult(
            exercise_id=exercise.id,
            exercise_name=exercise.name,
            match_type=match_type,
            confidence=confidence,
            original_id=provided_id,
            was_correction=was_correction,
        )


def create_exercise_matcher(catalog: Iterable[CatalogExercise]) -> ExerciseMatcher:
    """Create an ExerciseMatcher from a catalog."""
    return ExerciseMatcher(catalog)
