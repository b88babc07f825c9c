"""Exercise catalog and match result models."""

from dataclasses import dataclass
from enum import Enum


class MatchType(str, Enum):
    """How a caller-supplied exercise reference was resolved."""

    EXACT = "exact"
    NORMALIZED = "normalized"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    CATEGORY_FALLBACK = "category_fallback"


@dataclass(frozen=True)
class CatalogExercise:
    """An authoritative exercise with a stable identifier."""

    id: str
    name: str
    category: str | None = None
    target_muscles: tuple[str, ...] = ()
    equipment: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data: dict = {"id": self.id, "name": self.name}
        if self.category is not None:
            data["category"] = self.category
        if self.target_muscles:
            data["targetMuscles"] = list(self.target_muscles)
        if self.equipment:
            data["equipment"] = list(self.equipment)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CatalogExercise":
        """Create from dictionary.

        Accepts ``exerciseId`` in place of ``id``.
        """
        exercise_id = data.get("id", data.get("exerciseId"))
        if not exercise_id:
            raise KeyError("id")
        return cls(
            id=str(exercise_id),
            name=data["name"],
            category=data.get("category"),
            target_muscles=tuple(data.get("targetMuscles") or ()),
            equipment=tuple(data.get("equipment") or ()),
        )


@dataclass
class MatchResult:
    """Outcome of resolving one exercise reference against the catalog."""

    exercise_id: str
    exercise_name: str
    match_type: MatchType
    confidence: float  # 0-1 heuristic, not a probability
    original_id: str | None = None
    was_correction: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "matchType": self.match_type.value,
            "confidence": self.confidence,
            "wasCorrection": self.was_correction,
        }
        if self.original_id is not None:
            data["originalId"] = self.original_id
        return data


@dataclass
class CorrectionStats:
    """Tally of a batch of exercise reference checks."""

    total: int = 0
    valid: int = 0
    corrected: int = 0
    failed: int = 0

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "total": self.total,
            "valid": self.valid,
            "corrected": self.corrected,
            "failed": self.failed,
        }


@dataclass
class ExerciseCorrection:
    """A single replaced exercise reference."""

    original_id: str
    original_name: str
    corrected_id: str
    corrected_name: str
    match_type: MatchType
    confidence: float

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "originalId": self.original_id,
            "originalName": self.original_name,
            "correctedId": self.corrected_id,
            "correctedName": self.corrected_name,
            "matchType": self.match_type.value,
            "confidence": self.confidence,
        }
