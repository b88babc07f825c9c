"""Training program data models."""

import copy
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

WEEK_KEY_PATTERN = re.compile(r"^week(\d+)$")


class TrainingPhase(str, Enum):
    """Periodization phase of a week."""

    ACCUMULATION = "accumulation"
    INTENSIFICATION = "intensification"
    REALIZATION = "realization"
    DELOAD = "deload"


class WeightUnit(str, Enum):
    """Unit a set's load is expressed in."""

    KG = "kg"
    LBS = "lbs"
    BODYWEIGHT = "bodyweight"


class SplitType(str, Enum):
    """Weekly training split."""

    FULL_BODY = "full_body"
    UPPER_LOWER = "upper_lower"
    PUSH_PULL_LEGS = "push_pull_legs"
    BRO_SPLIT = "bro_split"
    CUSTOM = "custom"


class PrimaryGoal(str, Enum):
    """Primary training goal of a program."""

    STRENGTH = "strength"
    HYPERTROPHY = "hypertrophy"
    ENDURANCE = "endurance"
    POWER = "power"
    GENERAL_FITNESS = "general_fitness"


def _put_optional(data: dict, key: str, value) -> None:
    if value is not None:
        data[key] = value


def _require_mapping(data, what: str) -> dict:
    if not isinstance(data, dict):
        raise ValueError(f"{what} must be an object, got {type(data).__name__}")
    return data


def _require_list(data, what: str) -> list:
    if not isinstance(data, list):
        raise ValueError(f"{what} must be a list, got {type(data).__name__}")
    return data


@dataclass
class ExerciseSet:
    """A single trainable set."""

    set_number: int
    reps: int | str  # int or a range such as "8-10"
    weight: float = 0
    weight_unit: WeightUnit = WeightUnit.KG
    rest_seconds: int = 60
    rpe: float | None = None
    tempo: str | None = None
    notes: str | None = None
    weight_lbs: float | None = None  # advisory, mirrors weight
    intensity_percent: float | None = None  # % of 1RM, advisory

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "setNumber": self.set_number,
            "reps": self.reps,
            "weight": self.weight,
            "weightUnit": self.weight_unit.value,
            "restSeconds": self.rest_seconds,
        }
        _put_optional(data, "rpe", self.rpe)
        _put_optional(data, "tempo", self.tempo)
        _put_optional(data, "notes", self.notes)
        _put_optional(data, "weightLbs", self.weight_lbs)
        _put_optional(data, "intensityPercent", self.intensity_percent)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSet":
        """Create from dictionary."""
        _require_mapping(data, "set")
        return cls(
            set_number=data["setNumber"],
            reps=data["reps"],
            weight=data.get("weight", 0),
            weight_unit=WeightUnit(data.get("weightUnit", "kg")),
            rest_seconds=data.get("restSeconds", 60),
            rpe=data.get("rpe"),
            tempo=data.get("tempo"),
            notes=data.get("notes"),
            weight_lbs=data.get("weightLbs"),
            intensity_percent=data.get("intensityPercent"),
        )


@dataclass
class SetGroup:
    """All sets performed for one exercise within one day."""

    exercise_id: str
    exercise_name: str
    order: int
    sets: list[ExerciseSet] = field(default_factory=list)
    notes: str | None = None
    technical_cues: list[str] | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "exerciseId": self.exercise_id,
            "exerciseName": self.exercise_name,
            "order": self.order,
            "sets": [s.to_dict() for s in self.sets],
        }
        _put_optional(data, "notes", self.notes)
        _put_optional(data, "technicalCues", self.technical_cues)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "SetGroup":
        """Create from dictionary."""
        _require_mapping(data, "set group")
        return cls(
            exercise_id=data.get("exerciseId", ""),
            exercise_name=data.get("exerciseName", ""),
            order=data.get("order", 0),
            sets=[
                ExerciseSet.from_dict(s)
                for s in _require_list(data.get("sets", []), "sets")
            ],
            notes=data.get("notes"),
            technical_cues=data.get("technicalCues"),
        )


@dataclass
class WorkoutDay:
    """A single training day."""

    day_number: int  # 1-based, unique within a week
    day_name: str
    set_groups: list[SetGroup]
    focus: list[str] = field(default_factory=list)
    target_muscles: list[str] = field(default_factory=list)
    estimated_duration: int | None = None  # minutes
    notes: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "dayNumber": self.day_number,
            "dayName": self.day_name,
            "focus": list(self.focus),
            "targetMuscles": list(self.target_muscles),
            "setGroups": [g.to_dict() for g in self.set_groups],
        }
        _put_optional(data, "estimatedDuration", self.estimated_duration)
        _put_optional(data, "notes", self.notes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutDay":
        """Create from dictionary."""
        _require_mapping(data, "day")
        return cls(
            day_number=data["dayNumber"],
            day_name=data.get("dayName", f"Day {data['dayNumber']}"),
            set_groups=[
                SetGroup.from_dict(g)
                for g in _require_list(data.get("setGroups", []), "setGroups")
            ],
            focus=data.get("focus", []),
            target_muscles=data.get("targetMuscles", []),
            estimated_duration=data.get("estimatedDuration"),
            notes=data.get("notes"),
        )


@dataclass
class WorkoutWeek:
    """A week of training. Week 1 doubles as the structural template."""

    week_number: int
    days: list[WorkoutDay]
    phase: TrainingPhase = TrainingPhase.ACCUMULATION
    focus: str | None = None
    notes: str | None = None

    def clone(self) -> "WorkoutWeek":
        """Return a fully independent copy."""
        return copy.deepcopy(self)

    def find_day(self, day_number: int) -> WorkoutDay | None:
        """Find a day by its own day number, not its position."""
        for day in self.days:
            if day.day_number == day_number:
                return day
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "weekNumber": self.week_number,
            "phase": self.phase.value,
            "days": [day.to_dict() for day in self.days],
        }
        _put_optional(data, "focus", self.focus)
        _put_optional(data, "notes", self.notes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutWeek":
        """Create from dictionary.

        Raises:
            KeyError: If ``days`` is missing
            ValueError: If the payload or a nested entry has the wrong shape
        """
        _require_mapping(data, "week")
        return cls(
            week_number=data.get("weekNumber", 1),
            days=[WorkoutDay.from_dict(day) for day in _require_list(data["days"], "days")],
            phase=TrainingPhase(data.get("phase") or "accumulation"),
            focus=data.get("focus"),
            notes=data.get("notes"),
        )


@dataclass
class ProgressionChange:
    """New loading parameters for one set group in one non-template week.

    ``day_number`` and ``exercise_index`` address the template by position.
    ``set_group_index`` is kept for schema compatibility only.
    """

    day_number: int
    exercise_index: int
    reps: int
    set_group_index: int = 0
    weight: float | None = None
    weight_lbs: float | None = None
    intensity_percent: float | None = None
    rpe: float | None = None
    rest: int | None = None
    count: int | None = None

    def __post_init__(self):
        if self.day_number < 1:
            raise ValueError(f"dayNumber must be >= 1, got {self.day_number}")
        if self.exercise_index < 0:
            raise ValueError(f"exerciseIndex must be >= 0, got {self.exercise_index}")
        if self.set_group_index < 0:
            raise ValueError(f"setGroupIndex must be >= 0, got {self.set_group_index}")
        if self.reps < 1:
            raise ValueError(f"reps must be >= 1, got {self.reps}")
        if self.weight is not None and self.weight < 0:
            raise ValueError(f"weight must be >= 0, got {self.weight}")
        if self.weight_lbs is not None and self.weight_lbs < 0:
            raise ValueError(f"weightLbs must be >= 0, got {self.weight_lbs}")
        if self.intensity_percent is not None and not 0 <= self.intensity_percent <= 100:
            raise ValueError(
                f"intensityPercent must be within 0-100, got {self.intensity_percent}"
            )
        if self.rpe is not None and not 1 <= self.rpe <= 10:
            raise ValueError(f"rpe must be within 1-10, got {self.rpe}")
        if self.rest is not None and self.rest < 1:
            raise ValueError(f"rest must be >= 1, got {self.rest}")
        if self.count is not None and self.count < 1:
            raise ValueError(f"count must be >= 1, got {self.count}")

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "dayNumber": self.day_number,
            "exerciseIndex": self.exercise_index,
            "setGroupIndex": self.set_group_index,
            "reps": self.reps,
        }
        _put_optional(data, "weight", self.weight)
        _put_optional(data, "weightLbs", self.weight_lbs)
        _put_optional(data, "intensityPercent", self.intensity_percent)
        _put_optional(data, "rpe", self.rpe)
        _put_optional(data, "rest", self.rest)
        _put_optional(data, "count", self.count)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressionChange":
        """Create from dictionary."""
        _require_mapping(data, "change")
        return cls(
            day_number=data["dayNumber"],
            exercise_index=data["exerciseIndex"],
            reps=data["reps"],
            set_group_index=data.get("setGroupIndex", 0),
            weight=data.get("weight"),
            weight_lbs=data.get("weightLbs"),
            intensity_percent=data.get("intensityPercent"),
            rpe=data.get("rpe"),
            rest=data.get("rest"),
            count=data.get("count"),
        )


@dataclass
class WeekDiff:
    """Sparse list of changes for one week after Week 1."""

    changes: list[ProgressionChange] = field(default_factory=list)
    focus: str = ""
    notes: str | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "focus": self.focus,
            "changes": [c.to_dict() for c in self.changes],
        }
        _put_optional(data, "notes", self.notes)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WeekDiff":
        """Create from dictionary."""
        _require_mapping(data, "week diff")
        return cls(
            changes=[
                ProgressionChange.from_dict(c)
                for c in _require_list(data.get("changes", []), "changes")
            ],
            focus=data.get("focus", ""),
            notes=data.get("notes"),
        )


@dataclass
class ProgressionDiffs:
    """Week diffs keyed by week number (2..N)."""

    weeks: dict[int, WeekDiff] = field(default_factory=dict)
    template_fingerprint: str | None = None  # structure the diffs were computed against

    def get(self, week_number: int) -> WeekDiff | None:
        """Get the diff for a week, if any."""
        return self.weeks.get(week_number)

    def to_dict(self) -> dict:
        """Convert to dictionary using ``weekN`` keys."""
        data: dict = {
            f"week{number}": diff.to_dict() for number, diff in sorted(self.weeks.items())
        }
        _put_optional(data, "templateFingerprint", self.template_fingerprint)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProgressionDiffs":
        """Create from a ``{"week2": {...}, "week3": {...}}`` mapping.

        Keys that are not ``weekN`` are ignored, as are null entries.

        Raises:
            ValueError: If the payload is not an object
        """
        _require_mapping(data, "progression diffs")
        weeks = {}
        for key, value in data.items():
            match = WEEK_KEY_PATTERN.match(key)
            if match and value is not None:
                weeks[int(match.group(1))] = WeekDiff.from_dict(value)
        return cls(weeks=weeks, template_fingerprint=data.get("templateFingerprint"))


@dataclass
class ProgramMetadata:
    """Computed facts about an assembled program."""

    total_weeks: int = 0
    total_days: int = 0
    total_exercises: int = 0
    estimated_total_duration: int = 0  # minutes for the whole program
    muscle_group_coverage: dict[str, int] = field(default_factory=dict)  # muscle -> weekly sets
    exercise_corrections: int = 0
    diffs_applied: int = 0
    changes_skipped: int = 0
    template_fingerprint: str | None = None
    consistency_errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "totalWeeks": self.total_weeks,
            "totalDays": self.total_days,
            "totalExercises": self.total_exercises,
            "estimatedTotalDuration": self.estimated_total_duration,
            "muscleGroupCoverage": dict(self.muscle_group_coverage),
            "exerciseCorrections": self.exercise_corrections,
            "diffsApplied": self.diffs_applied,
            "changesSkipped": self.changes_skipped,
            "consistencyErrors": list(self.consistency_errors),
        }
        _put_optional(data, "templateFingerprint", self.template_fingerprint)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ProgramMetadata":
        """Create from dictionary."""
        return cls(
            total_weeks=data.get("totalWeeks", 0),
            total_days=data.get("totalDays", 0),
            total_exercises=data.get("totalExercises", 0),
            estimated_total_duration=data.get("estimatedTotalDuration", 0),
            muscle_group_coverage=data.get("muscleGroupCoverage", {}),
            exercise_corrections=data.get("exerciseCorrections", 0),
            diffs_applied=data.get("diffsApplied", 0),
            changes_skipped=data.get("changesSkipped", 0),
            template_fingerprint=data.get("templateFingerprint"),
            consistency_errors=data.get("consistencyErrors", []),
        )


@dataclass
class Program:
    """A complete multi-week training program."""

    id: str
    name: str
    description: str
    user_id: str
    duration_weeks: int
    split_type: SplitType
    primary_goal: PrimaryGoal
    weeks: list[WorkoutWeek]
    metadata: ProgramMetadata = field(default_factory=ProgramMetadata)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "userId": self.user_id,
            "durationWeeks": self.duration_weeks,
            "splitType": self.split_type.value,
            "primaryGoal": self.primary_goal.value,
            "weeks": [week.to_dict() for week in self.weeks],
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
            "metadata": self.metadata.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Program":
        """Create from dictionary."""
        created_at = data.get("createdAt")
        updated_at = data.get("updatedAt")
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            user_id=data.get("userId", ""),
            duration_weeks=data.get("durationWeeks", len(data["weeks"])),
            split_type=SplitType(data.get("splitType", "custom")),
            primary_goal=PrimaryGoal(data.get("primaryGoal", "general_fitness")),
            weeks=[WorkoutWeek.from_dict(week) for week in data["weeks"]],
            metadata=ProgramMetadata.from_dict(data.get("metadata", {})),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )

    @property
    def days_per_week(self) -> int:
        """Get the number of training days per week."""
        if not self.weeks:
            return 0
        return len(self.weeks[0].days)

    @property
    def total_weeks(self) -> int:
        """Get total number of weeks."""
        return len(self.weeks)

    def get_summary(self) -> str:
        """Generate a summary of the program."""
        summary = f"Program: {self.name}\n"
        summary += f"Description: {self.description}\n"
        summary += f"Duration: {self.total_weeks} weeks, {self.days_per_week} days/week\n\n"

        for week in self.weeks:
            summary += f"Week {week.week_number} ({week.phase.value}):\n"

            for day in week.days:
                summary += f"  {day.day_name}"
                if day.focus:
                    summary += f" - {', '.join(day.focus)}"
                summary += ":\n"

                for group in day.set_groups:
                    set_info = self._format_sets(group.sets)
                    summary += f"    - {group.exercise_name}: {set_info}\n"

            summary += "\n"

        return summary

    def _format_sets(self, sets: list[ExerciseSet]) -> str:
        """Format sets for display."""
        if not sets:
            return "No sets"

        first_set = sets[0]
        all_same = all(
            s.reps == first_set.reps and s.weight == first_set.weight for s in sets
        )

        if all_same:
            text = f"{len(sets)}x{first_set.reps}"
            if first_set.weight_unit != WeightUnit.BODYWEIGHT and first_set.weight:
                text += f" @ {first_set.weight:g}{first_set.weight_unit.value}"
            return text
        else:
            return ", ".join(f"{s.reps}@{s.weight:g}" for s in sets)
