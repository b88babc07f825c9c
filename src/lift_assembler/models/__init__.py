"""Data models for lift-assembler."""

from .exercises import (
    CatalogExercise,
    CorrectionStats,
    ExerciseCorrection,
    MatchResult,
    MatchType,
)
from .program import (
    ExerciseSet,
    PrimaryGoal,
    Program,
    ProgramMetadata,
    ProgressionChange,
    ProgressionDiffs,
    SetGroup,
    SplitType,
    TrainingPhase,
    WeekDiff,
    WeightUnit,
    WorkoutDay,
    WorkoutWeek,
)

__all__ = [
    "CatalogExercise",
    "CorrectionStats",
    "ExerciseCorrection",
    "ExerciseSet",
    "MatchResult",
    "MatchType",
    "PrimaryGoal",
    "Program",
    "ProgramMetadata",
    "ProgressionChange",
    "ProgressionDiffs",
    "SetGroup",
    "SplitType",
    "TrainingPhase",
    "WeekDiff",
    "WeightUnit",
    "WorkoutDay",
    "WorkoutWeek",
]
