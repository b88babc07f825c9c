"""Pytest configuration and fixtures."""

import tempfile
from pathlib import Path

import pytest

from lift_assembler.config import Config
from lift_assembler.models.exercises import CatalogExercise
from lift_assembler.models.program import ProgressionDiffs, WorkoutWeek


CATALOG_DATA = [
    {
        "id": "ex_001",
        "name": "Barbell Bench Press",
        "category": "chest",
        "targetMuscles": ["chest", "triceps"],
        "equipment": ["barbell", "bench"],
    },
    {
        "id": "ex_002",
        "name": "Barbell Back Squat",
        "category": "legs",
        "targetMuscles": ["quadriceps", "glutes"],
        "equipment": ["barbell", "rack"],
    },
    {
        "id": "ex_003",
        "name": "Conventional Deadlift",
        "category": "back",
        "targetMuscles": ["hamstrings", "lower back", "glutes"],
        "equipment": ["barbell"],
    },
    {
        "id": "ex_004",
        "name": "Pull-Up",
        "category": "back",
        "targetMuscles": ["lats", "biceps"],
        "equipment": ["pull-up bar"],
    },
    {
        "id": "ex_005",
        "name": "Overhead Press",
        "category": "shoulders",
        "targetMuscles": ["shoulders", "triceps"],
        "equipment": ["barbell"],
    },
    {
        "id": "ex_006",
        "name": "Dumbbell Row",
        "category": "back",
        "targetMuscles": ["lats", "rhomboids"],
        "equipment": ["dumbbell"],
    },
]


def make_sets(count, reps, weight, rest=90, rpe=None):
    """Build wire-format sets for fixtures."""
    sets = []
    for number in range(1, count + 1):
        exercise_set = {
            "setNumber": number,
            "reps": reps,
            "weight": weight,
            "weightUnit": "kg",
            "restSeconds": rest,
        }
        if rpe is not None:
            exercise_set["rpe"] = rpe
        sets.append(exercise_set)
    return sets


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
def catalog_data():
    """Catalog entries as they appear in a catalog JSON file."""
    return [dict(entry) for entry in CATALOG_DATA]


@pytest.fixture
def catalog(catalog_data):
    """Parsed catalog."""
    return [CatalogExercise.from_dict(entry) for entry in catalog_data]


@pytest.fixture
def template_data():
    """A two-day upper/lower Week 1 template."""
    return {
        "weekNumber": 1,
        "days": [
            {
                "dayNumber": 1,
                "dayName": "Upper",
                "focus": ["push", "pull"],
                "targetMuscles": ["chest", "lats"],
                "estimatedDuration": 60,
                "setGroups": [
                    {
                        "exerciseId": "ex_001",
                        "exerciseName": "Barbell Bench Press",
                        "order": 1,
                        "sets": make_sets(3, 8, 60, rest=120, rpe=7),
                    },
                    {
                        "exerciseId": "ex_006",
                        "exerciseName": "Dumbbell Row",
                        "order": 2,
                        "sets": make_sets(3, 10, 30),
                    },
                ],
            },
            {
                "dayNumber": 2,
                "dayName": "Lower",
                "focus": ["squat", "hinge"],
                "targetMuscles": ["quadriceps", "hamstrings"],
                "estimatedDuration": 60,
                "setGroups": [
                    {
                        "exerciseId": "ex_002",
                        "exerciseName": "Barbell Back Squat",
                        "order": 1,
                        "sets": make_sets(4, 5, 100, rest=180),
                    },
                    {
                        "exerciseId": "ex_003",
                        "exerciseName": "Conventional Deadlift",
                        "order": 2,
                        "sets": make_sets(3, 5, 120, rest=180),
                    },
                ],
            },
        ],
    }


@pytest.fixture
def template(template_data):
    """Parsed Week 1 template."""
    return WorkoutWeek.from_dict(template_data)


@pytest.fixture
def diffs_data():
    """Diffs for weeks 2 and 3; week 4 is omitted on purpose."""
    return {
        "week2": {
            "focus": "volume",
            "changes": [
                {"dayNumber": 1, "exerciseIndex": 0, "setGroupIndex": 0, "reps": 6, "weight": 65},
                {
                    "dayNumber": 2,
                    "exerciseIndex": 0,
                    "setGroupIndex": 0,
                    "reps": 5,
                    "weight": 105,
                    "count": 5,
                },
            ],
        },
        "week3": {
            "focus": "intensity",
            "notes": "Heavier top sets",
            "changes": [
                {"dayNumber": 1, "exerciseIndex": 0, "reps": 5, "weight": 70, "rpe": 8.5},
                {"dayNumber": 9, "exerciseIndex": 0, "reps": 3},
            ],
        },
    }


@pytest.fixture
def diffs(diffs_data):
    """Parsed progression diffs."""
    return ProgressionDiffs.from_dict(diffs_data)


@pytest.fixture
def config(tmp_path, monkeypatch):
    """Config with defaults and a temporary data directory."""
    monkeypatch.setenv("LIFT_ASSEMBLER_DATA_DIR", str(tmp_path / "data"))
    monkeypatch.delenv("LIFT_ASSEMBLER_CATALOG", raising=False)
    monkeypatch.delenv("LIFT_ASSEMBLER_LOG_LEVEL", raising=False)
    return Config(tmp_path / "missing.yaml")
