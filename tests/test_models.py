"""Tests for data models."""

from datetime import datetime, timezone

import pytest

from lift_assembler.models.exercises import CatalogExercise, MatchResult, MatchType
from lift_assembler.models.program import (
    ExerciseSet,
    PrimaryGoal,
    Program,
    ProgramMetadata,
    ProgressionChange,
    ProgressionDiffs,
    SplitType,
    TrainingPhase,
    WeightUnit,
    WorkoutWeek,
)


class TestCatalogExercise:
    """Tests for CatalogExercise model."""

    def test_from_dict(self):
        exercise = CatalogExercise.from_dict(
            {"id": "ex_1", "name": "Squat", "targetMuscles": ["quadriceps"]}
        )

        assert exercise.id == "ex_1"
        assert exercise.target_muscles == ("quadriceps",)
        assert exercise.category is None

    def test_exercise_id_alias(self):
        exercise = CatalogExercise.from_dict({"exerciseId": 42, "name": "Squat"})

        assert exercise.id == "42"

    def test_missing_id(self):
        with pytest.raises(KeyError):
            CatalogExercise.from_dict({"name": "Squat"})

    def test_to_dict_omits_empty(self):
        assert CatalogExercise(id="a", name="Row").to_dict() == {"id": "a", "name": "Row"}


class TestMatchResult:
    """Tests for MatchResult model."""

    def test_to_dict(self):
        result = MatchResult(
            exercise_id="ex_1",
            exercise_name="Squat",
            match_type=MatchType.FUZZY,
            confidence=0.8,
            original_id="bad",
            was_correction=True,
        )

        assert result.to_dict() == {
            "exerciseId": "ex_1",
            "exerciseName": "Squat",
            "matchType": "fuzzy",
            "confidence": 0.8,
            "wasCorrection": True,
            "originalId": "bad",
        }


class TestExerciseSet:
    """Tests for ExerciseSet model."""

    def test_defaults(self):
        exercise_set = ExerciseSet.from_dict({"setNumber": 1, "reps": "8-10"})

        assert exercise_set.weight == 0
        assert exercise_set.weight_unit == WeightUnit.KG
        assert exercise_set.rest_seconds == 60

    def test_optional_fields_omitted(self):
        data = ExerciseSet(set_number=1, reps=5, weight=100).to_dict()

        assert "rpe" not in data
        assert "intensityPercent" not in data
        assert data["weightUnit"] == "kg"


class TestWorkoutWeek:
    """Tests for WorkoutWeek model."""

    def test_from_dict(self, template_data):
        week = WorkoutWeek.from_dict(template_data)

        assert week.week_number == 1
        assert week.phase == TrainingPhase.ACCUMULATION
        assert [d.day_name for d in week.days] == ["Upper", "Lower"]
        assert week.days[0].set_groups[0].sets[0].rpe == 7

    def test_round_trip(self, template_data):
        week = WorkoutWeek.from_dict(template_data)

        assert WorkoutWeek.from_dict(week.to_dict()).to_dict() == week.to_dict()

    def test_clone_is_deep(self, template):
        clone = template.clone()
        clone.days[0].set_groups[0].sets[0].reps = 1

        assert template.days[0].set_groups[0].sets[0].reps == 8

    def test_find_day(self, template):
        assert template.find_day(2).day_name == "Lower"
        assert template.find_day(5) is None

    @pytest.mark.parametrize(
        "mutate",
        [
            lambda data: [data],
            lambda data: {**data, "days": "Upper"},
            lambda data: {**data, "days": [7]},
            lambda data: {**data, "days": [{**data["days"][0], "setGroups": {"a": 1}}]},
            lambda data: {**data, "days": [{**data["days"][0], "setGroups": ["oops"]}]},
            lambda data: {
                **data,
                "days": [{**data["days"][0], "setGroups": [{"exerciseId": "x", "sets": [3]}]}],
            },
        ],
        ids=["list", "days-str", "day-int", "groups-dict", "group-str", "set-int"],
    )
    def test_wrong_shape_is_value_error(self, template_data, mutate):
        with pytest.raises(ValueError):
            WorkoutWeek.from_dict(mutate(template_data))


class TestProgressionChange:
    """Tests for ProgressionChange validation."""

    def test_from_dict(self):
        change = ProgressionChange.from_dict(
            {"dayNumber": 1, "exerciseIndex": 0, "reps": 8, "weight": 65, "count": 4}
        )

        assert change.set_group_index == 0
        assert change.weight == 65
        assert change.count == 4
        assert change.rpe is None

    @pytest.mark.parametrize(
        "overrides",
        [
            {"day_number": 0},
            {"exercise_index": -1},
            {"reps": 0},
            {"weight": -5},
            {"rpe": 11},
            {"rest": 0},
            {"count": 0},
            {"intensity_percent": 120},
        ],
    )
    def test_bounds(self, overrides):
        kwargs = {"day_number": 1, "exercise_index": 0, "reps": 8}
        kwargs.update(overrides)

        with pytest.raises(ValueError):
            ProgressionChange(**kwargs)


class TestProgressionDiffs:
    """Tests for ProgressionDiffs parsing."""

    def test_from_dict(self, diffs_data):
        diffs_data["templateFingerprint"] = "abc"
        diffs_data["week5"] = None
        diffs_data["comment"] = "ignored"

        diffs = ProgressionDiffs.from_dict(diffs_data)

        assert sorted(diffs.weeks) == [2, 3]
        assert diffs.template_fingerprint == "abc"
        assert len(diffs.get(2).changes) == 2
        assert diffs.get(3).notes == "Heavier top sets"
        assert diffs.get(4) is None

    @pytest.mark.parametrize(
        "data",
        [
            [1],
            "week2",
            {"week2": [1]},
            {"week2": {"changes": {"dayNumber": 1}}},
            {"week2": {"changes": [1]}},
        ],
        ids=["list", "str", "week-list", "changes-dict", "change-int"],
    )
    def test_wrong_shape_is_value_error(self, data):
        with pytest.raises(ValueError):
            ProgressionDiffs.from_dict(data)

    def test_to_dict(self, diffs):
        data = diffs.to_dict()

        assert list(data) == ["week2", "week3"]
        assert data["week2"]["changes"][1]["count"] == 5


class TestProgram:
    """Tests for Program model."""

    def _program(self, template):
        week2 = template.clone()
        week2.week_number = 2
        return Program(
            id="prog-1",
            name="Test Program",
            description="A test program",
            user_id="user-1",
            duration_weeks=2,
            split_type=SplitType.UPPER_LOWER,
            primary_goal=PrimaryGoal.HYPERTROPHY,
            weeks=[template, week2],
            metadata=ProgramMetadata(total_weeks=2, total_days=4),
            created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
            updated_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
        )

    def test_properties(self, template):
        program = self._program(template)

        assert program.total_weeks == 2
        assert program.days_per_week == 2

    def test_round_trip(self, template):
        program = self._program(template)

        restored = Program.from_dict(program.to_dict())

        assert restored.to_dict() == program.to_dict()
        assert restored.created_at == program.created_at
        assert restored.metadata.total_days == 4

    def test_summary(self, template):
        summary = self._program(template).get_summary()

        assert "Program: Test Program" in summary
        assert "Duration: 2 weeks, 2 days/week" in summary
        assert "Week 1 (accumulation):" in summary
        assert "Upper - push, pull:" in summary
        assert "- Barbell Bench Press: 3x8 @ 60kg" in summary

    def test_summary_mixed_sets(self, template):
        sets = template.days[0].set_groups[0].sets
        sets[2].weight = 62.5

        summary = self._program(template).get_summary()

        assert "8@60, 8@60, 8@62.5" in summary
