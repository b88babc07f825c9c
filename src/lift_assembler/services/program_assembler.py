"""Program assembly service: template validation, diff patching, metadata."""

import logging
import uuid
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timezone

from ..models.exercises import CatalogExercise, CorrectionStats, ExerciseCorrection
from ..models.program import (
    PrimaryGoal,
    Program,
    ProgramMetadata,
    ProgressionDiffs,
    SplitType,
    WorkoutWeek,
)
from ..utils.exercise_matcher import ExerciseMatcher
from ..utils.set_groups import muscle_group_coverage
from .diff_patcher import (
    ConsistencyReport,
    PatchLog,
    PhasePolicy,
    SkippedChange,
    assemble_weeks_from_diffs,
    check_template_fingerprint,
    template_fingerprint,
    validate_weeks_consistency,
)
from .template_validation import validate_template

log = logging.getLogger(__name__)


@dataclass
class AssemblyRequest:
    """Everything the assembler needs for one program."""

    week1: WorkoutWeek
    progression_diffs: ProgressionDiffs
    duration_weeks: int
    name: str
    description: str = ""
    user_id: str = ""
    split_type: SplitType = SplitType.CUSTOM
    primary_goal: PrimaryGoal = PrimaryGoal.GENERAL_FITNESS
    program_id: str | None = None

    @classmethod
    def from_dict(cls, data: dict) -> "AssemblyRequest":
        """Create from a ``{week1, progressionDiffs, durationWeeks, ...}`` payload."""
        return cls(
            week1=WorkoutWeek.from_dict(data["week1"]),
            progression_diffs=ProgressionDiffs.from_dict(data.get("progressionDiffs") or {}),
            duration_weeks=int(data["durationWeeks"]),
            name=data.get("name", "Generated Program"),
            description=data.get("description", ""),
            user_id=data.get("userId", ""),
            split_type=SplitType(data.get("splitType", "custom")),
            primary_goal=PrimaryGoal(data.get("primaryGoal", "general_fitness")),
            program_id=data.get("programId"),
        )


@dataclass
class AssemblyReport:
    """Data-quality events gathered while assembling a program."""

    correction_stats: CorrectionStats = field(default_factory=CorrectionStats)
    corrections: list[ExerciseCorrection] = field(default_factory=list)
    applied: int = 0
    skipped: list[SkippedChange] = field(default_factory=list)
    consistency: ConsistencyReport = field(
        default_factory=lambda: ConsistencyReport(valid=True)
    )
    stale_diffs: bool = False

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "correctionStats": self.correction_stats.to_dict(),
            "corrections": [c.to_dict() for c in self.corrections],
            "applied": self.applied,
            "skipped": [s.to_dict() for s in self.skipped],
            "consistency": self.consistency.to_dict(),
            "staleDiffs": self.stale_diffs,
        }


@dataclass
class AssemblyResult:
    """An assembled program plus how it got there."""

    program: Program
    report: AssemblyReport
    assembly_notes: str

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        return {
            "program": self.program.to_dict(),
            "report": self.report.to_dict(),
            "assemblyNotes": self.assembly_notes,
        }


class ProgramAssembler:
    """Build complete programs from a Week 1 template and progression diffs.

    One assembler holds one catalog; it keeps no per-program state, so it can
    be reused across requests.
    """

    def __init__(
        self,
        catalog: Sequence[CatalogExercise],
        phase_policy: PhasePolicy | None = None,
        periodization_model: str | None = None,
        strict_fingerprint: bool = False,
    ):
        self.matcher = ExerciseMatcher(catalog)
        self.phase_policy = phase_policy or PhasePolicy()
        self.periodization_model = periodization_model
        self.strict_fingerprint = strict_fingerprint

    def assemble(self, request: AssemblyRequest) -> AssemblyResult:
        """Assemble a program.

        Raises:
            CatalogEmptyError: If the assembler was built with an empty catalog
            StaleDiffError: If the diffs do not match the template and strict
                fingerprint checking is enabled
            ValueError: If duration_weeks is less than 1
        """
        report = AssemblyReport()

        validation = validate_template(request.week1, self.matcher)
        report.correction_stats = validation.stats
        report.corrections = validation.corrections
        template = validation.validated_week

        # Diffs may have been computed before or after ID correction
        report.stale_diffs = check_template_fingerprint(
            request.progression_diffs,
            template,
            request.week1,
            strict=self.strict_fingerprint,
        )

        patch_log = PatchLog()
        weeks = assemble_weeks_from_diffs(
            template,
            request.progression_diffs,
            request.duration_weeks,
            phase_policy=self.phase_policy,
            periodization_model=self.periodization_model,
            patch_log=patch_log,
        )
        report.applied = patch_log.applied
        report.skipped = patch_log.skipped

        report.consistency = validate_weeks_consistency(weeks)
        if not report.consistency.valid:
            for error in report.consistency.errors:
                log.warning("Structural drift: %s", error)

        now = datetime.now(timezone.utc)
        program = Program(
            id=request.program_id or str(uuid.uuid4()),
            name=request.name,
            description=request.description,
            user_id=request.user_id,
            duration_weeks=request.duration_weeks,
            split_type=request.split_type,
            primary_goal=request.primary_goal,
            weeks=weeks,
            metadata=self.build_metadata(weeks, report, template_fingerprint(template)),
            created_at=now,
            updated_at=now,
        )

        notes = self._format_notes(program, report)
        log.info(notes)
        return AssemblyResult(program=program, report=report, assembly_notes=notes)

    def build_metadata(
        self,
        weeks: list[WorkoutWeek],
        report: AssemblyReport,
        fingerprint: str | None = None,
    ) -> ProgramMetadata:
        """Compute program metadata from assembled weeks."""
        catalog_by_id = {exercise.id: exercise for exercise in self.matcher.catalog}
        return ProgramMetadata(
            total_weeks=len(weeks),
            total_days=sum(len(week.days) for week in weeks),
            total_exercises=sum(
                len(day.set_groups) for week in weeks for day in week.days
            ),
            estimated_total_duration=sum(
                day.estimated_duration or 0 for week in weeks for day in week.days
            ),
            muscle_group_coverage=(
                muscle_group_coverage(weeks[0], catalog_by_id) if weeks else {}
            ),
            exercise_corrections=report.correction_stats.corrected,
            diffs_applied=report.applied,
            changes_skipped=len(report.skipped),
            template_fingerprint=fingerprint,
            consistency_errors=list(report.consistency.errors),
        )

    def _format_notes(self, program: Program, report: AssemblyReport) -> str:
        """One-line summary of the assembly."""
        notes = (
            f"Assembled {program.total_weeks} weeks x {program.days_per_week} days; "
            f"{report.applied} changes applied, {len(report.skipped)} skipped; "
            f"{report.correction_stats.corrected}/{report.correction_stats.total} "
            f"exercise IDs corrected"
        )
        if report.stale_diffs:
            notes += "; diffs computed against a different template"
        if not report.consistency.valid:
            notes += f"; {len(report.consistency.errors)} consistency errors"
        return notes
