"""Tests for the command line interface."""

import json

import pytest
from click.testing import CliRunner

from lift_assembler.cli import main


@pytest.fixture
def workspace(tmp_path, catalog_data, template_data, diffs_data):
    """Input files and a data directory for CLI runs."""
    files = {
        "catalog": tmp_path / "catalog.json",
        "template": tmp_path / "week1.json",
        "diffs": tmp_path / "diffs.json",
    }
    files["catalog"].write_text(json.dumps(catalog_data))
    files["template"].write_text(json.dumps(template_data))
    files["diffs"].write_text(json.dumps(diffs_data))
    files["data"] = tmp_path / "data"
    files["config"] = tmp_path / "lift_assembler.yaml"
    return files


@pytest.fixture
def invoke(workspace):
    """Run the CLI against the workspace."""
    runner = CliRunner()
    env = {
        "LIFT_ASSEMBLER_DATA_DIR": str(workspace["data"]),
        "LIFT_ASSEMBLER_CATALOG": str(workspace["catalog"]),
        "LIFT_ASSEMBLER_LOG_LEVEL": "WARNING",
    }

    def run(*args, input=None):
        return runner.invoke(
            main, ["--config", str(workspace["config"]), *args], env=env, input=input
        )

    return run


class TestInit:
    """Tests for the init command."""

    def test_creates_database(self, invoke, workspace):
        result = invoke("init")

        assert result.exit_code == 0
        assert (workspace["data"] / "lift_assembler.db").exists()
        assert "Exercise catalog found" in result.output


class TestMatch:
    """Tests for the match command."""

    def test_json_output(self, invoke):
        result = invoke("match", "Barbell Bench Pres", "--json")

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["exerciseId"] == "ex_001"
        assert data["matchType"] == "fuzzy"

    def test_text_output_with_hints(self, invoke):
        result = invoke("match", "Zercher Carry Walk", "--id", "ex_999", "--muscle", "lats")

        assert result.exit_code == 0
        assert "Pull-Up (ex_004)" in result.output
        assert "category_fallback" in result.output
        assert "corrected" in result.output

    def test_missing_catalog(self, invoke, workspace):
        result = invoke("match", "Squat", "--catalog", str(workspace["data"] / "none.json"))

        assert result.exit_code == 1
        assert "catalog not found" in result.output


class TestAssemble:
    """Tests for the assemble command."""

    def test_writes_program(self, invoke, workspace, tmp_path):
        output = tmp_path / "program.json"

        result = invoke(
            "assemble",
            "-t", str(workspace["template"]),
            "-d", str(workspace["diffs"]),
            "-w", "4",
            "--name", "CLI Program",
            "--split", "upper_lower",
            "-o", str(output),
        )

        assert result.exit_code == 0, result.output
        program = json.loads(output.read_text())
        assert program["name"] == "CLI Program"
        assert program["splitType"] == "upper_lower"
        assert len(program["weeks"]) == 4
        assert program["weeks"][1]["days"][1]["setGroups"][0]["sets"][4]["weight"] == 105
        assert "skipped change for day 9" in result.output

    def test_saves_program(self, invoke, workspace):
        invoke("init")

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]),
            "-w", "2", "--name", "Saved Program", "--save",
        )
        listing = invoke("programs", "list")

        assert result.exit_code == 0, result.output
        assert "Program saved with ID" in result.output
        assert "Saved Program" in listing.output

    def test_one_rep_max_file(self, invoke, workspace, tmp_path, template_data):
        for exercise_set in template_data["days"][0]["setGroups"][0]["sets"]:
            exercise_set["intensityPercent"] = 80
        workspace["template"].write_text(json.dumps(template_data))
        records = tmp_path / "maxes.json"
        records.write_text(json.dumps([{"exerciseId": "ex_001", "oneRepMax": 103}]))
        output = tmp_path / "program.json"

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-w", "1",
            "--one-rep-max", str(records), "-o", str(output),
        )

        assert result.exit_code == 0, result.output
        program = json.loads(output.read_text())
        assert program["weeks"][0]["days"][0]["setGroups"][0]["sets"][0]["weight"] == 82.5

    def test_strict_rejects_stale_diffs(self, invoke, workspace, diffs_data):
        diffs_data["templateFingerprint"] = "0" * 64
        workspace["diffs"].write_text(json.dumps(diffs_data))

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]),
            "-w", "4", "--strict",
        )

        assert result.exit_code == 1
        assert "Diffs were computed against template" in result.output

    def test_invalid_template(self, invoke, workspace):
        workspace["template"].write_text(json.dumps({"weekNumber": 1}))

        result = invoke("assemble", "-t", str(workspace["template"]), "-w", "4")

        assert result.exit_code == 1
        assert "Invalid template or diffs" in result.output

    @pytest.mark.parametrize("diffs", [[1], {"week2": [1]}, {"week2": {"changes": [1]}}])
    def test_wrong_shape_diffs(self, invoke, workspace, diffs):
        workspace["diffs"].write_text(json.dumps(diffs))

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]), "-w", "4"
        )

        assert result.exit_code == 1
        assert "Invalid template or diffs" in result.output
        assert "Traceback" not in result.output

    def test_wrong_shape_template(self, invoke, workspace, template_data):
        template_data["days"][0]["setGroups"] = ["oops"]
        workspace["template"].write_text(json.dumps(template_data))

        result = invoke("assemble", "-t", str(workspace["template"]), "-w", "4")

        assert result.exit_code == 1
        assert "set group must be an object" in result.output

    def test_wrong_shape_catalog(self, invoke, workspace):
        workspace["catalog"].write_text("5")

        result = invoke("assemble", "-t", str(workspace["template"]), "-w", "4")

        assert result.exit_code == 1
        assert "Invalid exercise catalog" in result.output

    @pytest.mark.parametrize(
        "records", [{"ex_001": 103}, [{"exerciseId": "ex_001"}], [{"oneRepMax": 103}]]
    )
    def test_malformed_one_rep_max_file(self, invoke, workspace, tmp_path, records):
        path = tmp_path / "maxes.json"
        path.write_text(json.dumps(records))

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-w", "1", "--one-rep-max", str(path)
        )

        assert result.exit_code == 1
        assert "Invalid one-rep-max file" in result.output

    def test_malformed_phase_tables(self, invoke, workspace):
        workspace["config"].write_text("assembly:\n  phase_tables:\n    default: deload\n")

        result = invoke("assemble", "-t", str(workspace["template"]), "-w", "4")

        assert result.exit_code == 1
        assert "Invalid phase tables" in result.output

    def test_non_mapping_config_file(self, invoke, workspace, tmp_path):
        workspace["config"].write_text("- not\n- a mapping\n")
        output = tmp_path / "program.json"

        result = invoke("assemble", "-t", str(workspace["template"]), "-w", "1", "-o", str(output))

        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())["durationWeeks"] == 1

    def test_unreadable_json(self, invoke, workspace):
        workspace["diffs"].write_text("{not json")

        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]), "-w", "4"
        )

        assert result.exit_code == 1
        assert "not valid JSON" in result.output


class TestValidate:
    """Tests for the validate command."""

    def _assemble(self, invoke, workspace, output):
        invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]),
            "-w", "3", "-o", str(output),
        )

    def test_consistent_program(self, invoke, workspace, tmp_path):
        output = tmp_path / "program.json"
        self._assemble(invoke, workspace, output)

        result = invoke("validate", str(output))

        assert result.exit_code == 0
        assert "3 weeks share Week 1's structure" in result.output

    def test_drift(self, invoke, workspace, tmp_path):
        output = tmp_path / "program.json"
        self._assemble(invoke, workspace, output)
        program = json.loads(output.read_text())
        program["weeks"][1]["days"][0]["setGroups"].pop()
        output.write_text(json.dumps(program))

        result = invoke("validate", str(output))

        assert result.exit_code == 1
        assert "Week 2 Day 1 has 1 exercises, expected 2" in result.output


class TestPrograms:
    """Tests for the programs command group."""

    def _save(self, invoke, workspace):
        invoke("init")
        result = invoke(
            "assemble", "-t", str(workspace["template"]), "-d", str(workspace["diffs"]),
            "-w", "2", "--name", "Managed Program", "--save",
        )
        return result.output.split("Program saved with ID ")[1].split()[0]

    def test_requires_init(self, invoke):
        result = invoke("programs", "list")

        assert result.exit_code == 1
        assert "not initialized" in result.output

    def test_show(self, invoke, workspace):
        program_id = self._save(invoke, workspace)

        result = invoke("programs", "show", program_id, "--metadata")

        assert result.exit_code == 0
        assert "Program: Managed Program" in result.output
        assert "Barbell Bench Press: 3x6 @ 65kg" in result.output
        assert "glutes: 7" in result.output

    def test_show_missing(self, invoke):
        invoke("init")

        result = invoke("programs", "show", "nope")

        assert result.exit_code == 1
        assert "not found" in result.output

    def test_export(self, invoke, workspace, tmp_path):
        program_id = self._save(invoke, workspace)
        output = tmp_path / "export.json"

        result = invoke("programs", "export", program_id, "-o", str(output))

        assert result.exit_code == 0
        assert json.loads(output.read_text())["id"] == program_id

    def test_delete(self, invoke, workspace):
        program_id = self._save(invoke, workspace)

        cancelled = invoke("programs", "delete", program_id, input="n\n")
        deleted = invoke("programs", "delete", program_id, "--force")
        listing = invoke("programs", "list")

        assert "Cancelled" in cancelled.output
        assert deleted.exit_code == 0
        assert "No programs found" in listing.output
