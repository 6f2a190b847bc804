"""Tests for the typings-gate command line."""

import json

from typer.testing import CliRunner

from conftest import commit_all, git, requires_git, write_files
from typings_gate.cli import app
from typings_gate.cli import affected as affected_module
from typings_gate.exceptions import UnmappedDeletedFileError

runner = CliRunner()


@requires_git
class TestAffectedCommand:
    def test_select_all_json(self, definitions_repo):
        result = runner.invoke(app, ["affected", str(definitions_repo), "--select", "all", "--json", "--quiet"])
        assert result.exit_code == 0, result.output
        payload = json.loads(result.stdout)
        assert sorted(payload["packageNames"]) == ["types/bar", "types/foo"]
        assert payload["dependents"] == []

    def test_affected_falls_back_to_previous_commit(self, definitions_repo):
        result = runner.invoke(app, ["affected", str(definitions_repo), "--json", "--quiet"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"packageNames": ["types/bar"], "dependents": []}

    def test_deleted_package_selects_dependents(self, definitions_repo):
        for file in (definitions_repo / "types" / "foo").iterdir():
            file.unlink()
        (definitions_repo / "types" / "foo").rmdir()

        result = runner.invoke(app, ["affected", str(definitions_repo), "--json", "--quiet"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout) == {"packageNames": [], "dependents": ["types/bar"]}

    def test_pattern_selection_table(self, definitions_repo):
        result = runner.invoke(app, ["affected", str(definitions_repo), "--select", "^fo", "--quiet"])
        assert result.exit_code == 0, result.output
        assert "types/foo" in result.output
        assert "types/bar" not in result.output

    def test_invalid_pattern(self, definitions_repo):
        result = runner.invoke(app, ["affected", str(definitions_repo), "--select", "(", "--quiet"])
        assert result.exit_code == 2

    def test_malformed_as_of_version_is_reported(self, definitions_repo):
        git(definitions_repo, "rm", "-q", "-r", "types/foo")
        write_files(
            definitions_repo,
            {"notNeededPackages.json": {"packages": {"foo": {"libraryName": "foo", "asOfVersion": "2.0"}}}},
        )
        commit_all(definitions_repo, "foo ships its own types")

        result = runner.invoke(app, ["affected", str(definitions_repo), "--quiet"])
        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "TG404" in result.output
        assert "Traceback" not in result.output

    def test_gate_error_exits_nonzero(self, definitions_repo, monkeypatch):
        def fail(*args, **kwargs):
            raise UnmappedDeletedFileError("README.md")

        monkeypatch.setattr(affected_module, "get_affected_packages_from_diff", fail)
        result = runner.invoke(app, ["affected", str(definitions_repo), "--quiet"])
        assert result.exit_code == 1
        assert "TG200" in result.output
        assert "Unexpected file deleted: README.md" in result.output


@requires_git
class TestDiffCommand:
    def test_lists_changes(self, definitions_repo):
        result = runner.invoke(app, ["diff", str(definitions_repo)])
        assert result.exit_code == 0, result.output
        assert "types/bar/index.d.ts" in result.output

    def test_log_file_records_git_commands(self, definitions_repo, tmp_path):
        log_file = tmp_path / "gate.log"
        result = runner.invoke(app, ["diff", str(definitions_repo), "--log-file", str(log_file)])
        assert result.exit_code == 0, result.output
        assert "Running: git diff --name-status master --" in log_file.read_text(encoding="utf-8")

    def test_not_a_repository(self, tmp_path):
        result = runner.invoke(app, ["diff", str(tmp_path)])
        assert result.exit_code == 1
        assert "TG100" in result.output


@requires_git
class TestCheckDeprecationsCommand:
    def test_nothing_removed(self, definitions_repo):
        result = runner.invoke(app, ["check-deprecations", str(definitions_repo), "--quiet"])
        assert result.exit_code == 0, result.output
        assert "No deprecated packages in this change." in result.output

    def test_missing_types_directory(self, tmp_path):
        result = runner.invoke(app, ["check-deprecations", str(tmp_path), "--quiet"])
        assert result.exit_code == 1
        assert "Invalid path" in result.output


class TestHelp:
    def test_lists_commands(self):
        result = runner.invoke(app, ["--help"])
        assert result.exit_code == 0
        for command in ("affected", "check-deprecations", "diff"):
            assert command in result.output
