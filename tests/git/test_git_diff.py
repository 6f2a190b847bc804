"""Tests for the baseline diff resolver."""

import pytest
from conftest import FakeRegistry, commit_all, git, requires_git, write_files

from typings_gate.catalog import PackageCatalog
from typings_gate.config import GateConfig
from typings_gate.deprecations import find_deprecations, validate_deprecations
from typings_gate.exceptions import DiffUnavailableError
from typings_gate.git import GitDiffResolver, git_diff, parse_name_status
from typings_gate.models import ChangeEntry, ChangeStatus


class FakeRunner:
    """Scripted GitCommandRunner: records commands, returns canned output."""

    def __init__(self, outputs=None, baseline_exists=True):
        self.outputs = outputs or {}
        self.baseline_exists = baseline_exists
        self.commands = []

    def succeeds(self, *args):
        self.commands.append(args)
        return self.baseline_exists

    def run(self, *args):
        self.commands.append(args)
        result = self.outputs.get(args, "")
        if isinstance(result, Exception):
            raise result
        return result


def diff_args(ref):
    return ("diff", "--name-status", ref, "--")


class TestParseNameStatus:
    def test_statuses_and_files(self):
        output = "A\ttypes/new/index.d.ts\nD\ttypes/old/index.d.ts\nM\tREADME.md\n"
        assert parse_name_status(output) == [
            ChangeEntry(ChangeStatus.ADDED, "types/new/index.d.ts"),
            ChangeEntry(ChangeStatus.DELETED, "types/old/index.d.ts"),
            ChangeEntry(ChangeStatus.MODIFIED, "README.md"),
        ]

    def test_extra_tokens_are_ignored(self):
        output = "R100\ttypes/a/index.d.ts\ttypes/b/index.d.ts"
        assert parse_name_status(output) == [ChangeEntry(ChangeStatus.MODIFIED, "types/a/index.d.ts")]

    def test_surrounding_whitespace_trimmed(self):
        assert parse_name_status("  D    types/foo/index.d.ts   ") == [
            ChangeEntry(ChangeStatus.DELETED, "types/foo/index.d.ts")
        ]

    def test_blank_lines_skipped(self):
        assert parse_name_status("\n\nM\tREADME.md\n\n") == [ChangeEntry(ChangeStatus.MODIFIED, "README.md")]

    def test_type_change_is_modification(self):
        assert parse_name_status("T\ttypes/foo/link.d.ts")[0].status is ChangeStatus.MODIFIED

    def test_empty_output(self):
        assert parse_name_status("") == []


class TestResolverSequence:
    def test_full_clone_diffs_directly(self):
        runner = FakeRunner({diff_args("master"): "D\ttypes/foo/index.d.ts\n"})
        changes = GitDiffResolver("/repo", runner=runner).resolve()

        assert changes == [ChangeEntry(ChangeStatus.DELETED, "types/foo/index.d.ts")]
        assert runner.commands == [("rev-parse", "--verify", "--quiet", "master"), diff_args("master")]

    def test_shallow_clone_fetches_and_aliases_baseline(self):
        runner = FakeRunner({diff_args("main"): "M\tREADME.md\n"}, baseline_exists=False)
        GitDiffResolver("/repo", source_branch="main", remote="upstream", runner=runner).resolve()

        assert runner.commands == [
            ("rev-parse", "--verify", "--quiet", "main"),
            ("fetch", "upstream", "main"),
            ("branch", "main", "FETCH_HEAD"),
            diff_args("main"),
        ]

    def test_empty_diff_falls_back_to_last_commit(self):
        runner = FakeRunner({diff_args("master"): "\n", diff_args("master~1"): "A\ttypes/foo/index.d.ts\n"})
        changes = GitDiffResolver("/repo", runner=runner).resolve()

        assert changes == [ChangeEntry(ChangeStatus.ADDED, "types/foo/index.d.ts")]
        assert runner.commands[-1] == diff_args("master~1")

    def test_fetch_failure_is_fatal(self):
        error = DiffUnavailableError("git fetch origin master", "fatal: couldn't find remote ref master")
        runner = FakeRunner({("fetch", "origin", "master"): error}, baseline_exists=False)

        with pytest.raises(DiffUnavailableError) as exc_info:
            GitDiffResolver("/repo", runner=runner).resolve()
        assert exc_info.value is error
        assert not any(command[0] == "diff" for command in runner.commands)


@requires_git
class TestAgainstRealRepositories:
    def test_working_tree_changes_against_master(self, definitions_repo):
        git(definitions_repo, "checkout", "-q", "-b", "remove-foo")
        git(definitions_repo, "rm", "-q", "-r", "types/foo")
        write_files(definitions_repo, {"types/baz/index.d.ts": "export {};\n"})
        git(definitions_repo, "add", "-A")

        changes = git_diff(definitions_repo)

        assert ChangeEntry(ChangeStatus.DELETED, "types/foo/index.d.ts") in changes
        assert ChangeEntry(ChangeStatus.DELETED, "types/foo/package.json") in changes
        assert ChangeEntry(ChangeStatus.ADDED, "types/baz/index.d.ts") in changes
        assert len(changes) == 3

    def test_on_master_reports_last_commit(self, definitions_repo):
        changes = git_diff(definitions_repo)
        assert changes == [ChangeEntry(ChangeStatus.MODIFIED, "types/bar/index.d.ts")]

    def test_shallow_clone_of_pull_request_branch(self, definitions_repo, tmp_path):
        git(definitions_repo, "checkout", "-q", "-b", "remove-foo")
        git(definitions_repo, "rm", "-q", "-r", "types/foo")
        commit_all(definitions_repo, "remove foo")

        clone = tmp_path / "clone"
        git(tmp_path, "clone", "-q", "--depth", "1", "--branch", "remove-foo", definitions_repo.as_uri(), str(clone))

        changes = git_diff(clone)

        assert sorted(change.file for change in changes) == ["types/foo/index.d.ts", "types/foo/package.json"]
        assert all(change.status is ChangeStatus.DELETED for change in changes)
        assert git(clone, "rev-parse", "--verify", "master").strip()

    def test_moved_root_file_is_not_a_deletion(self, definitions_repo):
        git(definitions_repo, "checkout", "-q", "-b", "deprecate-foo")
        git(definitions_repo, "rm", "-q", "-r", "types/foo")
        git(definitions_repo, "mv", "README.md", "docs-README.md")
        write_files(
            definitions_repo,
            {"notNeededPackages.json": {"packages": {"foo": {"libraryName": "foo", "asOfVersion": "2.0.1"}}}},
        )
        commit_all(definitions_repo, "foo ships its own types")

        changes = git_diff(definitions_repo)

        assert ChangeEntry(ChangeStatus.MODIFIED, "README.md") in changes
        assert ChangeEntry(ChangeStatus.DELETED, "README.md") not in changes

        catalog = PackageCatalog.from_repository(definitions_repo)
        records = find_deprecations(catalog, changes)
        assert [record.typings_name for record in records] == ["foo"]

        registry = FakeRegistry({"foo": ["2.0.1"], "@types/foo": ["1.5.0"]})
        assert validate_deprecations(records, registry) == records

    def test_custom_baseline_branch(self, definitions_repo):
        git(definitions_repo, "branch", "-m", "master", "main")
        write_files(definitions_repo, {"README.md": "# changed\n"})

        changes = git_diff(definitions_repo, GateConfig(source_branch="main"))
        assert changes == [ChangeEntry(ChangeStatus.MODIFIED, "README.md")]

    def test_missing_baseline_without_remote_is_fatal(self, definitions_repo):
        git(definitions_repo, "branch", "-m", "master", "trunk")
        with pytest.raises(DiffUnavailableError) as exc_info:
            git_diff(definitions_repo)
        assert "fetch" in exc_info.value.command

    def test_not_a_repository_is_fatal(self, tmp_path):
        with pytest.raises(DiffUnavailableError):
            git_diff(tmp_path)
