"""Shared fixtures for typings-gate tests."""

import json
import shutil
import subprocess
from pathlib import Path
from typing import Optional

import pytest

from typings_gate.catalog import PackageCatalog
from typings_gate.models import ChangeEntry, ChangeStatus, DeprecationRecord, TypingsPackage
from typings_gate.registry import Manifest, NotFound, NotTarget, RegistryFailure, RegistryLookupError
from typings_gate.versions import WILDCARD, parse_typing_version

requires_git = pytest.mark.skipif(shutil.which("git") is None, reason="git executable not available")


def deleted(file: str) -> ChangeEntry:
    return ChangeEntry(ChangeStatus.DELETED, file)


def modified(file: str) -> ChangeEntry:
    return ChangeEntry(ChangeStatus.MODIFIED, file)


def added(file: str) -> ChangeEntry:
    return ChangeEntry(ChangeStatus.ADDED, file)


def package(name: str, version: str = "*", dependencies=()) -> TypingsPackage:
    """Catalog entry for ``types/<name>`` or ``types/<name>/v<version>``."""
    if version == WILDCARD:
        return TypingsPackage(name, WILDCARD, f"types/{name}", frozenset(dependencies))
    return TypingsPackage(
        name, parse_typing_version(version), f"types/{name}/v{version}", frozenset(dependencies)
    )


def not_needed(name: str, library_name: Optional[str] = None, version: str = "2.0.1") -> DeprecationRecord:
    return DeprecationRecord(
        typings_name=name,
        library_name=library_name or name,
        version=version,
        full_registry_name=f"@types/{name}",
    )


def make_catalog(typings=(), deprecations=()) -> PackageCatalog:
    return PackageCatalog(typings, {record.typings_name: record for record in deprecations})


class FakeRegistry:
    """In-memory registry: package name -> published versions (last one is latest)."""

    def __init__(self, packages: dict, failures: Optional[dict] = None):
        self.packages = packages
        self.failures = failures or {}
        self.calls: list = []

    def fetch_manifest(self, name, version=None):
        self.calls.append((name, version))
        if name in self.failures:
            return RegistryFailure(name, self.failures[name])
        if name not in self.packages:
            return NotFound(name, RegistryLookupError("E404", f"404 Not Found - {name}"))
        versions = self.packages[name]
        wanted = version or versions[-1]
        if wanted not in versions:
            return NotTarget(name, wanted, RegistryLookupError("ETARGET", f"No matching version {wanted}"))
        return Manifest(name=name, version=wanted)


def git(cwd: Path, *args: str) -> str:
    """Run git with a throwaway identity; fail the test on error."""
    result = subprocess.run(
        [
            "git",
            "-c", "user.name=Test",
            "-c", "user.email=test@example.com",
            "-c", "commit.gpgsign=false",
            "-c", "init.defaultBranch=master",
            *args,
        ],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=True,
    )
    return result.stdout


def write_files(root: Path, files: dict) -> None:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, dict):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")


def commit_all(repo: Path, message: str) -> None:
    git(repo, "add", "-A")
    git(repo, "commit", "-q", "-m", message)


@pytest.fixture
def definitions_repo(tmp_path):
    """A git repository on ``master`` with two packages and two commits."""
    repo = tmp_path / "definitions"
    repo.mkdir()
    git(repo, "init", "-q")
    write_files(
        repo,
        {
            "README.md": "# definitions\n",
            "notNeededPackages.json": {"packages": {}},
            "types/foo/index.d.ts": "export const foo: number;\n",
            "types/foo/package.json": {"name": "@types/foo"},
            "types/bar/index.d.ts": "export const bar: string;\n",
            "types/bar/package.json": {"name": "@types/bar", "dependencies": {"@types/foo": "*"}},
        },
    )
    commit_all(repo, "initial")
    write_files(repo, {"types/bar/index.d.ts": "export const bar: string | number;\n"})
    commit_all(repo, "widen bar")
    return repo
