"""Shared fixtures for new project lock generation tests."""

import os
import sys

import pytest

from releaser.release_layout import ReleaseLayout

# Ensure tests/new-project-lock/ is on sys.path so test files can import
# fake_command_runner and release_repo unambiguously.
sys.path.insert(0, os.path.dirname(__file__))

from fake_command_runner import FakeCommandRunner  # noqa: E402
from release_repo import ScaffoldingCargo, write_release_repo  # noqa: E402


@pytest.fixture
def release_repo(tmp_path):
    return write_release_repo(tmp_path / "repo", "0.24.0")


@pytest.fixture
def pre_release_repo(tmp_path):
    return write_release_repo(tmp_path / "repo", "2.0.0-pre")


@pytest.fixture
def layout(release_repo):
    return ReleaseLayout(repo_root=release_repo)


@pytest.fixture
def pre_release_layout(pre_release_repo):
    return ReleaseLayout(repo_root=pre_release_repo)


@pytest.fixture
def cargo():
    return ScaffoldingCargo()


@pytest.fixture
def fake_runner(cargo):
    runner = FakeCommandRunner()
    runner.on("init", cargo.init)
    runner.on("generate-lockfile", cargo.generate_lockfile)
    return runner
