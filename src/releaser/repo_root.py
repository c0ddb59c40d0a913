"""Locate the root of the repository being released."""

import subprocess
from pathlib import Path

from releaser.errors import NoVcsRootFound


def _git_root(cwd: Path):
    try:
        from git import Repo
        from git.exc import InvalidGitRepositoryError, NoSuchPathError
    except ImportError:
        # GitPython refuses to import when no git executable is available.
        return None

    try:
        repo = Repo(cwd, search_parent_directories=True)
    except (InvalidGitRepositoryError, NoSuchPathError):
        return None
    if repo.working_tree_dir is None:
        raise NoVcsRootFound("unable to resolve working directory")
    return Path(repo.working_tree_dir)


def _sapling_root(cwd: Path):
    try:
        result = subprocess.run(
            ["sl", "root"],
            cwd=str(cwd),
            capture_output=True,
            text=True,
        )
    except OSError:
        return None
    if result.returncode != 0:
        return None
    return Path(result.stdout.strip())


def resolve_repo_root(cwd) -> Path:
    """Return the working directory root of the git or Sapling checkout containing cwd.

    Raises:
        NoVcsRootFound: If neither git nor Sapling recognizes cwd.
    """
    cwd = Path(cwd)
    root = _git_root(cwd)
    if root is None:
        root = _sapling_root(cwd)
    if root is None:
        raise NoVcsRootFound("could not find VCS root")
    return root
