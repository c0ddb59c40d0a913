"""Generate the Cargo.lock a newly generated PyOxidizer project would have.

The lock file is derived from a throwaway Rust project resembling the one
`pyoxidizer init-rust-project` generates. Calling that command during a
release is a chicken and egg problem, so the generated Cargo.toml is
emulated instead: it only has to pull in the same dependency set.
"""

import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

import tomlkit

from releaser.cargo_manifest import cargo_toml_package_version
from releaser.command_runner import CommandInvocation, CommandRunner, echo_to_stderr
from releaser.errors import CommandFailed, LockFileError, LockToolError, ScaffoldError
from releaser.lock_file import load_lock
from releaser.release_layout import ReleaseLayout

PRE_RELEASE_SUFFIX = "-pre"


@dataclass(frozen=True)
class DependencyEntry:
    """A [dependencies.<name>] table appended to the scaffold manifest."""
    name: str
    version: str
    path: Path | None = None
    default_features: bool = False

    def to_toml(self) -> str:
        entry = tomlkit.table()
        entry.add("version", self.version)
        entry.add("default-features", self.default_features)
        if self.path is not None:
            entry.add("path", str(self.path))

        dependencies = tomlkit.table(is_super_table=True)
        dependencies.add(self.name, entry)

        doc = tomlkit.document()
        doc.add("dependencies", dependencies)
        return tomlkit.dumps(doc)


def should_use_path_override(version: str, force_path: bool) -> bool:
    """Pre-releases are not published, so they must be locked from the repo path."""
    return force_path or version.endswith(PRE_RELEASE_SUFFIX)


def build_dependency_entry(layout: ReleaseLayout, version: str, force_path: bool = False) -> DependencyEntry:
    path = layout.component_dir if should_use_path_override(version, force_path) else None
    return DependencyEntry(name=layout.component_name, version=version, path=path)


def _append_to_manifest(manifest_path: Path, *fragments: str) -> None:
    with open(manifest_path, "r", encoding="utf-8") as f:
        manifest_data = f.read()
    if manifest_data and not manifest_data.endswith("\n"):
        manifest_data += "\n"
    manifest_data += "".join(fragments)
    with open(manifest_path, "w", encoding="utf-8") as f:
        f.write(manifest_data)


def _read_cargo_extra(layout: ReleaseLayout) -> str:
    # The template is handlebars but has no placeholders.
    try:
        with open(layout.cargo_extra_template, "r", encoding="utf-8") as f:
            return f.read()
    except OSError as e:
        raise ScaffoldError(f"reading {layout.cargo_extra_template}: {e}") from e


def _init_scaffold(layout: ReleaseLayout, runner, temp_dir: str, project_path: Path) -> Path:
    try:
        runner.run(CommandInvocation(
            label="cargo-init",
            cwd=temp_dir,
            program=layout.cargo,
            args=("init", "--bin", str(project_path)),
        ))
    except CommandFailed as e:
        raise ScaffoldError(f"initializing scaffold project: {e}") from e

    manifest_path = project_path / "Cargo.toml"
    if not manifest_path.is_file():
        raise ScaffoldError(f"scaffold project has no manifest at {manifest_path}")
    return manifest_path


def _generate_lockfile(layout: ReleaseLayout, runner, project_path: Path) -> Path:
    try:
        runner.run(CommandInvocation(
            label="cargo-lock",
            cwd=str(project_path),
            program=layout.cargo,
            args=("generate-lockfile", "--offline"),
        ))
    except CommandFailed as e:
        raise LockToolError(f"generating lock file: {e}") from e

    lock_path = project_path / "Cargo.lock"
    if not lock_path.is_file():
        raise LockToolError(f"lock file was not produced at {lock_path}")
    return lock_path


def generate_new_project_cargo_lock(layout: ReleaseLayout, force_path: bool = False, runner=None) -> str:
    """Return sanitized Cargo.lock text for a freshly generated project.

    Args:
        layout: Repository layout to read the component and template from.
        force_path: Lock against the in-repo component source even for
            stable versions.
        runner: CommandRunner used for cargo invocations. Defaults to one
            echoing output to stderr, keeping stdout for the lock text.

    Raises:
        VersionResolutionError: If the component version cannot be read.
        ScaffoldError: If the scaffold project cannot be created.
        LockToolError: If cargo fails to produce a lock file.
    """
    runner = runner or CommandRunner(sink=echo_to_stderr)

    with tempfile.TemporaryDirectory(prefix="releaser-") as temp_dir:
        project_path = Path(temp_dir) / layout.placeholder_name
        manifest_path = _init_scaffold(layout, runner, temp_dir, project_path)

        version = cargo_toml_package_version(layout.component_manifest)
        entry = build_dependency_entry(layout, version, force_path)
        _append_to_manifest(manifest_path, entry.to_toml(), _read_cargo_extra(layout))

        lock_path = _generate_lockfile(layout, runner, project_path)
        try:
            lock_file = load_lock(lock_path)
        except LockFileError as e:
            raise LockToolError(f"reading {os.path.basename(lock_path)}: {e}") from e

    # The placeholder's own entry differs for every generated project.
    return lock_file.without_package(layout.placeholder_name).to_string()
