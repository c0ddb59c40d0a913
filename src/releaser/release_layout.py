"""Options and repository layout for the release commands."""

import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import List

COMPONENT_NAME = "pyembed"
PLACEHOLDER_PACKAGE_NAME = "placeholder_project"


@dataclass
class ReleaseOpts:
    """Options shared by every releaser subcommand."""

    repo_root: Path | None = None
    cargo: str = "cargo"
    docs_command: str | None = None

    def docs_argv(self) -> List[str]:
        if not self.docs_command:
            return []
        return shlex.split(self.docs_command)


@dataclass(frozen=True)
class ReleaseLayout:
    """Fixed locations inside the repository being released."""

    repo_root: Path
    cargo: str = "cargo"
    component_name: str = COMPONENT_NAME
    placeholder_name: str = PLACEHOLDER_PACKAGE_NAME

    @property
    def component_dir(self) -> Path:
        return self.repo_root / self.component_name

    @property
    def component_manifest(self) -> Path:
        return self.component_dir / "Cargo.toml"

    @property
    def pyoxidizer_src(self) -> Path:
        return self.repo_root / "pyoxidizer" / "src"

    @property
    def cargo_extra_template(self) -> Path:
        return self.pyoxidizer_src / "templates" / "cargo-extra.toml.hbs"

    @property
    def new_project_lock_path(self) -> Path:
        return self.pyoxidizer_src / "new-project-cargo.lock"
