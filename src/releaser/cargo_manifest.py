"""Read fields from Cargo.toml manifests."""

import tomllib
from pathlib import Path

from releaser.errors import VersionResolutionError


def cargo_toml_package_version(path: Path) -> str:
    """Return the [package] version string declared in a Cargo.toml.

    Raises:
        VersionResolutionError: If the manifest is missing, is not valid
            TOML, has no [package] table, or does not declare a literal
            version (e.g. one inherited from the workspace).
    """
    try:
        with open(path, "rb") as f:
            manifest = tomllib.load(f)
    except OSError as e:
        raise VersionResolutionError(f"reading {path}: {e}") from e
    except tomllib.TOMLDecodeError as e:
        raise VersionResolutionError(f"parsing {path}: {e}") from e

    package = manifest.get("package")
    if not isinstance(package, dict):
        raise VersionResolutionError(f"{path}: no [package]")

    version = package.get("version")
    if not isinstance(version, str):
        raise VersionResolutionError(f"{path}: [package] has no version string")
    return version
