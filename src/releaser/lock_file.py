"""Cargo.lock model: parse, sanitize, and serialize lock files.

Parsing and serialization go through tomlkit. The serialized form follows
the layout Cargo writes: the @generated header, the lock format version,
one [[package]] table per package, [metadata] for v1 lock files, then any
other top-level tables such as [patch.unused].
"""

import dataclasses
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

import tomlkit
from tomlkit.exceptions import TOMLKitError

from releaser.errors import LockFileError

HEADER_COMMENTS = (
    "This file is automatically @generated by Cargo.",
    "It is not intended for manual editing.",
)

_KNOWN_KEYS = ("name", "version", "source", "checksum", "dependencies")
_KNOWN_TOP_LEVEL_KEYS = ("version", "package", "metadata")


def _cargo_array(values: Iterable[str]):
    """A multi-line string array indented with one space, as Cargo writes them."""
    lines = "".join(f" {tomlkit.string(value).as_string()},\n" for value in values)
    return tomlkit.parse(f"array = [\n{lines}]\n")["array"]


@dataclass(frozen=True)
class PackageRecord:
    """One [[package]] entry of a lock file."""
    name: str
    version: str
    source: Optional[str] = None
    checksum: Optional[str] = None
    dependencies: Tuple[str, ...] = ()
    extra: Dict[str, Any] = field(default_factory=dict, hash=False)

    @classmethod
    def from_mapping(cls, data: Dict[str, Any]) -> "PackageRecord":
        if not isinstance(data, dict):
            raise LockFileError(f"[[package]] entry is not a table: {data!r}")
        try:
            name = data["name"]
            version = data["version"]
        except KeyError as e:
            raise LockFileError(f"[[package]] entry missing {e.args[0]!r}") from e
        return cls(
            name=name,
            version=version,
            source=data.get("source"),
            checksum=data.get("checksum"),
            dependencies=tuple(data.get("dependencies", ())),
            extra={k: v for k, v in data.items() if k not in _KNOWN_KEYS},
        )

    def to_table(self):
        table = tomlkit.table()
        table.add("name", self.name)
        table.add("version", self.version)
        if self.source is not None:
            table.add("source", self.source)
        if self.checksum is not None:
            table.add("checksum", self.checksum)
        if self.dependencies:
            table.add("dependencies", _cargo_array(self.dependencies))
        for key, value in self.extra.items():
            table.add(key, value)
        return table


def sanitize_packages(packages: Iterable[PackageRecord], placeholder_name: str) -> List[PackageRecord]:
    """Drop every package named placeholder_name, keeping the rest in order."""
    return [package for package in packages if package.name != placeholder_name]


@dataclass
class LockFile:
    """A parsed Cargo.lock."""
    packages: List[PackageRecord] = field(default_factory=list)
    version: Optional[int] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    def without_package(self, name: str) -> "LockFile":
        return dataclasses.replace(self, packages=sanitize_packages(self.packages, name))

    def package_names(self) -> List[str]:
        return [package.name for package in self.packages]

    def find(self, name: str) -> Optional[PackageRecord]:
        for package in self.packages:
            if package.name == name:
                return package
        return None

    def to_string(self) -> str:
        return dumps_lock(self)


def parse_lock(text: str) -> LockFile:
    """Parse Cargo.lock text.

    Raises:
        LockFileError: If the text is not valid TOML or a package entry is
            not a table or is missing its name or version.
    """
    try:
        data = tomlkit.parse(text).unwrap()
    except TOMLKitError as e:
        raise LockFileError(f"parsing lock file: {e}") from e

    packages = data.get("package", [])
    if not isinstance(packages, list):
        raise LockFileError("'package' is not an array of tables")

    return LockFile(
        packages=[PackageRecord.from_mapping(p) for p in packages],
        version=data.get("version"),
        metadata=data.get("metadata", {}),
        extra={k: v for k, v in data.items() if k not in _KNOWN_TOP_LEVEL_KEYS},
    )


def load_lock(path: Path) -> LockFile:
    with open(path, "r", encoding="utf-8") as f:
        return parse_lock(f.read())


def dumps_lock(lock: LockFile) -> str:
    doc = tomlkit.document()
    for line in HEADER_COMMENTS:
        doc.add(tomlkit.comment(line))
    if lock.version is not None:
        doc.add("version", lock.version)
    tables = {}
    for key, value in lock.extra.items():
        # Plain values must precede the first table header.
        if isinstance(value, dict):
            tables[key] = value
        else:
            doc.add(key, value)
    doc.add(tomlkit.nl())

    if lock.packages:
        packages = tomlkit.aot()
        for package in lock.packages:
            packages.append(package.to_table())
        doc.add("package", packages)

    if lock.metadata:
        metadata = tomlkit.table()
        for key, value in lock.metadata.items():
            metadata.add(key, value)
        doc.add("metadata", metadata)

    for key, value in tables.items():
        doc.add(key, value)

    return tomlkit.dumps(doc)
