"""Data models for an in-memory VLisp project tree."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

# Project file tokens
KEY_EXPR_NAME = "VLISP-PROJECT-LIST"
KEY_NAME = ":NAME"
KEY_OWN_LIST = ":OWN-LIST"
KEY_FAS_DIR = ":FAS-DIRECTORY"
KEY_TMP_DIR = ":TMP-DIRECTORY"
KEY_PROJ_KEYS = ":PROJECT-KEYS"
KEY_CXT_ID = ":CONTEXT-ID"

# Emission order of the well-known properties
STANDARD_PROPERTIES = (
    KEY_NAME,
    KEY_OWN_LIST,
    KEY_FAS_DIR,
    KEY_TMP_DIR,
    KEY_PROJ_KEYS,
    KEY_CXT_ID,
)

LISP_NIL = "nil"


class ProjectMetadata:
    """Ordered property map of a project file.

    Values are stored as the literal Lisp text that appears in the file
    (e.g. ``"nil"``, ``"(:BUILD (:standard))"``); nothing here quotes or
    escapes them.
    """

    def __init__(self, properties: Mapping[str, str] | None = None) -> None:
        self._properties: dict[str, str] = dict(properties or {})

    @staticmethod
    def is_standard_property(key: str) -> bool:
        """Return True if ``key`` is one of the well-known project properties."""
        return key in STANDARD_PROPERTIES

    def get_property(self, key: str) -> str:
        """Return the stored value for ``key``, or ``nil`` when it is not set."""
        return self._properties.get(key, LISP_NIL)

    def set_property(self, key: str, value: str) -> None:
        self._properties[key] = value

    def get_project_name(self) -> str:
        return self.get_property(KEY_NAME)

    def keys(self) -> list[str]:
        return list(self._properties)

    def __iter__(self) -> Iterator[str]:
        return iter(self._properties)

    def __len__(self) -> int:
        return len(self._properties)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProjectMetadata):
            return NotImplemented
        return list(self._properties.items()) == list(other._properties.items())

    def __repr__(self) -> str:
        return f"ProjectMetadata({self._properties!r})"


@dataclass
class SourceFile:
    """A source file referenced by the project.

    Attributes:
        file_path: Absolute Windows-style path (e.g. ``C:\\proj\\main.lsp``).
        raw_file_path: Text originally read for this entry from an existing
            project file. When set it is written back verbatim.
    """

    file_path: str
    raw_file_path: str | None = None


@dataclass
class ProjectTree:
    """Snapshot of an opened project."""

    project_name: str
    project_directory: str
    project_file_path: str
    source_files: list[SourceFile] = field(default_factory=list)
    metadata: ProjectMetadata = field(default_factory=ProjectMetadata)


def project_tree_from_dict(payload: Mapping[str, Any]) -> ProjectTree:
    """Build a ProjectTree from a JSON-shaped mapping.

    Expected shape::

        {
            "project_name": "demo",
            "project_directory": "C:\\\\proj",
            "project_file_path": "C:\\\\proj\\\\demo.prj",
            "source_files": [{"file_path": "...", "raw_file_path": "..."}],
            "metadata": {":NAME": "demo", ...}
        }

    Args:
        payload: Decoded JSON object.

    Returns:
        Populated ProjectTree.

    Raises:
        ValueError: If a required field is missing or has the wrong type.
    """
    if not isinstance(payload, Mapping):
        raise ValueError("Project payload must be a JSON object")

    for name in ("project_name", "project_directory", "project_file_path"):
        if not isinstance(payload.get(name), str):
            raise ValueError(f"Project payload field '{name}' must be a string")

    raw_files = payload.get("source_files") or []
    if not isinstance(raw_files, list):
        raise ValueError("Project payload field 'source_files' must be a JSON array")

    files: list[SourceFile] = []
    for index, entry in enumerate(raw_files):
        if not isinstance(entry, Mapping):
            raise ValueError(f"source_files[{index}] must be a JSON object")
        file_path = entry.get("file_path", "")
        raw_file_path = entry.get("raw_file_path")
        if not isinstance(file_path, str) or (
            raw_file_path is not None and not isinstance(raw_file_path, str)
        ):
            raise ValueError(f"source_files[{index}] paths must be strings")
        files.append(SourceFile(file_path=file_path, raw_file_path=raw_file_path or None))

    raw_metadata = payload.get("metadata") or {}
    if not isinstance(raw_metadata, Mapping):
        raise ValueError("Project payload field 'metadata' must be a JSON object")
    metadata = ProjectMetadata({str(key): str(value) for key, value in raw_metadata.items()})

    return ProjectTree(
        project_name=payload["project_name"],
        project_directory=payload["project_directory"],
        project_file_path=payload["project_file_path"],
        source_files=files,
        metadata=metadata,
    )
