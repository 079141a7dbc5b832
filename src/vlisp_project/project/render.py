"""Project file text generation.

Produces the raw (unformatted) text of a VLisp ``.prj`` file::

    ;;; VLisp project file [V2.0] demo saved to:[C:\\proj] at:[10/19/26]
    (VLISP-PROJECT-LIST
    :NAME
    demo
    :OWN-LIST
     ("main" "util")
    ...
    )
    ;;; EOF

Every line ends with CRLF. Nothing in this module performs I/O.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date

from vlisp_project.project.models import (
    KEY_CXT_ID,
    KEY_EXPR_NAME,
    KEY_FAS_DIR,
    KEY_NAME,
    KEY_OWN_LIST,
    KEY_PROJ_KEYS,
    KEY_TMP_DIR,
    ProjectMetadata,
    ProjectTree,
    SourceFile,
)
from vlisp_project.project.paths import classify_source_file, normalize_project_directory

logger = logging.getLogger(__name__)

CRLF = "\r\n"
HEADER_PREFIX = ";;; VLisp project file [V2.0] "
EOF_MARKER = ";;; EOF"
EMPTY_FILE_LIST = " nil "


@dataclass(frozen=True)
class ComposeResult:
    """Outcome of composing a project file.

    Falsy when composition failed, in which case ``text`` is empty and
    ``error`` says why.
    """

    text: str = ""
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


def render_source_file_list(source_files: Sequence[SourceFile], project_directory: str) -> str:
    """Render the value of the :OWN-LIST property.

    Args:
        source_files: Source files in project order.
        project_directory: Absolute project directory.

    Returns:
        ``" nil "`` for an empty list, otherwise ``" (<token> <token>) "``.
    """
    if not source_files:
        return EMPTY_FILE_LIST

    project_dir_key = normalize_project_directory(project_directory)
    tokens = "".join(classify_source_file(entry, project_dir_key) for entry in source_files)
    return " (" + tokens.rstrip() + ") "


def _key_value_pair(metadata: ProjectMetadata, key: str) -> str:
    return key + CRLF + metadata.get_property(key) + CRLF


def render_properties(metadata: ProjectMetadata, source_file_list: str) -> str:
    """Render all project properties as alternating key/value lines.

    The standard properties come first in their fixed order, with
    ``source_file_list`` written as the :OWN-LIST value. Any other keys
    follow in the metadata's insertion order.

    Args:
        metadata: Project property map.
        source_file_list: Output of ``render_source_file_list``.

    Returns:
        The property block, each line terminated with CRLF.
    """
    parts = [
        _key_value_pair(metadata, KEY_NAME),
        KEY_OWN_LIST + CRLF + source_file_list + CRLF,
        _key_value_pair(metadata, KEY_FAS_DIR),
        _key_value_pair(metadata, KEY_TMP_DIR),
        _key_value_pair(metadata, KEY_PROJ_KEYS),
        _key_value_pair(metadata, KEY_CXT_ID),
    ]
    parts.extend(
        _key_value_pair(metadata, key)
        for key in metadata
        if not ProjectMetadata.is_standard_property(key)
    )
    return "".join(parts)


def render_header(tree: ProjectTree, today: date) -> str:
    """Render the header comment line.

    The date uses ``%x``, which follows the process LC_TIME locale. This
    package never calls ``locale.setlocale``, so unless the host application
    does, that is the C locale (``10/19/26``).
    """
    return (
        f"{HEADER_PREFIX}{tree.project_name}"
        f" saved to:[{tree.project_directory}]"
        f" at:[{today.strftime('%x')}]"
        f"{CRLF}"
    )


def _validate(tree: ProjectTree) -> str | None:
    """Return the reason a tree cannot be rendered, or None if it can."""
    if not tree.project_name:
        return "project name is missing"
    if not tree.project_directory:
        return "project directory is missing"
    if not isinstance(tree.metadata, ProjectMetadata):
        return "project metadata is missing"
    if not isinstance(tree.source_files, Sequence) or isinstance(tree.source_files, str):
        return "source file list is missing"
    for index, entry in enumerate(tree.source_files):
        if not entry.raw_file_path and not entry.file_path:
            return f"source file {index} has no path"
    return None


def generate_project_text(tree: ProjectTree | None, today: date | None = None) -> ComposeResult:
    """Compose the complete raw text of a project file.

    Args:
        tree: Project snapshot to render.
        today: Date written into the header. Defaults to the current date.

    Returns:
        ComposeResult holding the text, or a falsy result with the reason
        when the tree lacks data required to build the file.
    """
    error = "no project tree" if tree is None else _validate(tree)
    if tree is None or error is not None:
        logger.warning("[generate_project_text] cannot compose project text; reason:%s", error)
        return ComposeResult(error=error)

    file_list = render_source_file_list(tree.source_files, tree.project_directory)
    text = (
        render_header(tree, today or date.today())
        + "("
        + KEY_EXPR_NAME
        + CRLF
        + render_properties(tree.metadata, file_list)
        + ")"
        + CRLF
        + EOF_MARKER
    )
    logger.info(
        "[generate_project_text] composed project text; project:%s;file_count:%d;chars:%d",
        tree.project_name,
        len(tree.source_files),
        len(text),
    )
    return ComposeResult(text=text)
