"""Source file path classification for the :OWN-LIST clause.

Project files are produced for a Windows tool, so paths are always handled
with ``ntpath`` rules (backslash separators, drive letters, case-insensitive
comparison) regardless of the host platform.
"""

from __future__ import annotations

import ntpath

from vlisp_project.project.models import SourceFile

# Files are always written without their extension, which is assumed to be
# exactly 4 characters long (".lsp"). Other extensions get truncated wrongly;
# existing project files depend on this so it is kept as is.
EXTENSION_LENGTH = 4


def normalize_project_directory(directory: str) -> str:
    """Return the comparison key for a directory: normalized and upper-cased."""
    return ntpath.normpath(directory).upper()


def _strip_extension(path: str) -> str:
    return path[: max(len(path) - EXTENSION_LENGTH, 0)]


def classify_source_file(entry: SourceFile, project_dir_key: str) -> str:
    """Return the :OWN-LIST token for a single source file.

    Args:
        entry: Source file to render.
        project_dir_key: Output of ``normalize_project_directory`` for the
            project directory.

    Returns:
        The token followed by a single space: the raw text when the entry
        was read from an existing project file, otherwise a quoted basename
        for files inside the project directory or a quoted forward-slash
        absolute path for files outside it.
    """
    if entry.raw_file_path:
        return entry.raw_file_path + " "

    file_dir = ntpath.normpath(ntpath.dirname(entry.file_path)).upper()
    if file_dir != project_dir_key:
        absolute = ntpath.normpath(entry.file_path).replace("\\", "/")
        return f'"{_strip_extension(absolute)}" '

    return f'"{_strip_extension(ntpath.basename(entry.file_path))}" '
