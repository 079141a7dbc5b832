"""Project saver — composes, formats, writes and reopens a project file."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date
from typing import TYPE_CHECKING, Any, Protocol

from vlisp_project.project.render import generate_project_text
from vlisp_project.storage.store import blob_project_store_from_config

if TYPE_CHECKING:
    from vlisp_project.config import AppConfig
    from vlisp_project.project.models import ProjectTree

logger = logging.getLogger(__name__)


class NoProjectOpenError(Exception):
    """Raised when a save is requested while no project is open."""


class ProjectComposeError(Exception):
    """Raised when the project file text cannot be composed."""


class Formatter(Protocol):
    def format(self, text: str, language_id: str) -> str: ...


class ProjectStore(Protocol):
    def replace(self, path: str, text: str) -> int: ...


class PassthroughFormatter:
    """Formatter that leaves the raw text untouched."""

    def format(self, text: str, language_id: str) -> str:
        return text


def _no_reopen(path: str) -> None:
    return None


class ProjectSaver:
    """Runs the save transaction for an opened project."""

    def __init__(
        self,
        store: ProjectStore,
        formatter: Formatter | None = None,
        reopen: Callable[[str], Any] = _no_reopen,
        language_id: str = "autolisp",
    ) -> None:
        """Initialise the saver.

        Args:
            store: Writer that replaces the file at the project path.
            formatter: Pretty-printer applied to the raw text. Defaults to
                PassthroughFormatter.
            reopen: Called with the project file path after a successful
                write so the caller can rebuild its project tree.
            language_id: Language identifier handed to the formatter.
        """
        self._store = store
        self._formatter = formatter or PassthroughFormatter()
        self._reopen = reopen
        self._language_id = language_id

    def render(self, tree: ProjectTree | None, today: date | None = None) -> str:
        """Compose and format the project file text without writing it.

        Raises:
            NoProjectOpenError: If ``tree`` is None.
            ProjectComposeError: If the project text cannot be composed.
        """
        if tree is None:
            raise NoProjectOpenError("No project opened yet")

        result = generate_project_text(tree, today)
        if not result:
            raise ProjectComposeError(f"Failed to compose project text: {result.error}")

        return self._formatter.format(result.text, self._language_id)

    def save(self, tree: ProjectTree | None, today: date | None = None) -> Any:
        """Write the project file for ``tree`` and reopen it.

        The store is only touched once the formatted text is ready, so a
        failure before that leaves the existing file intact.

        Args:
            tree: Project snapshot to save.
            today: Date written into the header. Defaults to the current date.

        Returns:
            Whatever the ``reopen`` callback returns.

        Raises:
            NoProjectOpenError: If ``tree`` is None.
            ProjectComposeError: If the project text cannot be composed.
        """
        if tree is None:
            raise NoProjectOpenError("No project opened yet")

        text = self.render(tree, today)
        target = tree.project_file_path
        written = self._store.replace(target, text)
        logger.info(
            "[save] saved project; project:%s;path:%s;bytes:%d",
            tree.project_name,
            target,
            written,
        )
        return self._reopen(target)


def project_saver_from_config(
    config: AppConfig,
    reopen: Callable[[str], Any] | None = None,
) -> ProjectSaver:
    """Construct a ProjectSaver that writes to blob storage.

    Args:
        config: Application configuration instance.
        reopen: Callback invoked with the saved file path. Defaults to reading
            the stored text back from blob storage.

    Returns:
        Configured ProjectSaver instance.
    """
    store = blob_project_store_from_config(config)
    return ProjectSaver(
        store=store,
        reopen=reopen or store.read,
        language_id=config.language_id,
    )
