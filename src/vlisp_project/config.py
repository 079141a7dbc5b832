"""Application configuration loaded from environment variables."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class AppConfig:
    """Centralized application configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Project file
    settings have defaults but can be overridden via environment variables.
    """

    # Required — no defaults, fail at startup if missing
    storage_connection_string: str

    # Project file settings — defaults provided, overridable via env
    project_container: str = "vlisp-projects"
    language_id: str = "autolisp"
    file_encoding: str = "utf-8"


def load_config() -> AppConfig:
    """Construct an AppConfig from environment variables.

    Required environment variables:
        AzureWebJobsStorage: Azure Storage account connection string.

    Optional environment variables (with defaults):
        VP_PROJECT_CONTAINER: Blob container that saved project files go to
            (default: vlisp-projects).
        VP_LANGUAGE_ID: Language identifier passed to the formatter (default: autolisp).
        VP_FILE_ENCODING: Encoding used when writing project files (default: utf-8).

    Returns:
        Configured AppConfig instance.
    """
    return AppConfig(
        storage_connection_string=os.environ["AzureWebJobsStorage"],  # noqa: SIM112
        project_container=os.environ.get("VP_PROJECT_CONTAINER", "vlisp-projects"),
        language_id=os.environ.get("VP_LANGUAGE_ID", "autolisp"),
        file_encoding=os.environ.get("VP_FILE_ENCODING", "utf-8"),
    )
