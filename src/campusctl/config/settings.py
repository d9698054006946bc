"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``CAMPUSCTL_*`` prefix, ``__`` for nested sections
  3. TOML file    — ``campusctl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` that
reuses the walk-up discovery from :mod:`campusctl.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from campusctl.config.discovery import find_config, read_toml
from campusctl.config.models import CampusConfig, CheckConfig, DocumentConfig, RoutingConfig
from campusctl.domain.snap import SnapConfig


class TomlSettingsSource(PydanticBaseSettingsSource):
    """The ``campusctl.toml`` sections, as a pydantic-settings source.

    Only tables that :class:`CampusConfig` knows are passed on; anything
    else in the file (another tool's section, a typo) is ignored.
    """

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        raw = read_toml(toml_path) if toml_path and toml_path.is_file() else {}
        self._sections = {k: v for k, v in raw.items() if k in CampusConfig.model_fields}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._sections.get(field_name), field_name, field_name in self._sections

    def __call__(self) -> dict[str, Any]:
        return dict(self._sections)


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CampusSettings(BaseSettings):
    """Unified settings for the campusctl CLI.

    Stored on the click context object at the CLI root level.

    Attributes:
        project_root: Parent of ``campusctl.toml``, or CWD if no config found.
        config_path: The config file in effect, or None.
        document_override: Explicit ``--file`` document path.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "CAMPUSCTL_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None
    document_override: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- TOML sections ---
    document: DocumentConfig = Field(default_factory=DocumentConfig)
    snap: SnapConfig = Field(default_factory=SnapConfig)
    routing: RoutingConfig = Field(default_factory=RoutingConfig)
    check: CheckConfig = Field(default_factory=CheckConfig)

    @property
    def document_path(self) -> Path:
        """Where the campus document lives."""
        if self.document_override is not None:
            return self.document_override
        return self.project_root / self.document.filename

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        document: str | None = None,
        **cli_flags: Any,
    ) -> CampusSettings:
        """Construct settings from a CLI invocation.

        Discovers ``campusctl.toml`` via walk-up (or explicit *config_path*),
        resolves *project_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                document_override=Path(document) if document else None,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None
