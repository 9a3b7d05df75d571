"""site2desk builder settings.

Settings that control *how* a build runs (where output goes, which commands
install and package, timeouts) as opposed to *what* gets built, which is the
``BuildConfig``.  Pydantic v2 models so they validate at construction time
and serialise to/from JSON or environment variables without boiler-plate.
"""

from __future__ import annotations

import os
import shlex
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, ValidationError

from site2desk.errors import Site2DeskError


class Settings(BaseModel):
    """Builder settings.

    Instances are typically created once by the CLI entry point and passed to
    ``BuildOrchestrator``.  Nothing here is shared between builds.
    """

    output_root: Path = Field(default=Path("./output"))
    npm_command: str = Field(default="npm install")
    packager_command: str = Field(default="npx electron-builder")
    install_timeout: int = Field(default=600, ge=10, description="Dependency install timeout in seconds")
    packager_timeout: int = Field(
        default=1800, ge=10, description="Timeout for one packager invocation in seconds"
    )
    skip_install: bool = Field(default=False, description="Generate sources only, no npm install")
    skip_package: bool = Field(default=False, description="Stop before running the packager")
    check_url: bool = Field(default=False, description="Probe the site before building")
    url_check_timeout: int = Field(default=10, ge=1)

    # ------------------------------------------------------------------
    # Derived paths (read-only helpers)
    # ------------------------------------------------------------------

    def output_dir_for(self, slug: str) -> Path:
        """Output directory of one build."""
        return self.output_root / slug

    def app_dir_for(self, slug: str) -> Path:
        """Directory holding the generated application sources."""
        return self.output_dir_for(slug) / "app"

    def config_snapshot_path(self, slug: str) -> Path:
        """Path of the ``config-used.json`` snapshot."""
        return self.output_dir_for(slug) / "config-used.json"

    def npm_argv(self) -> list[str]:
        return shlex.split(self.npm_command)

    def packager_argv(self, extra_args: tuple[str, ...] | list[str] = ()) -> list[str]:
        return [*shlex.split(self.packager_command), *extra_args]

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the settings to a JSON file.

        Returns:
            The path where the file was written.
        """
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return path

    @classmethod
    def load(cls, path: Path) -> "Settings":
        """Load previously-saved settings from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build ``Settings`` from environment variables.

        Recognised variables (all optional):
            SITE2DESK_OUTPUT_ROOT, SITE2DESK_NPM_COMMAND,
            SITE2DESK_PACKAGER_COMMAND, SITE2DESK_INSTALL_TIMEOUT,
            SITE2DESK_PACKAGER_TIMEOUT, SITE2DESK_SKIP_INSTALL,
            SITE2DESK_SKIP_PACKAGE, SITE2DESK_CHECK_URL.

        Raises:
            Site2DeskError: A timeout is not an integer or is out of range.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("SITE2DESK_OUTPUT_ROOT"):
            kwargs["output_root"] = Path(os.environ["SITE2DESK_OUTPUT_ROOT"])
        if os.environ.get("SITE2DESK_NPM_COMMAND"):
            kwargs["npm_command"] = os.environ["SITE2DESK_NPM_COMMAND"]
        if os.environ.get("SITE2DESK_PACKAGER_COMMAND"):
            kwargs["packager_command"] = os.environ["SITE2DESK_PACKAGER_COMMAND"]

        for field_name in ("install_timeout", "packager_timeout"):
            variable = f"SITE2DESK_{field_name.upper()}"
            value = os.environ.get(variable)
            if value:
                try:
                    kwargs[field_name] = int(value)
                except ValueError as exc:
                    raise Site2DeskError(f"{variable} must be an integer, got {value!r}") from exc

        for flag in ("skip_install", "skip_package", "check_url"):
            value = os.environ.get(f"SITE2DESK_{flag.upper()}")
            if value:
                kwargs[flag] = value.strip().lower() in ("1", "true", "yes", "on")

        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise Site2DeskError(f"Invalid SITE2DESK_* environment settings: {exc}") from exc
