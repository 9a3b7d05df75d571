"""Pydantic v2 models for the site2desk compiler.

Defines the user-facing ``BuildConfig`` (the JSON record produced by the
configuration form or a saved ``*.config.json`` file), its validated form,
and the ``ApplicationDescriptor`` the compiler emits.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from enum import Enum
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------

class PackageFormat(str, Enum):
    """Installer formats the packager knows how to produce."""
    WIN = "win"
    DEB = "deb"
    APPIMAGE = "appimage"


class BehaviorHook(str, Enum):
    """A unit of generated startup logic in the produced application."""
    COOKIE_SUPPRESSION = "cookie_suppression"
    CONTEXT_MENU_BLOCK = "context_menu_block"
    DEVTOOLS_BLOCK = "devtools_block"
    CUSTOM_USER_AGENT = "custom_user_agent"
    EXTERNAL_LINK_BLOCK = "external_link_block"
    DOWNLOAD_REDIRECT = "download_redirect"
    DOWNLOAD_CANCEL = "download_cancel"
    SANDBOX = "sandbox"
    PRELOAD = "preload"
    ICON = "icon"


DEFAULT_PACKAGE_FORMATS: tuple[str, ...] = (PackageFormat.WIN.value,)

# Boolean window/behaviour options.  Loose input ("false", 0, "") is coerced
# instead of rejected.
FLAG_FIELDS: tuple[str, ...] = (
    "resizable",
    "frame",
    "always_on_top",
    "fullscreen",
    "transparent",
    "enable_cookies",
    "allow_right_click",
    "allow_dev_tools",
    "block_external_links",
    "allow_downloads",
    "sandbox",
)

REQUIRED_FIELDS: tuple[str, ...] = ("url", "name", "app_id")
_TEXT_FIELDS: tuple[str, ...] = REQUIRED_FIELDS + (
    "version",
    "custom_user_agent",
    "custom_preload",
    "icon_path",
    "company",
    "description",
)
_DIMENSION_FIELDS: tuple[str, ...] = ("width", "height")

# JSON key or attribute name -> attribute name
_FIELD_KEYS: dict[str, str] = {
    key: field_name
    for field_name in (*FLAG_FIELDS, *_TEXT_FIELDS, *_DIMENSION_FIELDS, "package_formats")
    for key in (field_name, to_camel(field_name))
}
_FALSY_STRINGS = frozenset({"", "0", "false", "no", "off"})

_WHITESPACE_RUN = re.compile(r"\s+")


def slugify(name: str) -> str:
    """Derive the package/directory slug from an application name.

    Lowercases the name and replaces every run of whitespace with a single
    hyphen.  Nothing else is stripped, so ``slugify(slugify(x)) == slugify(x)``.

    Examples::

        slugify("My App")        -> "my-app"
        slugify("Big   Web\\tApp") -> "big-web-app"
    """
    return _WHITESPACE_RUN.sub("-", name).lower()


def _coerce_flag(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() not in _FALSY_STRINGS
    return bool(value)


def _scalar_text(value: Any) -> Optional[str]:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return json.dumps(value)
    if isinstance(value, (int, float)):
        return str(value)
    return None


def _coerce_text(value: Any, required: bool = False) -> Any:
    """String fields: falsy non-strings are absent, other scalars stringified.

    Lists and objects are dropped for optional fields; for required ones they
    are passed through so validation reports them.
    """
    if isinstance(value, str):
        return value
    if not value:
        return None
    text = _scalar_text(value)
    if text is None and required:
        return value
    return text


def _coerce_formats(value: Any) -> Optional[tuple[str, ...]]:
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)):
        return None
    return tuple(text for text in map(_scalar_text, value) if text is not None)


# ---------------------------------------------------------------------------
# Input configuration
# ---------------------------------------------------------------------------

class BuildConfig(BaseModel):
    """Everything needed to generate and package one desktop application.

    JSON keys use camelCase (``appId``, ``alwaysOnTop``); attributes are the
    snake_case equivalents.  Unknown keys are preserved as extras so they
    survive a save/load cycle, but the compiler never looks at them.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
        frozen=True,
        coerce_numbers_to_str=True,
    )

    url: str = ""
    name: str = ""
    app_id: str = ""
    version: str = "1.0.0"

    # Window options.  Width/height are rendered verbatim, never range checked.
    width: Union[int, float, str] = 800
    height: Union[int, float, str] = 600
    resizable: bool = True
    frame: bool = True
    always_on_top: bool = False
    fullscreen: bool = False
    transparent: bool = False

    # Behaviour options
    enable_cookies: bool = True
    allow_right_click: bool = True
    allow_dev_tools: bool = False
    block_external_links: bool = False
    allow_downloads: bool = True
    sandbox: bool = False
    custom_user_agent: str = ""

    custom_preload: str = ""
    icon_path: str = ""
    package_formats: tuple[str, ...] = Field(default=DEFAULT_PACKAGE_FORMATS)

    # Metadata copied into the manifest
    company: str = ""
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def _apply_defaults(cls, data: Any) -> Any:
        """Treat ``null`` as absent and coerce loose input.

        Only ``url``, ``name`` and ``appId`` can still fail afterwards; every
        other mistyped value either becomes a string or falls back to its
        default.
        """
        if not isinstance(data, Mapping):
            return data
        cleaned: dict[str, Any] = {}
        for key, value in data.items():
            if value is None:
                continue
            field_name = _FIELD_KEYS.get(key)
            if field_name in FLAG_FIELDS:
                value = _coerce_flag(value)
            elif field_name in _TEXT_FIELDS:
                value = _coerce_text(value, required=field_name in REQUIRED_FIELDS)
            elif field_name in _DIMENSION_FIELDS:
                if isinstance(value, bool) or not isinstance(value, (int, float, str)):
                    value = None
            elif field_name == "package_formats":
                value = _coerce_formats(value)
            if value is None:
                continue
            cleaned[key] = value
        return cleaned

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready record, camelCase keys, extras included."""
        return self.model_dump(by_alias=True, mode="json")


class ValidatedConfig(BuildConfig):
    """A ``BuildConfig`` that passed :func:`validate_config`.

    Only the validator constructs these; the compiler refuses plain
    ``BuildConfig`` instances.
    """

    @property
    def slug(self) -> str:
        return slugify(self.name)


# ---------------------------------------------------------------------------
# Compiler output
# ---------------------------------------------------------------------------

class PackagingTarget(BaseModel):
    """One entry of the packaging plan: a single packager invocation."""

    model_config = ConfigDict(frozen=True)

    format: PackageFormat
    output_subdir: str = Field(..., description="Installer directory, relative to the output root")
    config_filename: str = Field(..., description="Per-format packager config written into the app dir")
    builder_config: dict[str, Any] = Field(default_factory=dict)
    packager_args: tuple[str, ...] = Field(..., description="Arguments appended to the packager command")


class ApplicationDescriptor(BaseModel):
    """Everything the orchestrator needs to write and package the application."""

    model_config = ConfigDict(frozen=True)

    slug: str
    entry_script: str
    manifest: dict[str, Any]
    preload_script: Optional[str] = None
    packaging_plan: tuple[PackagingTarget, ...] = ()
    hooks: tuple[BehaviorHook, ...] = ()
    ignored_formats: tuple[str, ...] = ()

    def manifest_text(self) -> str:
        """Serialise the manifest the way it is written to ``package.json``."""
        return json.dumps(self.manifest, indent=2, ensure_ascii=False) + "\n"

    def source_files(self) -> dict[str, str]:
        """Return ``{filename: content}`` for every generated source file."""
        files = {
            "main.js": self.entry_script,
            "package.json": self.manifest_text(),
        }
        if self.preload_script is not None:
            files["preload.js"] = self.preload_script
        return files
