"""Packaging plan construction.

Turns the requested ``packageFormats`` into an ordered tuple of
``PackagingTarget`` entries.  Each entry is self-contained (its own
electron-builder config file and output directory) so the orchestrator can
run, time out or retry one format without touching the others.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .models import DEFAULT_PACKAGE_FORMATS, PackageFormat, PackagingTarget, ValidatedConfig

INSTALLERS_DIR = "installers"

# format -> (electron-builder platform key, target name, CLI platform args)
_TARGETS: dict[PackageFormat, tuple[str, str, tuple[str, ...]]] = {
    PackageFormat.WIN: ("win", "nsis", ("--win",)),
    PackageFormat.DEB: ("linux", "deb", ("--linux", "deb")),
    PackageFormat.APPIMAGE: ("linux", "AppImage", ("--linux", "AppImage")),
}


def split_formats(formats: Iterable[str]) -> tuple[list[PackageFormat], list[str]]:
    """Split requested tags into known formats and ignored tags.

    Order is preserved and duplicates collapse onto their first occurrence.
    An empty request falls back to ``DEFAULT_PACKAGE_FORMATS``.
    """
    requested = list(formats) or list(DEFAULT_PACKAGE_FORMATS)
    known: list[PackageFormat] = []
    ignored: list[str] = []
    for tag in requested:
        try:
            package_format = PackageFormat(tag)
        except ValueError:
            if tag not in ignored:
                ignored.append(tag)
            continue
        if package_format not in known:
            known.append(package_format)
    return known, ignored


def builder_config_for(config: ValidatedConfig, package_format: PackageFormat) -> dict[str, Any]:
    """Return the electron-builder configuration for one format.

    Paths are relative to the generated app directory, so the result does
    not depend on where the build runs.
    """
    platform_key, target, _ = _TARGETS[package_format]
    return {
        "appId": config.app_id,
        "productName": config.name,
        "directories": {
            "output": f"../{INSTALLERS_DIR}/{package_format.value}",
            "app": ".",
        },
        platform_key: {"target": target},
        "files": ["**/*"],
    }


def build_packaging_plan(config: ValidatedConfig) -> tuple[tuple[PackagingTarget, ...], tuple[str, ...]]:
    """Build the packaging plan for *config*.

    Returns:
        ``(plan, ignored_formats)``.  Unknown tags produce no plan entry and
        no error; they are only reported back to the caller.
    """
    known, ignored = split_formats(config.package_formats)
    plan = []
    for package_format in known:
        config_filename = f"electron-builder.{package_format.value}.json"
        _, _, platform_args = _TARGETS[package_format]
        plan.append(
            PackagingTarget(
                format=package_format,
                output_subdir=f"{INSTALLERS_DIR}/{package_format.value}",
                config_filename=config_filename,
                builder_config=builder_config_for(config, package_format),
                packager_args=(*platform_args, "--config", config_filename),
            )
        )
    return tuple(plan), tuple(ignored)
