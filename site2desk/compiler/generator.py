"""Configuration-to-application compiler.

Takes a ``ValidatedConfig`` and produces an ``ApplicationDescriptor``: the
generated ``main.js`` entry script, the ``package.json`` manifest, an
optional ``preload.js`` and the packaging plan.  Compilation is pure; all
writing and process work is left to :mod:`site2desk.pipeline`.
"""

from __future__ import annotations

from typing import Any, Optional

from .hooks import plan_hooks
from .models import ApplicationDescriptor, BehaviorHook, ValidatedConfig
from .packaging import build_packaging_plan
from .templates import TemplateRenderer


# ---------------------------------------------------------------------------
# Generated application constants
# ---------------------------------------------------------------------------

ENTRY_FILENAME = "main.js"
OUTPUT_DIRECTORY = "dist"

DEV_DEPENDENCIES: dict[str, str] = {
    "electron": "^25.0.0",
    "electron-builder": "^24.0.0",
}


# ---------------------------------------------------------------------------
# Compiler
# ---------------------------------------------------------------------------


class ApplicationCompiler:
    """Compiles validated configurations into application descriptors."""

    def __init__(self, renderer: Optional[TemplateRenderer] = None) -> None:
        self.renderer = renderer or TemplateRenderer()

    def compile(self, config: ValidatedConfig) -> ApplicationDescriptor:
        """Compile *config* into a descriptor.

        Raises:
            TypeError: *config* did not come from ``validate_config``.
        """
        if not isinstance(config, ValidatedConfig):
            raise TypeError("compile() requires a ValidatedConfig; call validate_config() first")

        hooks = plan_hooks(config)
        plan, ignored = build_packaging_plan(config)

        preload: Optional[str] = None
        if BehaviorHook.PRELOAD in hooks:
            preload = self.renderer.render("preload.js.j2", {"custom_preload": config.custom_preload})

        return ApplicationDescriptor(
            slug=config.slug,
            entry_script=self.render_entry_script(config, hooks),
            manifest=build_manifest(config),
            preload_script=preload,
            packaging_plan=plan,
            hooks=hooks,
            ignored_formats=ignored,
        )

    def render_entry_script(self, config: ValidatedConfig, hooks: tuple[BehaviorHook, ...]) -> str:
        """Render ``main.js`` from the window options and the enabled hooks."""
        context: dict[str, Any] = {
            "url": config.url,
            "name": config.name,
            "slug": config.slug,
            "width": config.width,
            "height": config.height,
            "resizable": config.resizable,
            "frame": config.frame,
            "always_on_top": config.always_on_top,
            "fullscreen": config.fullscreen,
            "transparent": config.transparent,
            "custom_user_agent": config.custom_user_agent,
            "hooks": {hook.value for hook in hooks},
        }
        return self.renderer.render("main.js.j2", context)


def build_manifest(config: ValidatedConfig) -> dict[str, Any]:
    """Build the generated application's ``package.json`` content."""
    return {
        "name": config.slug,
        "productName": config.name,
        "version": config.version,
        "main": ENTRY_FILENAME,
        "author": config.company,
        "description": config.description,
        "scripts": {
            "start": "electron .",
            "dist": "electron-builder",
        },
        "devDependencies": dict(DEV_DEPENDENCIES),
        "build": {
            "appId": config.app_id,
            "productName": config.name,
            "directories": {"output": OUTPUT_DIRECTORY},
            "files": ["**/*"],
        },
    }


_default_compiler: Optional[ApplicationCompiler] = None


def compile_config(config: ValidatedConfig) -> ApplicationDescriptor:
    """Compile *config* with a shared, stateless ``ApplicationCompiler``."""
    global _default_compiler
    if _default_compiler is None:
        _default_compiler = ApplicationCompiler()
    return _default_compiler.compile(config)
