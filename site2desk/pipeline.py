"""site2desk build orchestrator and command-line entry point.

Drives one build request through its stages, strictly in order:

validate -> compile -> write sources -> install dependencies ->
package (once per packaging-plan entry) -> save ``config-used.json``.

Progress is reported as ``ProgressEvent`` values to an optional callback;
the orchestrator itself prints nothing.  The CLI renders the events with a
Rich progress bar.

``config-used.json`` holds the normalised record the build actually used:
defaults filled in, loose values coerced, unknown fields kept.

Usage::

    site2desk init my-app.config.json --url https://example.com --name "My App" --app-id com.example.myapp
    site2desk build my-app.config.json --format win --format deb
    site2desk compile my-app.config.json -o ./generated
"""

from __future__ import annotations

import asyncio
import json
import shutil
import sys
import time
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

from site2desk.compiler import (
    ApplicationDescriptor,
    BuildConfig,
    PackagingTarget,
    ValidatedConfig,
    compile_config,
    load_config,
    save_config,
    validate_config,
    write_descriptor,
)
from site2desk.config import Settings
from site2desk.errors import (
    BuildInProgressError,
    BuildIOError,
    DependencyInstallError,
    PackagingError,
    Site2DeskError,
)
from site2desk.utils import (
    console,
    create_progress,
    ensure_dir,
    format_duration,
    last_lines,
    print_error,
    print_success,
    print_summary_table,
    print_warning,
    probe_url,
    run_command,
    save_json,
)

ICON_FILENAME = "icon.png"

# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ProgressEvent:
    """One progress checkpoint: a percentage (0-100) and a log line."""

    percent: int
    message: str
    warning: bool = False


ProgressCallback = Callable[[ProgressEvent], None]


class _Reporter:
    """Forwards events to the callback, never letting the percentage go back."""

    def __init__(self, callback: Optional[ProgressCallback]) -> None:
        self.callback = callback
        self.percent = 0
        self.warnings: list[str] = []

    def __call__(self, percent: int, message: str) -> None:
        self.percent = max(self.percent, min(percent, 100))
        if self.callback is not None:
            self.callback(ProgressEvent(self.percent, message))

    def warn(self, message: str) -> None:
        self.warnings.append(message)
        if self.callback is not None:
            self.callback(ProgressEvent(self.percent, message, warning=True))


@dataclass
class BuildResult:
    """Outcome of a successful build."""

    output_dir: Path
    app_dir: Path
    descriptor: ApplicationDescriptor
    installers: dict[str, Path] = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)
    duration: float = 0.0


# ---------------------------------------------------------------------------
# Build Orchestrator
# ---------------------------------------------------------------------------


class BuildOrchestrator:
    """Runs build requests, one at a time.

    All state belongs to the orchestrator instance; a second ``build`` call
    while one is running is rejected with ``BuildInProgressError`` instead of
    racing on the same output directory.

    Attributes:
        settings: Builder settings (output root, commands, timeouts).
    """

    def __init__(self, settings: Optional[Settings] = None) -> None:
        self.settings = settings or Settings()
        self._lock = asyncio.Lock()

    @property
    def busy(self) -> bool:
        return self._lock.locked()

    async def build(
        self,
        config: Union[BuildConfig, Mapping[str, Any]],
        on_progress: Optional[ProgressCallback] = None,
    ) -> BuildResult:
        """Validate, compile, write, install and package one application.

        Args:
            config: The build configuration (model or raw JSON mapping).
            on_progress: Optional callback receiving ``ProgressEvent`` values.

        Returns:
            A ``BuildResult`` describing the output tree.

        Raises:
            ConfigValidationError: Before anything is written to disk.
            BuildIOError: A directory or file could not be written.
            DependencyInstallError: The dependency install command failed.
            PackagingError: The packager failed for one format.
            BuildInProgressError: Another build is running on this instance.
        """
        if self._lock.locked():
            raise BuildInProgressError()
        async with self._lock:
            return await self._run(config, _Reporter(on_progress))

    async def _run(self, raw: Union[BuildConfig, Mapping[str, Any]], report: _Reporter) -> BuildResult:
        started = time.monotonic()

        report(5, "Validating configuration...")
        config = validate_config(raw)

        if self.settings.check_url:
            reachable = await probe_url(config.url, timeout=self.settings.url_check_timeout)
            if not reachable:
                report.warn(f"{config.url} did not answer; building anyway.")

        descriptor = compile_config(config)
        for tag in descriptor.ignored_formats:
            report.warn(f"Ignoring unknown package format {tag!r}.")

        output_dir = self.settings.output_dir_for(descriptor.slug)
        app_dir = self.settings.app_dir_for(descriptor.slug)

        report(10, "Creating project structure...")
        try:
            ensure_dir(app_dir)
        except OSError as exc:
            raise BuildIOError(app_dir, str(exc)) from exc

        report(20, "Generating app source code...")
        try:
            await asyncio.to_thread(write_descriptor, descriptor, app_dir)
            if config.icon_path:
                await asyncio.to_thread(shutil.copyfile, config.icon_path, app_dir / ICON_FILENAME)
        except OSError as exc:
            raise BuildIOError(getattr(exc, "filename", None) or app_dir, str(exc)) from exc

        if self.settings.skip_install:
            report.warn("Skipping dependency installation.")
        else:
            report(40, "Installing dependencies...")
            await self.install_dependencies(app_dir)

        installers: dict[str, Path] = {}
        if self.settings.skip_package:
            report.warn("Skipping packaging.")
        else:
            report(60, "Packaging application...")
            plan = descriptor.packaging_plan
            for index, target in enumerate(plan):
                fmt = target.format.value
                report(60 + (30 * index) // len(plan), f"Packaging for {fmt}...")
                installers[fmt] = await self.package_target(app_dir, output_dir, target)
                report(60 + (30 * (index + 1)) // len(plan), f"Packaging for {fmt} completed.")

        report(90, "Saving configuration...")
        snapshot = self.settings.config_snapshot_path(descriptor.slug)
        try:
            await save_json(config.to_record(), snapshot)
        except OSError as exc:
            raise BuildIOError(snapshot, str(exc)) from exc

        report(100, "Build completed successfully!")
        return BuildResult(
            output_dir=output_dir,
            app_dir=app_dir,
            descriptor=descriptor,
            installers=installers,
            warnings=list(report.warnings),
            duration=time.monotonic() - started,
        )

    async def install_dependencies(self, app_dir: Path) -> None:
        """Install the generated application's dependencies.

        Raises:
            DependencyInstallError: The install command exited non-zero.
        """
        returncode, stdout, stderr = await run_command(
            self.settings.npm_argv(),
            cwd=app_dir,
            timeout=self.settings.install_timeout,
        )
        if returncode != 0:
            raise DependencyInstallError(
                last_lines(stderr or stdout) or f"exit status {returncode}"
            )

    async def package_target(self, app_dir: Path, output_dir: Path, target: PackagingTarget) -> Path:
        """Run the packager for a single plan entry.

        Independent of every other entry, so a caller can retry just the
        format that failed.

        Returns:
            The directory the installers were written to.

        Raises:
            PackagingError: The packager exited non-zero.
            BuildIOError: The per-format config file could not be written.
        """
        fmt = target.format.value
        config_path = app_dir / target.config_filename
        try:
            config_path.write_text(
                json.dumps(target.builder_config, indent=2) + "\n", encoding="utf-8"
            )
        except OSError as exc:
            raise BuildIOError(config_path, str(exc)) from exc

        returncode, stdout, stderr = await run_command(
            self.settings.packager_argv(target.packager_args),
            cwd=app_dir,
            timeout=self.settings.packager_timeout,
        )
        if returncode != 0:
            raise PackagingError(fmt, last_lines(stderr or stdout) or f"exit status {returncode}")
        return output_dir / target.output_subdir


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def _load_validated(path: str) -> ValidatedConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise Site2DeskError(f"Configuration file not found: {config_path}")
    return validate_config(load_config(config_path))


def _cmd_validate(args: Any) -> int:
    config = _load_validated(args.config)
    descriptor = compile_config(config)
    print_summary_table(
        {
            "Name": config.name,
            "Slug": config.slug,
            "App ID": config.app_id,
            "URL": config.url,
            "Formats": ", ".join(t.format.value for t in descriptor.packaging_plan) or "none",
            "Hooks": ", ".join(h.value for h in descriptor.hooks),
        },
        title="Configuration",
    )
    for tag in descriptor.ignored_formats:
        print_warning(f"Ignoring unknown package format {tag!r}.")
    print_success("Configuration is valid.")
    return 0


def _cmd_compile(args: Any) -> int:
    config = _load_validated(args.config)
    descriptor = compile_config(config)
    out = Path(args.output) if args.output else Settings().app_dir_for(descriptor.slug)
    try:
        written = write_descriptor(descriptor, out)
    except OSError as exc:
        raise BuildIOError(out, str(exc)) from exc
    for path in written:
        console.print(f"  [green]+[/green] {path}")
    print_success(f"Generated {len(written)} file(s) in {out}")
    return 0


def _cmd_init(args: Any) -> int:
    config = BuildConfig(url=args.url, name=args.name, app_id=args.app_id)
    validate_config(config)
    target = Path(args.path)
    if target.exists() and not args.force:
        raise Site2DeskError(f"{target} already exists (use --force to overwrite)")
    save_config(config, target)
    print_success(f"Wrote {target}")
    return 0


def _cmd_build(args: Any) -> int:
    settings = Settings.from_env()
    updates: dict[str, Any] = {}
    if args.output:
        updates["output_root"] = Path(args.output)
    if args.skip_install:
        updates["skip_install"] = True
    if args.skip_package:
        updates["skip_package"] = True
    if args.check_url:
        updates["check_url"] = True
    if updates:
        settings = settings.model_copy(update=updates)

    config_path = Path(args.config)
    if not config_path.exists():
        raise Site2DeskError(f"Configuration file not found: {config_path}")
    config = load_config(config_path)
    if args.format:
        config = config.model_copy(update={"package_formats": tuple(args.format)})

    orchestrator = BuildOrchestrator(settings)
    with create_progress() as progress:
        task = progress.add_task("Starting build...", total=100)

        def on_progress(event: ProgressEvent) -> None:
            progress.update(task, completed=event.percent, description=event.message)
            style = "yellow" if event.warning else "dim"
            progress.console.print(f"  [{style}]{event.message}[/{style}]")

        result = asyncio.run(orchestrator.build(config, on_progress))

    print_summary_table(
        {
            "Output": str(result.output_dir.resolve()),
            "Sources": str(result.app_dir),
            "Installers": ", ".join(f"{k}: {v}" for k, v in result.installers.items()) or "none",
            "Duration": format_duration(result.duration),
        },
        title="Build Results",
    )
    print_success("Build completed successfully!")
    return 0


# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------


def main(argv: Optional[list[str]] = None) -> None:
    """CLI entry point for ``site2desk``."""
    import argparse

    parser = argparse.ArgumentParser(
        prog="site2desk",
        description="site2desk -- package a website as a desktop application",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  site2desk init app.config.json --url https://example.com --name 'My App' --app-id com.example.app\n"
            "  site2desk validate app.config.json\n"
            "  site2desk compile app.config.json -o ./generated\n"
            "  site2desk build app.config.json --format win --format deb\n"
        ),
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p_init = sub.add_parser("init", help="Write a starter configuration file")
    p_init.add_argument("path", help="Where to write the configuration")
    p_init.add_argument("--url", required=True)
    p_init.add_argument("--name", required=True)
    p_init.add_argument("--app-id", required=True)
    p_init.add_argument("--force", action="store_true", help="Overwrite an existing file")
    p_init.set_defaults(handler=_cmd_init)

    p_validate = sub.add_parser("validate", help="Check a configuration file")
    p_validate.add_argument("config")
    p_validate.set_defaults(handler=_cmd_validate)

    p_compile = sub.add_parser("compile", help="Generate application sources only")
    p_compile.add_argument("config")
    p_compile.add_argument("--output", "-o", default=None, help="Directory for the generated sources")
    p_compile.set_defaults(handler=_cmd_compile)

    p_build = sub.add_parser("build", help="Generate, install and package an application")
    p_build.add_argument("config")
    p_build.add_argument("--output", "-o", default=None, help="Output root (default: ./output)")
    p_build.add_argument(
        "--format", action="append", default=None,
        help="Package format (win, deb, appimage); repeat for several",
    )
    p_build.add_argument("--skip-install", action="store_true", help="Do not run npm install")
    p_build.add_argument("--skip-package", action="store_true", help="Do not run the packager")
    p_build.add_argument("--check-url", action="store_true", help="Probe the site before building")
    p_build.set_defaults(handler=_cmd_build)

    args = parser.parse_args(argv)

    try:
        code = args.handler(args)
    except Site2DeskError as exc:
        print_error(f"Error: {exc}")
        sys.exit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
