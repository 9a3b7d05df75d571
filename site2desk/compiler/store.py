"""Reading and writing build configurations and generated sources."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from site2desk.errors import ConfigValidationError
from site2desk.utils import ensure_dir, load_json

from .models import ApplicationDescriptor, BuildConfig


def config_to_json(config: BuildConfig) -> str:
    """Serialise *config* as the human-readable JSON record."""
    return json.dumps(config.to_record(), indent=2, ensure_ascii=False) + "\n"


def save_config(config: BuildConfig, path: str | Path) -> Path:
    """Persist a configuration record to *path*.

    Parent directories are created.  Unknown fields are written back as they
    were read.

    Returns:
        The path written.
    """
    target = Path(path)
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(config_to_json(config), encoding="utf-8")
    return target


def load_config(path: str | Path) -> BuildConfig:
    """Load a configuration record previously written by :func:`save_config`.

    The result is not validated; pass it to ``validate_config`` before
    compiling.

    Raises:
        FileNotFoundError: If *path* does not exist.
        ConfigValidationError: If the file cannot be read as UTF-8 JSON, is
            not a JSON object, or a field has an unusable type.
    """
    try:
        data = load_json(path)
    except FileNotFoundError:
        raise
    except json.JSONDecodeError as exc:
        raise ConfigValidationError(f"{path} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ConfigValidationError(f"{path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise ConfigValidationError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigValidationError(f"{path} must contain a JSON object")
    try:
        return BuildConfig.model_validate(data)
    except ValidationError as exc:
        raise ConfigValidationError(f"Malformed configuration in {path}: {exc}") from exc


def write_descriptor(descriptor: ApplicationDescriptor, app_dir: str | Path) -> list[Path]:
    """Write the descriptor's source files into *app_dir*.

    Returns:
        The written file paths, in a stable order.
    """
    out = Path(app_dir)
    ensure_dir(out)
    written: list[Path] = []
    for filename, content in descriptor.source_files().items():
        path = out / filename
        path.write_text(content, encoding="utf-8")
        written.append(path)
    return written
