"""Shared pytest fixtures for the site2desk test suite.

Provides reusable fixtures for:
- Raw and validated build configurations
- Settings pointing at temporary directories
- Markers that identify each behaviour hook in a generated entry script
- Mock subprocess helpers
"""

from __future__ import annotations

from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from site2desk.compiler import BehaviorHook, ValidatedConfig, validate_config
from site2desk.config import Settings


# ---------------------------------------------------------------------------
# Configurations
# ---------------------------------------------------------------------------

@pytest.fixture
def minimal_config_dict() -> dict[str, Any]:
    """The smallest record that passes validation."""
    return {
        "url": "https://example.com",
        "name": "My App",
        "appId": "com.example.myapp",
        "version": "1.0.0",
        "packageFormats": ["win"],
    }


@pytest.fixture
def full_config_dict() -> dict[str, Any]:
    """A record as written by the configuration form, every field filled in."""
    return {
        "url": "https://app.example.com/dashboard",
        "name": "Example Dashboard",
        "appId": "com.example.dashboard",
        "version": "2.3.1",
        "enableCookies": False,
        "enableLocalStorage": True,
        "allowRightClick": False,
        "allowDevTools": True,
        "customUserAgent": "ExampleDesktop/2.3",
        "blockExternalLinks": True,
        "allowDownloads": False,
        "sandbox": True,
        "width": 1280,
        "height": 720,
        "resizable": False,
        "frame": True,
        "alwaysOnTop": True,
        "fullscreen": False,
        "transparent": False,
        "iconPath": "",
        "windowTitle": "Dashboard",
        "themeColor": "#336699",
        "trayIcon": False,
        "productName": "Example Dashboard",
        "description": "Internal dashboard",
        "company": "Example Corp",
        "copyright": "(c) Example Corp",
        "license": "MIT",
        "customPreload": "window.addEventListener('DOMContentLoaded', () => {});",
        "packageFormats": ["win", "deb", "appimage"],
    }


@pytest.fixture
def minimal_config(minimal_config_dict: dict[str, Any]) -> ValidatedConfig:
    return validate_config(minimal_config_dict)


@pytest.fixture
def full_config(full_config_dict: dict[str, Any]) -> ValidatedConfig:
    return validate_config(full_config_dict)


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_settings(tmp_path: Path) -> Settings:
    """Settings writing under ``tmp_path/output`` with short timeouts."""
    return Settings(
        output_root=tmp_path / "output",
        install_timeout=30,
        packager_timeout=30,
    )


# ---------------------------------------------------------------------------
# Generated code markers
# ---------------------------------------------------------------------------

@pytest.fixture
def hook_markers() -> dict[BehaviorHook, str]:
    """A snippet that appears in ``main.js`` if and only if the hook is enabled."""
    return {
        BehaviorHook.COOKIE_SUPPRESSION: "onBeforeSendHeaders",
        BehaviorHook.CONTEXT_MENU_BLOCK: "'context-menu'",
        BehaviorHook.DEVTOOLS_BLOCK: "closeDevTools",
        BehaviorHook.CUSTOM_USER_AGENT: "setUserAgent",
        BehaviorHook.EXTERNAL_LINK_BLOCK: "setWindowOpenHandler",
        BehaviorHook.DOWNLOAD_REDIRECT: "setSavePath",
        BehaviorHook.DOWNLOAD_CANCEL: "// Downloads disabled.",
        BehaviorHook.SANDBOX: "sandbox: true",
        BehaviorHook.PRELOAD: "preload.js",
        BehaviorHook.ICON: "icon.png",
    }


# ---------------------------------------------------------------------------
# Mock Subprocess (generic)
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_subprocess():
    """Mock asyncio subprocess for testing command execution.

    Returns a factory that creates mock subprocess instances with configurable
    stdout, stderr, and return codes.

    Usage:
        def test_command(mock_subprocess):
            proc = mock_subprocess(stdout="output", returncode=0)
            with patch("asyncio.create_subprocess_exec", return_value=proc):
                ...
    """
    def factory(
        stdout: str = "",
        stderr: str = "",
        returncode: int = 0,
    ) -> AsyncMock:
        mock_proc = AsyncMock()
        mock_proc.communicate = AsyncMock(
            return_value=(stdout.encode("utf-8"), stderr.encode("utf-8"))
        )
        mock_proc.returncode = returncode
        mock_proc.pid = 99999
        mock_proc.kill = MagicMock()
        mock_proc.wait = AsyncMock(return_value=returncode)
        return mock_proc

    return factory
