"""Tests for the compiler data models (site2desk.compiler.models).

Covers:
- slugify behaviour and idempotence
- BuildConfig defaults, aliases and loose input handling
- Extra fields kept on the record
- ApplicationDescriptor file rendering
"""

from __future__ import annotations

import json

import pytest

from site2desk.compiler.models import (
    DEFAULT_PACKAGE_FORMATS,
    ApplicationDescriptor,
    BuildConfig,
    ValidatedConfig,
    slugify,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# slugify
# ---------------------------------------------------------------------------


class TestSlugify:
    def test_lowercases_and_hyphenates(self):
        assert slugify("My App") == "my-app"

    def test_collapses_whitespace_runs(self):
        assert slugify("Big   Web\tApp\n2") == "big-web-app-2"

    def test_keeps_other_characters(self):
        assert slugify("Foo_Bar.v2") == "foo_bar.v2"

    def test_empty(self):
        assert slugify("") == ""

    @pytest.mark.parametrize(
        "name",
        ["My App", "  leading and trailing  ", "ALL CAPS\tTAB", "already-a-slug", "Ünïcode Näme"],
    )
    def test_idempotent(self, name):
        assert slugify(slugify(name)) == slugify(name)


# ---------------------------------------------------------------------------
# BuildConfig
# ---------------------------------------------------------------------------


class TestBuildConfigDefaults:
    def test_defaults(self):
        config = BuildConfig()
        assert config.version == "1.0.0"
        assert config.width == 800
        assert config.height == 600
        assert config.resizable is True
        assert config.frame is True
        assert config.always_on_top is False
        assert config.fullscreen is False
        assert config.transparent is False
        assert config.enable_cookies is True
        assert config.allow_right_click is True
        assert config.allow_dev_tools is False
        assert config.block_external_links is False
        assert config.allow_downloads is True
        assert config.sandbox is False
        assert config.custom_user_agent == ""
        assert config.custom_preload == ""
        assert config.icon_path == ""
        assert config.package_formats == DEFAULT_PACKAGE_FORMATS
        assert config.company == ""
        assert config.description == ""

    def test_camel_case_aliases(self):
        config = BuildConfig.model_validate(
            {"appId": "com.x", "alwaysOnTop": True, "allowDevTools": True, "packageFormats": ["deb"]}
        )
        assert config.app_id == "com.x"
        assert config.always_on_top is True
        assert config.allow_dev_tools is True
        assert config.package_formats == ("deb",)

    def test_snake_case_names_accepted(self):
        config = BuildConfig(app_id="com.x", enable_cookies=False)
        assert config.app_id == "com.x"
        assert config.enable_cookies is False

    def test_null_means_default(self):
        config = BuildConfig.model_validate({"width": None, "enableCookies": None, "version": None})
        assert config.width == 800
        assert config.enable_cookies is True
        assert config.version == "1.0.0"

    @pytest.mark.parametrize(
        "value, expected",
        [("false", False), ("False", False), ("0", False), ("", False), ("off", False),
         ("true", True), ("yes", True), (0, False), (1, True)],
    )
    def test_loose_flags(self, value, expected):
        config = BuildConfig.model_validate({"sandbox": value})
        assert config.sandbox is expected

    def test_dimensions_not_range_checked(self):
        config = BuildConfig.model_validate({"width": -5, "height": "tall"})
        assert config.width == -5
        assert config.height == "tall"

    def test_single_format_string(self):
        config = BuildConfig.model_validate({"packageFormats": "appimage"})
        assert config.package_formats == ("appimage",)

    def test_frozen(self):
        config = BuildConfig(name="x")
        with pytest.raises(Exception):
            config.name = "y"  # type: ignore[misc]

    def test_input_mapping_not_mutated(self):
        raw = {"name": "X", "width": None, "sandbox": "false"}
        BuildConfig.model_validate(raw)
        assert raw == {"name": "X", "width": None, "sandbox": "false"}


class TestBuildConfigRecord:
    def test_record_uses_camel_case(self, minimal_config_dict):
        record = BuildConfig.model_validate(minimal_config_dict).to_record()
        assert record["appId"] == "com.example.myapp"
        assert record["packageFormats"] == ["win"]
        assert "app_id" not in record

    def test_extras_preserved(self, full_config_dict):
        record = BuildConfig.model_validate(full_config_dict).to_record()
        assert record["themeColor"] == "#336699"
        assert record["windowTitle"] == "Dashboard"
        assert record["license"] == "MIT"

    def test_record_is_json_serialisable(self, full_config_dict):
        record = BuildConfig.model_validate(full_config_dict).to_record()
        assert json.loads(json.dumps(record)) == record


class TestValidatedConfig:
    def test_slug(self, minimal_config):
        assert isinstance(minimal_config, ValidatedConfig)
        assert minimal_config.slug == "my-app"


# ---------------------------------------------------------------------------
# ApplicationDescriptor
# ---------------------------------------------------------------------------


class TestApplicationDescriptor:
    def test_source_files_without_preload(self):
        descriptor = ApplicationDescriptor(slug="a", entry_script="// main", manifest={"name": "a"})
        files = descriptor.source_files()
        assert list(files) == ["main.js", "package.json"]
        assert json.loads(files["package.json"]) == {"name": "a"}
        assert files["package.json"].endswith("\n")

    def test_source_files_with_preload(self):
        descriptor = ApplicationDescriptor(
            slug="a", entry_script="// main", manifest={}, preload_script="// preload"
        )
        assert descriptor.source_files()["preload.js"] == "// preload"
