"""Tests for the toggle -> hook decision (site2desk.compiler.hooks)."""

from __future__ import annotations

import itertools

import pytest

from site2desk.compiler.hooks import plan_hooks
from site2desk.compiler.models import BehaviorHook, BuildConfig


pytestmark = pytest.mark.unit


TOGGLES = (
    "enable_cookies",
    "allow_right_click",
    "allow_dev_tools",
    "block_external_links",
    "allow_downloads",
    "sandbox",
)


def _expected(values: dict[str, bool]) -> set[BehaviorHook]:
    expected: set[BehaviorHook] = set()
    if not values["enable_cookies"]:
        expected.add(BehaviorHook.COOKIE_SUPPRESSION)
    if not values["allow_right_click"]:
        expected.add(BehaviorHook.CONTEXT_MENU_BLOCK)
    if not values["allow_dev_tools"]:
        expected.add(BehaviorHook.DEVTOOLS_BLOCK)
    if values["block_external_links"]:
        expected.add(BehaviorHook.EXTERNAL_LINK_BLOCK)
    if values["sandbox"]:
        expected.add(BehaviorHook.SANDBOX)
    expected.add(
        BehaviorHook.DOWNLOAD_REDIRECT if values["allow_downloads"] else BehaviorHook.DOWNLOAD_CANCEL
    )
    return expected


class TestPlanHooks:
    def test_defaults(self):
        hooks = plan_hooks(BuildConfig())
        assert hooks == (BehaviorHook.DEVTOOLS_BLOCK, BehaviorHook.DOWNLOAD_REDIRECT)

    def test_every_toggle_combination(self):
        for combo in itertools.product((False, True), repeat=len(TOGGLES)):
            values = dict(zip(TOGGLES, combo))
            hooks = plan_hooks(BuildConfig(**values))
            assert set(hooks) == _expected(values), values
            assert len(hooks) == len(set(hooks))

    def test_custom_user_agent(self):
        assert BehaviorHook.CUSTOM_USER_AGENT in plan_hooks(BuildConfig(custom_user_agent="UA/1"))
        assert BehaviorHook.CUSTOM_USER_AGENT not in plan_hooks(BuildConfig(custom_user_agent=""))

    def test_preload_and_icon(self):
        hooks = plan_hooks(BuildConfig(custom_preload="console.log(1);", icon_path="/tmp/i.png"))
        assert BehaviorHook.PRELOAD in hooks
        assert BehaviorHook.ICON in hooks

    def test_window_flags_do_not_add_hooks(self):
        hooks = plan_hooks(
            BuildConfig(resizable=False, frame=False, always_on_top=True, fullscreen=True, transparent=True)
        )
        assert hooks == plan_hooks(BuildConfig())

    def test_download_hooks_are_exclusive(self):
        for allow in (True, False):
            hooks = set(plan_hooks(BuildConfig(allow_downloads=allow)))
            assert len(hooks & {BehaviorHook.DOWNLOAD_REDIRECT, BehaviorHook.DOWNLOAD_CANCEL}) == 1
