"""Decide which behaviour hooks the generated entry script carries.

The decision is kept separate from text rendering so that the mapping from
configuration toggles to hooks can be tested without looking at JavaScript.
"""

from __future__ import annotations

from .models import BehaviorHook, BuildConfig


def plan_hooks(config: BuildConfig) -> tuple[BehaviorHook, ...]:
    """Return the enabled hooks for *config* in rendering order.

    Exactly one of ``DOWNLOAD_REDIRECT`` / ``DOWNLOAD_CANCEL`` is always
    present; every other hook is independent of the rest.
    """
    hooks: list[BehaviorHook] = []

    if config.sandbox:
        hooks.append(BehaviorHook.SANDBOX)
    if config.custom_preload:
        hooks.append(BehaviorHook.PRELOAD)
    if config.icon_path:
        hooks.append(BehaviorHook.ICON)
    if not config.enable_cookies:
        hooks.append(BehaviorHook.COOKIE_SUPPRESSION)
    if not config.allow_right_click:
        hooks.append(BehaviorHook.CONTEXT_MENU_BLOCK)
    if not config.allow_dev_tools:
        hooks.append(BehaviorHook.DEVTOOLS_BLOCK)
    if config.custom_user_agent:
        hooks.append(BehaviorHook.CUSTOM_USER_AGENT)
    if config.block_external_links:
        hooks.append(BehaviorHook.EXTERNAL_LINK_BLOCK)

    if config.allow_downloads:
        hooks.append(BehaviorHook.DOWNLOAD_REDIRECT)
    else:
        hooks.append(BehaviorHook.DOWNLOAD_CANCEL)

    return tuple(hooks)
