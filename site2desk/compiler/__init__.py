"""site2desk compiler -- turns a build configuration into application sources.

Validation and compilation are pure; nothing here touches the file system
except the helpers in ``store``.

Quick usage::

    from site2desk.compiler import compile_config, validate_config

    config = validate_config({
        "url": "https://example.com",
        "name": "My App",
        "appId": "com.example.myapp",
    })
    descriptor = compile_config(config)
    descriptor.manifest["name"]  # "my-app"
"""

from site2desk.compiler.generator import ApplicationCompiler, build_manifest, compile_config
from site2desk.compiler.hooks import plan_hooks
from site2desk.compiler.models import (
    ApplicationDescriptor,
    BehaviorHook,
    BuildConfig,
    PackageFormat,
    PackagingTarget,
    ValidatedConfig,
    slugify,
)
from site2desk.compiler.packaging import build_packaging_plan
from site2desk.compiler.store import load_config, save_config, write_descriptor
from site2desk.compiler.templates import TemplateRenderer
from site2desk.compiler.validator import validate_config

__all__ = [
    "ApplicationCompiler",
    "ApplicationDescriptor",
    "BehaviorHook",
    "BuildConfig",
    "PackageFormat",
    "PackagingTarget",
    "TemplateRenderer",
    "ValidatedConfig",
    "build_manifest",
    "build_packaging_plan",
    "compile_config",
    "load_config",
    "plan_hooks",
    "save_config",
    "slugify",
    "validate_config",
    "write_descriptor",
]
