"""Build context models."""

from sizelens.analyzer.model.build_context import (
    AndroidPluginVersion,
    BuildContext,
    BuildContextBuilder,
    BundleConfig,
    BundleConfigLocation,
    Library,
    PluginType,
    ProguardConfig,
)

__all__ = [
    "BuildContext",
    "BuildContextBuilder",
    "PluginType",
    "AndroidPluginVersion",
    "ProguardConfig",
    "BundleConfig",
    "BundleConfigLocation",
    "Library",
]
