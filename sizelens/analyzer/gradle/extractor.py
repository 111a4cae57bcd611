"""Extraction of a build context from a Gradle build script AST."""

from collections.abc import Iterator
from typing import NamedTuple

from sizelens.analyzer.gradle.ast_nodes import (
    Assignment,
    BoolLiteral,
    Call,
    Node,
    Script,
    Value,
    first_argument,
)
from sizelens.analyzer.gradle.variables import VariableTable
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
from sizelens.core.logger.logger import get_logger

PLUGIN_TYPES = {
    "com.android.application": PluginType.APPLICATION,
    "com.android.dynamic-feature": PluginType.DYNAMIC_FEATURE,
    "com.android.feature": PluginType.FEATURE,
}
ANDROID_PLUGIN_PREFIX = "com.android."
ANDROID_PLUGIN_GROUP = "com.android.tools.build"
ANDROID_PLUGIN_ARTIFACT = "gradle"

MIN_SDK_PROPERTIES = ("minSdkVersion", "minSdk")
TARGET_SDK_PROPERTIES = ("targetSdkVersion", "targetSdk")

MINIFY_PROPERTIES = ("minifyEnabled", "isMinifyEnabled", "setMinifyEnabled")
PROGUARD_FILE_CALLS = ("proguardFiles", "proguardFile", "setProguardFiles")
# The built-in shrinker selected by "useProguard false" never obfuscates.
USE_PROGUARD_PROPERTIES = ("useProguard", "setUseProguard")
NAMED_BUILD_TYPE_CALLS = {"getByName", "create", "maybeCreate", "register", "named"}
CONTAINER_CALLS = {"all", "each", "forEach", "configureEach", "whenObjectAdded", "matching", "withType"}

SPLIT_BLOCKS = ("abi", "density", "language")
ENABLE_SPLIT_PROPERTY = "enableSplit"

WEAR_APK_MARKER = "embedMicroApp"
WEAR_APP_CONFIGURATION = "wearApp"
ON_DEMAND_MARKER = "onDemand"


class Property(NamedTuple):
    """A ``name value`` / ``name = value`` / ``name(value)`` statement."""

    name: str
    value: Value
    line: int


def as_property(node: Node) -> Property | None:
    """Read a statement as a single-valued property, if it is one."""
    if isinstance(node, Assignment) and node.operator == "=":
        return Property(node.name, node.value, node.line)
    if (
        isinstance(node, Call)
        and node.body is None
        and node.receiver is None
        and not node.named_args
        and len(node.positional_args) == 1
    ):
        return Property(node.name, node.positional_args[0], node.line)
    return None


def iter_nodes(nodes: list[Node]) -> Iterator[Node]:
    """Yield nodes depth-first, descending into call bodies."""
    for node in nodes:
        yield node
        if isinstance(node, Call) and node.body:
            yield from iter_nodes(node.body)


def blocks_named(nodes: list[Node], name: str) -> Iterator[list[Node]]:
    """Yield the bodies of ``name { ... }`` blocks among the given nodes."""
    for node in nodes:
        if isinstance(node, Call) and node.name == name and node.body is not None and node.receiver is None:
            yield node.body


def parse_coordinate(coordinate: str) -> Library | None:
    """Parse ``group:artifact:version`` (an ``@ext`` suffix is ignored)."""
    coordinate = coordinate.strip().split("@", 1)[0]
    parts = coordinate.split(":")
    if len(parts) != 3 or not all(part.strip() for part in parts):
        return None
    group_id, artifact_id, version = (part.strip() for part in parts)
    return Library(group_id=group_id, artifact_id=artifact_id, version=version)


class _SplitState:
    """Bundle split flag and explicit declaration line."""

    def __init__(self) -> None:
        self.enabled = True
        self.line: int | None = None


class ContextExtractor:
    """Walks a build script AST and fills a :class:`BuildContextBuilder`.

    Only a fixed catalogue of shapes is recognized; every other statement is
    skipped. A recognized shape whose value cannot be determined leaves the
    field at its default instead of failing.
    """

    def __init__(
        self,
        variables: VariableTable,
        default_min_sdk_version: int,
        default_target_sdk_version: int,
    ) -> None:
        """Initialize the extractor.

        Args:
            variables: Resolved variables of the script.
            default_min_sdk_version: Used when no minSdkVersion is resolved.
            default_target_sdk_version: Used when no targetSdkVersion is resolved.
        """
        self.logger = get_logger(__name__)
        self.variables = variables
        self.default_min_sdk_version = default_min_sdk_version
        self.default_target_sdk_version = default_target_sdk_version
        self._reset()

    def _reset(self) -> None:
        self._plugin_type: PluginType | None = None
        self._min_sdk: int | None = None
        self._target_sdk: int | None = None
        self._build_tool_version: AndroidPluginVersion | None = None
        self._proguard_configs: dict[str, ProguardConfig] = {}
        self._splits = {name: _SplitState() for name in SPLIT_BLOCKS}
        self._libraries: set[Library] = set()
        self._embeds_wear_apk = False
        self._on_demand = False

    def extract(self, script: Script) -> BuildContextBuilder:
        """Extract the build context of a script.

        Args:
            script: Parsed build script.

        Returns:
            Builder holding every extracted value and defaults for the rest.
        """
        self._reset()

        for node in script.statements:
            if not isinstance(node, Call) or node.receiver is not None:
                continue
            if node.name == "apply":
                self._visit_apply(node)
            elif node.body is None:
                continue
            elif node.name == "plugins":
                self._visit_plugins(node.body)
            elif node.name == "android":
                self._visit_android(node.body)
            elif node.name == "dependencies":
                self._visit_dependencies(node.body)
            elif node.name == "buildscript":
                self._visit_buildscript(node.body)

        return self._to_builder()

    def _to_builder(self) -> BuildContextBuilder:
        plugin_type = self._plugin_type or PluginType.UNKNOWN
        locations = BundleConfigLocation(
            abi_split_line_number=self._splits["abi"].line,
            density_split_line_number=self._splits["density"].line,
            language_split_line_number=self._splits["language"].line,
        )
        bundle_config = BundleConfig(
            abi_split_enabled=self._splits["abi"].enabled,
            density_split_enabled=self._splits["density"].enabled,
            language_split_enabled=self._splits["language"].enabled,
            location=locations,
        )

        return (
            BuildContext.builder()
            .set_min_sdk_version(
                self.default_min_sdk_version if self._min_sdk is None else self._min_sdk
            )
            .set_target_sdk_version(
                self.default_target_sdk_version if self._target_sdk is None else self._target_sdk
            )
            .set_plugin_type(plugin_type)
            .set_on_demand(self._on_demand and plugin_type == PluginType.DYNAMIC_FEATURE)
            .set_build_tool_version(self._build_tool_version)
            .set_proguard_configs(self._proguard_configs)
            .set_bundle_config(bundle_config)
            .set_embeds_wear_apk(self._embeds_wear_apk)
            .set_library_dependencies(self._libraries)
            .set_variables(self.variables.exported())
        )

    # ------------------------------------------------------------------
    # Value helpers
    # ------------------------------------------------------------------

    def _resolve_int(self, value: Value) -> int | None:
        resolved = self.variables.resolve_value(value)
        if isinstance(resolved, bool):
            return None
        if isinstance(resolved, int):
            return resolved
        if isinstance(resolved, str) and resolved.strip().isdecimal():
            return int(resolved.strip())
        return None

    def _resolve_bool(self, value: Value) -> bool | None:
        resolved = self.variables.resolve_value(value)
        if isinstance(resolved, bool):
            return resolved
        if isinstance(resolved, str) and resolved in ("true", "false"):
            return resolved == "true"
        return None

    def _resolve_str(self, value: Value | None) -> str | None:
        resolved = self.variables.resolve_value(value)
        return resolved if isinstance(resolved, str) else None

    # ------------------------------------------------------------------
    # Plugins
    # ------------------------------------------------------------------

    def _visit_apply(self, call: Call) -> None:
        plugin_id = self._resolve_str(call.named_args.get("plugin"))
        if plugin_id:
            self._set_plugin_type(plugin_id)

    def _visit_plugins(self, body: list[Node]) -> None:
        for node in body:
            if not isinstance(node, Call):
                continue
            plugin_id: str | None = None
            version: str | None = None
            applied = True
            for link in node.chain():
                argument = first_argument(link)
                if link.name == "id":
                    plugin_id = self._resolve_str(argument)
                elif link.name == "version":
                    version = self._resolve_str(argument)
                elif link.name == "apply" and isinstance(argument, BoolLiteral):
                    applied = argument.value

            if not plugin_id or not plugin_id.startswith(ANDROID_PLUGIN_PREFIX):
                continue
            if version:
                self._set_build_tool_version(version)
            if applied:
                self._set_plugin_type(plugin_id)

    def _set_plugin_type(self, plugin_id: str) -> None:
        plugin_type = PLUGIN_TYPES.get(plugin_id)
        if plugin_type is None or self._plugin_type is not None:
            return
        self._plugin_type = plugin_type

    def _set_build_tool_version(self, version: str) -> None:
        if self._build_tool_version is not None:
            return
        parsed = AndroidPluginVersion.parse(version)
        if parsed is None:
            self.logger.debug(f"Ignoring unparsable Android plugin version {version!r}")
            return
        self._build_tool_version = parsed

    # ------------------------------------------------------------------
    # android { ... }
    # ------------------------------------------------------------------

    def _visit_android(self, body: list[Node]) -> None:
        for config in blocks_named(body, "defaultConfig"):
            self._visit_default_config(config)
        for build_types in blocks_named(body, "buildTypes"):
            self._visit_build_types(build_types)
        for bundle in blocks_named(body, "bundle"):
            self._visit_bundle(bundle)

        for node in iter_nodes(body):
            prop = as_property(node)
            if prop is None:
                continue
            if prop.name == WEAR_APK_MARKER and self._resolve_bool(prop.value):
                self._embeds_wear_apk = True
            elif prop.name == ON_DEMAND_MARKER and self._resolve_bool(prop.value):
                self._on_demand = True

    def _visit_default_config(self, body: list[Node]) -> None:
        for node in body:
            prop = as_property(node)
            if prop is None:
                continue
            if prop.name in MIN_SDK_PROPERTIES and self._min_sdk is None:
                self._min_sdk = self._resolve_int(prop.value)
                if self._min_sdk is None:
                    self.logger.debug(f"Unresolved {prop.name} at line {prop.line}")
            elif prop.name in TARGET_SDK_PROPERTIES and self._target_sdk is None:
                self._target_sdk = self._resolve_int(prop.value)
                if self._target_sdk is None:
                    self.logger.debug(f"Unresolved {prop.name} at line {prop.line}")

    def _visit_build_types(self, body: list[Node]) -> None:
        for node in body:
            if not isinstance(node, Call) or node.body is None or node.receiver is not None:
                continue
            name = self._build_type_name(node)
            if name is None:
                continue
            config = self._proguard_configs.get(name, ProguardConfig())
            self._proguard_configs[name] = self._read_build_type(node.body, config)

    def _build_type_name(self, call: Call) -> str | None:
        if call.name in NAMED_BUILD_TYPE_CALLS:
            return self._resolve_str(first_argument(call))
        if call.name in CONTAINER_CALLS or "." in call.name:
            return None
        return call.name

    def _read_build_type(self, body: list[Node], config: ProguardConfig) -> ProguardConfig:
        updates: dict[str, bool] = {}
        for node in body:
            if isinstance(node, Call) and node.name in PROGUARD_FILE_CALLS and node.positional_args:
                updates["has_proguard_rules"] = True
                continue
            if (
                isinstance(node, Assignment)
                and node.name in PROGUARD_FILE_CALLS
                and node.operator in ("=", "+=")
            ):
                updates["has_proguard_rules"] = True
                continue

            prop = as_property(node)
            if prop is None:
                continue
            if prop.name in MINIFY_PROPERTIES:
                enabled = self._resolve_bool(prop.value)
                if enabled is not None:
                    updates["minify_enabled"] = enabled
            elif prop.name in USE_PROGUARD_PROPERTIES:
                use_proguard = self._resolve_bool(prop.value)
                if use_proguard is not None:
                    updates["obfuscation_enabled"] = use_proguard
        return config.model_copy(update=updates)

    def _visit_bundle(self, body: list[Node]) -> None:
        for split_name in SPLIT_BLOCKS:
            for split_body in blocks_named(body, split_name):
                for node in split_body:
                    prop = as_property(node)
                    if prop is None or prop.name != ENABLE_SPLIT_PROPERTY:
                        continue
                    state = self._splits[split_name]
                    if isinstance(prop.value, BoolLiteral):
                        state.enabled = prop.value.value
                        state.line = prop.line
                        continue
                    enabled = self._resolve_bool(prop.value)
                    if enabled is not None:
                        state.enabled = enabled

    # ------------------------------------------------------------------
    # dependencies { ... } and buildscript { ... }
    # ------------------------------------------------------------------

    def _visit_dependencies(self, body: list[Node]) -> None:
        for node in body:
            if not isinstance(node, Call) or node.receiver is not None:
                continue
            if node.name == WEAR_APP_CONFIGURATION:
                self._embeds_wear_apk = True
                continue
            for library in self._declared_libraries(node):
                self._libraries.add(library)

    def _declared_libraries(self, call: Call) -> Iterator[Library]:
        for argument in call.positional_args:
            coordinate = self._resolve_str(argument)
            if coordinate is None:
                continue
            library = parse_coordinate(coordinate)
            if library is not None:
                yield library
            else:
                self.logger.debug(f"Skipping dependency {coordinate!r} at line {call.line}")

        if {"group", "name", "version"} <= call.named_args.keys():
            parts = [self._resolve_str(call.named_args[key]) for key in ("group", "name", "version")]
            if all(parts):
                yield Library(group_id=parts[0], artifact_id=parts[1], version=parts[2])

    def _visit_buildscript(self, body: list[Node]) -> None:
        for dependencies in blocks_named(body, "dependencies"):
            for node in dependencies:
                if not isinstance(node, Call) or node.name != "classpath":
                    continue
                for library in self._declared_libraries(node):
                    if (
                        library.group_id == ANDROID_PLUGIN_GROUP
                        and library.artifact_id == ANDROID_PLUGIN_ARTIFACT
                    ):
                        self._set_build_tool_version(library.version)
