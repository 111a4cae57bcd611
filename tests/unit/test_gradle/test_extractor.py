"""Unit tests for build context extraction."""

import pytest

from sizelens.analyzer.gradle.ast_builder import build_ast
from sizelens.analyzer.gradle.ast_nodes import Assignment, Call, IntLiteral
from sizelens.analyzer.gradle.extractor import ContextExtractor, as_property, parse_coordinate
from sizelens.analyzer.gradle.variables import VariableTable
from sizelens.analyzer.model.build_context import (
    AndroidPluginVersion,
    BuildContextBuilder,
    Library,
    PluginType,
    ProguardConfig,
)


def _extract(text: str, min_sdk: int = 1, target_sdk: int = 1) -> BuildContextBuilder:
    script = build_ast(text)
    extractor = ContextExtractor(VariableTable.resolve(script), min_sdk, target_sdk)
    return extractor.extract(script)


class TestHelpers:
    """Tests for the module level helpers."""

    def test_property_from_command(self) -> None:
        """Test ``name value`` is a property."""
        prop = as_property(Call("minSdkVersion", [IntLiteral(15)], line=3))
        assert prop is not None
        assert prop.name == "minSdkVersion"
        assert prop.line == 3

    def test_property_from_assignment(self) -> None:
        """Test ``name = value`` is a property and ``+=`` is not."""
        assert as_property(Assignment("minSdk", IntLiteral(21))) is not None
        assert as_property(Assignment("list", IntLiteral(21), operator="+=")) is None

    def test_calls_that_are_not_properties(self) -> None:
        """Test blocks, chains and multi-argument calls."""
        assert as_property(Call("android", body=[])) is None
        assert as_property(Call("resConfigs", [IntLiteral(1), IntLiteral(2)])) is None
        assert as_property(Call("version", [IntLiteral(1)], receiver=Call("id"))) is None

    @pytest.mark.parametrize(
        "coordinate,expected",
        [
            ("com.google.inject:guice:3.0", ("com.google.inject", "guice", "3.0")),
            ("org.myorg:someLib:1.0@aar", ("org.myorg", "someLib", "1.0")),
            (" a:b:c ", ("a", "b", "c")),
        ],
    )
    def test_parse_coordinate(self, coordinate: str, expected: tuple[str, str, str]) -> None:
        """Test well-formed Maven coordinates."""
        assert parse_coordinate(coordinate) == Library(
            group_id=expected[0], artifact_id=expected[1], version=expected[2]
        )

    @pytest.mark.parametrize(
        "coordinate",
        ["guice", "com.google.inject:guice", "a:b:c:sources", "a::1.0", ""],
    )
    def test_parse_coordinate_rejects(self, coordinate: str) -> None:
        """Test malformed coordinates."""
        assert parse_coordinate(coordinate) is None


class TestPluginType:
    """Tests for plugin type extraction."""

    @pytest.mark.parametrize(
        "plugin_id,expected",
        [
            ("com.android.application", PluginType.APPLICATION),
            ("com.android.dynamic-feature", PluginType.DYNAMIC_FEATURE),
            ("com.android.feature", PluginType.FEATURE),
            ("com.android.library", PluginType.UNKNOWN),
            ("java", PluginType.UNKNOWN),
        ],
    )
    def test_apply_plugin(self, plugin_id: str, expected: PluginType) -> None:
        """Test ``apply plugin: '<id>'``."""
        assert _extract(f"apply plugin: '{plugin_id}'").plugin_type == expected

    def test_apply_plugin_call_form(self) -> None:
        """Test ``apply(plugin: '<id>')``."""
        assert _extract("apply(plugin: 'com.android.application')").plugin_type == PluginType.APPLICATION

    def test_plugins_block(self) -> None:
        """Test ``plugins { id '<id>' }`` in both call styles."""
        assert _extract("plugins {\n    id 'com.android.application'\n}").plugin_type == PluginType.APPLICATION
        assert _extract('plugins {\n    id("com.android.dynamic-feature")\n}').plugin_type == PluginType.DYNAMIC_FEATURE

    def test_first_plugin_wins(self) -> None:
        """Test that the first recognized plugin is kept."""
        text = "apply plugin: 'kotlin-android'\napply plugin: 'com.android.feature'\napply plugin: 'com.android.application'"
        assert _extract(text).plugin_type == PluginType.FEATURE

    def test_plugin_not_applied(self) -> None:
        """Test ``apply false`` entries are skipped but still give a version."""
        text = "plugins {\n    id 'com.android.application' version '7.1.2' apply false\n}"
        context = _extract(text)
        assert context.plugin_type == PluginType.UNKNOWN
        assert context.build_tool_version == AndroidPluginVersion(major=7, minor=1)

    def test_unrelated_plugin_version_ignored(self) -> None:
        """Test non-Android plugin versions are not the build tool version."""
        text = "plugins {\n    id 'org.jetbrains.kotlin.android' version '1.6.10'\n}"
        assert _extract(text).build_tool_version is None

    def test_apply_plugin_through_variable(self) -> None:
        """Test ``apply plugin: pluginId`` with the id bound to a variable."""
        text = "ext.pluginId = 'com.android.application'\napply plugin: pluginId"
        assert _extract(text).plugin_type == PluginType.APPLICATION

    def test_unresolved_plugin_variable(self) -> None:
        """Test a plugin variable without a string value."""
        assert _extract("apply plugin: pluginId").plugin_type == PluginType.UNKNOWN
        assert _extract("pluginId = 3\napply plugin: pluginId").plugin_type == PluginType.UNKNOWN


class TestSdkVersions:
    """Tests for minSdkVersion / targetSdkVersion extraction."""

    def test_literals(self) -> None:
        """Test integer literals in command form."""
        text = "android {\n    defaultConfig {\n        minSdkVersion 15\n        targetSdkVersion 28\n    }\n}"
        context = _extract(text)
        assert context.min_sdk_version == 15
        assert context.target_sdk_version == 28

    def test_assignment_and_short_names(self) -> None:
        """Test ``minSdk = 21`` style declarations."""
        text = "android {\n    defaultConfig {\n        minSdk = 21\n        targetSdk = 31\n    }\n}"
        context = _extract(text)
        assert context.min_sdk_version == 21
        assert context.target_sdk_version == 31

    def test_digit_string(self) -> None:
        """Test a quoted number."""
        text = "android {\n    defaultConfig {\n        minSdkVersion '16'\n    }\n}"
        assert _extract(text).min_sdk_version == 16

    def test_variable(self) -> None:
        """Test a value resolved through a variable."""
        text = "ext.minimumSdk = 19\nandroid {\n    defaultConfig {\n        minSdkVersion(rootProject.ext.minimumSdk)\n    }\n}"
        assert _extract(text).min_sdk_version == 19

    def test_unresolved_falls_back_to_default(self) -> None:
        """Test that unresolved values use the caller default."""
        text = "android {\n    defaultConfig {\n        minSdkVersion libs.versions.min\n        targetSdkVersion 'preview'\n    }\n}"
        context = _extract(text, min_sdk=345, target_sdk=346)
        assert context.min_sdk_version == 345
        assert context.target_sdk_version == 346

    def test_absent_uses_default(self) -> None:
        """Test scripts without a defaultConfig."""
        context = _extract("android {\n    compileSdkVersion 28\n}", min_sdk=7, target_sdk=8)
        assert context.min_sdk_version == 7
        assert context.target_sdk_version == 8

    def test_first_resolved_value_wins(self) -> None:
        """Test repeated declarations."""
        text = "android {\n    defaultConfig {\n        minSdkVersion unknown\n        minSdkVersion 18\n        minSdkVersion 21\n    }\n}"
        assert _extract(text).min_sdk_version == 18

    def test_outside_default_config_ignored(self) -> None:
        """Test declarations in other blocks."""
        text = "android {\n    productFlavors {\n        free {\n            minSdkVersion 9\n        }\n    }\n}"
        assert _extract(text, min_sdk=1).min_sdk_version == 1


class TestProguardConfigs:
    """Tests for build type shrinking configuration."""

    def test_defaults(self) -> None:
        """Test a build type with no shrinking settings."""
        context = _extract("android {\n    buildTypes {\n        debug {\n            debuggable true\n        }\n    }\n}")
        assert context.proguard_configs == {"debug": ProguardConfig()}

    def test_named_container_calls(self) -> None:
        """Test getByName/create/register forms."""
        text = (
            "android {\n    buildTypes {\n"
            "        getByName('release') {\n            isMinifyEnabled = true\n        }\n"
            "        create(\"staging\") {\n            setMinifyEnabled(true)\n        }\n"
            "        all {\n            minifyEnabled false\n        }\n"
            "    }\n}"
        )
        configs = _extract(text).proguard_configs
        assert set(configs) == {"release", "staging"}
        assert configs["release"].minify_enabled
        assert configs["staging"].minify_enabled

    def test_proguard_rule_forms(self) -> None:
        """Test the different ways of adding rule files."""
        text = (
            "android {\n    buildTypes {\n"
            "        a {\n            proguardFile 'a.pro'\n        }\n"
            "        b {\n            setProguardFiles(['b.pro'])\n        }\n"
            "        c {\n            proguardFiles += file('c.pro')\n        }\n"
            "        d {\n            proguardFiles()\n        }\n"
            "    }\n}"
        )
        configs = _extract(text).proguard_configs
        assert configs["a"].has_proguard_rules
        assert configs["b"].has_proguard_rules
        assert configs["c"].has_proguard_rules
        assert not configs["d"].has_proguard_rules

    def test_use_proguard_false_disables_obfuscation(self) -> None:
        """Test the built-in shrinker switch."""
        text = "android {\n    buildTypes {\n        release {\n            minifyEnabled true\n            useProguard false\n        }\n    }\n}"
        assert _extract(text).proguard_configs["release"] == ProguardConfig(
            minify_enabled=True, has_proguard_rules=False, obfuscation_enabled=False
        )

    def test_repeated_blocks_merge(self) -> None:
        """Test two blocks for the same build type."""
        text = (
            "android {\n    buildTypes {\n"
            "        release {\n            minifyEnabled true\n        }\n"
            "        release {\n            proguardFiles 'rules.pro'\n        }\n"
            "    }\n}"
        )
        config = _extract(text).proguard_configs["release"]
        assert config.minify_enabled
        assert config.has_proguard_rules

    def test_minify_through_variable(self) -> None:
        """Test a boolean resolved through a variable."""
        text = "def shrink = true\nandroid {\n    buildTypes {\n        release {\n            minifyEnabled shrink\n        }\n    }\n}"
        assert _extract(text).proguard_configs["release"].minify_enabled


class TestBundleConfig:
    """Tests for bundle split extraction."""

    def test_defaults(self) -> None:
        """Test scripts without a bundle block."""
        config = _extract("android {\n}").bundle_config
        assert config.abi_split_enabled
        assert config.density_split_enabled
        assert config.language_split_enabled
        assert config.location.abi_split_line_number is None

    def test_literal_records_line(self) -> None:
        """Test an explicit literal sets the flag and its line."""
        text = "android {\n    bundle {\n        abi {\n            enableSplit false\n        }\n    }\n}"
        config = _extract(text).bundle_config
        assert not config.abi_split_enabled
        assert config.location.abi_split_line_number == 4
        assert config.density_split_enabled
        assert config.location.density_split_line_number is None

    def test_variable_sets_flag_only(self) -> None:
        """Test a value resolved through a variable has no line."""
        text = "def split = false\nandroid {\n    bundle {\n        density {\n            enableSplit = split\n        }\n    }\n}"
        config = _extract(text).bundle_config
        assert not config.density_split_enabled
        assert config.location.density_split_line_number is None

    def test_bundle_outside_android_ignored(self) -> None:
        """Test a top-level bundle block."""
        text = "bundle {\n    language {\n        enableSplit false\n    }\n}"
        assert _extract(text).bundle_config.language_split_enabled


class TestLibraries:
    """Tests for library dependency extraction."""

    def test_string_notation(self) -> None:
        """Test configurations with coordinate strings."""
        text = "dependencies {\n    implementation 'a:b:1'\n    api('c:d:2')\n    kapt \"e:f:3\"\n}"
        coordinates = {lib.coordinate for lib in _extract(text).library_dependencies}
        assert coordinates == {"a:b:1", "c:d:2", "e:f:3"}

    def test_map_notation(self) -> None:
        """Test ``group:, name:, version:`` arguments."""
        text = "dependencies {\n    implementation group: 'foo', name: 'bar', version: '1.0.0'\n}"
        assert _extract(text).library_dependencies == {
            Library(group_id="foo", artifact_id="bar", version="1.0.0")
        }

    def test_interpolated_coordinate(self) -> None:
        """Test coordinates built from variables."""
        text = "ext.v = '28.0.0'\ndependencies {\n    implementation \"com.android.support:appcompat-v7:$v\"\n    implementation \"x:y:$missing\"\n}"
        coordinates = {lib.coordinate for lib in _extract(text).library_dependencies}
        assert coordinates == {"com.android.support:appcompat-v7:28.0.0"}

    def test_ignored_shapes(self) -> None:
        """Test project, file and platform dependencies."""
        text = (
            "dependencies {\n"
            "    implementation project(':lib')\n"
            "    implementation files('a.jar')\n"
            "    implementation platform('com.example:bom:1.0')\n"
            "    implementation 'only:two'\n"
            "}"
        )
        assert _extract(text).library_dependencies == set()

    def test_buildscript_dependencies_are_not_libraries(self) -> None:
        """Test classpath dependencies are excluded."""
        text = "buildscript {\n    dependencies {\n        classpath 'com.android.tools.build:gradle:3.4.0'\n    }\n}"
        context = _extract(text)
        assert context.library_dependencies == set()
        assert context.build_tool_version == AndroidPluginVersion(major=3, minor=4)

    def test_duplicates_collapse(self) -> None:
        """Test the same library in two configurations."""
        text = "dependencies {\n    implementation 'a:b:1'\n    testImplementation 'a:b:1'\n}"
        assert len(_extract(text).library_dependencies) == 1

    def test_coordinate_through_variable(self) -> None:
        """Test a configuration whose argument is a variable holding the coordinate."""
        text = (
            "ext.appcompat = 'com.android.support:appcompat-v7:28.0.0'\n"
            "dependencies {\n"
            "    implementation appcompat\n"
            "    api(rootProject.ext.appcompat)\n"
            "    implementation unknownLibrary\n"
            "}"
        )
        assert _extract(text).library_dependencies == {
            Library(group_id="com.android.support", artifact_id="appcompat-v7", version="28.0.0")
        }

    def test_map_notation_through_variables(self) -> None:
        """Test map notation values bound to variables."""
        text = "def v = '1.0.0'\ndependencies {\n    implementation group: 'foo', name: 'bar', version: v\n}"
        assert _extract(text).library_dependencies == {
            Library(group_id="foo", artifact_id="bar", version="1.0.0")
        }


class TestMarkers:
    """Tests for wear and on-demand markers."""

    def test_embed_micro_app(self) -> None:
        """Test ``embedMicroApp true`` nested in the android block."""
        text = "android {\n    buildTypes {\n        release {\n            embedMicroApp true\n        }\n    }\n}"
        assert _extract(text).embeds_wear_apk

    def test_embed_micro_app_false(self) -> None:
        """Test an explicit false."""
        assert not _extract("android {\n    embedMicroApp false\n}").embeds_wear_apk

    def test_wear_app_dependency(self) -> None:
        """Test a wearApp configuration."""
        assert _extract("dependencies {\n    wearApp project(':wear')\n}").embeds_wear_apk

    def test_on_demand_dynamic_feature(self) -> None:
        """Test onDemand in a dynamic feature module."""
        text = "apply plugin: 'com.android.dynamic-feature'\nandroid {\n    dist {\n        onDemand true\n    }\n}"
        assert _extract(text).on_demand

    def test_on_demand_requires_dynamic_feature(self) -> None:
        """Test onDemand is ignored for other module types."""
        text = "apply plugin: 'com.android.application'\nandroid {\n    onDemand true\n}"
        assert not _extract(text).on_demand


class TestExtractor:
    """Tests for extractor behavior as a whole."""

    def test_empty_script(self) -> None:
        """Test everything defaults for an empty script."""
        context = _extract("", min_sdk=21, target_sdk=28)
        assert context.plugin_type == PluginType.UNKNOWN
        assert context.min_sdk_version == 21
        assert context.target_sdk_version == 28
        assert context.proguard_configs == {}
        assert context.library_dependencies == set()
        assert context.build_tool_version is None
        assert not context.embeds_wear_apk
        assert not context.on_demand

    def test_extract_is_repeatable(self) -> None:
        """Test one extractor can be reused."""
        script = build_ast("apply plugin: 'com.android.application'\ndependencies {\n    implementation 'a:b:1'\n}")
        extractor = ContextExtractor(VariableTable.resolve(script), 1, 1)
        first = extractor.extract(script).build()
        second = extractor.extract(script).build()
        assert first == second

    def test_variables_exported(self) -> None:
        """Test resolved variables are carried in the context."""
        assert _extract("ext.minSdk = 21").variables == {"minSdk": 21}
