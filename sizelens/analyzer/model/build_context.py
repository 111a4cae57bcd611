"""Build context models extracted from Gradle build scripts.

A :class:`BuildContext` is the immutable summary of one Gradle project or
module. It is assembled through a :class:`BuildContextBuilder`, which starts
from fixed defaults and is filled in progressively by the context extractor.
"""

import re
from collections.abc import Mapping
from enum import Enum
from types import MappingProxyType

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from sizelens.core.exceptions.errors import ContextBuildError

ScalarValue = str | int | float | bool

_VERSION_PATTERN = re.compile(r"^\s*(\d+)\.(\d+)(?:\.(\d+))?")


class PluginType(str, Enum):
    """Android Gradle plugin applied to the project or module."""

    UNKNOWN = "unknown"
    APPLICATION = "application"
    DYNAMIC_FEATURE = "dynamic_feature"
    FEATURE = "feature"


class AndroidPluginVersion(BaseModel):
    """Major/minor version of the Android Gradle plugin."""

    model_config = ConfigDict(frozen=True)

    major: int = Field(..., ge=0)
    minor: int = Field(..., ge=0)

    @classmethod
    def parse(cls, version: str) -> "AndroidPluginVersion | None":
        """Parse the leading ``major.minor[.patch]`` of a version string.

        Args:
            version: Version string such as ``3.4.0`` or ``7.1.0-beta02``.

        Returns:
            Parsed version, or None when the string has no numeric prefix.
        """
        match = _VERSION_PATTERN.match(version)
        if not match:
            return None
        return cls(major=int(match.group(1)), minor=int(match.group(2)))

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}"


class ProguardConfig(BaseModel):
    """Code shrinking settings of one build type."""

    model_config = ConfigDict(frozen=True)

    minify_enabled: bool = False
    has_proguard_rules: bool = False
    obfuscation_enabled: bool = True


class BundleConfigLocation(BaseModel):
    """Source lines of explicit ``enableSplit`` declarations (1-based)."""

    model_config = ConfigDict(frozen=True)

    abi_split_line_number: int | None = None
    density_split_line_number: int | None = None
    language_split_line_number: int | None = None


class BundleConfig(BaseModel):
    """App bundle split configuration. Every split is enabled unless disabled."""

    model_config = ConfigDict(frozen=True)

    abi_split_enabled: bool = True
    density_split_enabled: bool = True
    language_split_enabled: bool = True
    location: BundleConfigLocation = Field(default_factory=BundleConfigLocation)


class Library(BaseModel):
    """A Maven library dependency."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    artifact_id: str
    version: str

    @property
    def coordinate(self) -> str:
        """Get the ``group:artifact:version`` coordinate."""
        return f"{self.group_id}:{self.artifact_id}:{self.version}"


class BuildContext(BaseModel):
    """Immutable summary of a Gradle build script."""

    model_config = ConfigDict(frozen=True)

    min_sdk_version: int
    target_sdk_version: int
    on_demand: bool = False
    plugin_type: PluginType = PluginType.UNKNOWN
    build_tool_version: AndroidPluginVersion | None = None
    proguard_configs: Mapping[str, ProguardConfig] = Field(
        default_factory=dict, validate_default=True
    )
    bundle_config: BundleConfig = Field(default_factory=BundleConfig)
    embeds_wear_apk: bool = False
    library_dependencies: frozenset[Library] = Field(default_factory=frozenset)
    variables: Mapping[str, ScalarValue] = Field(
        default_factory=dict,
        validate_default=True,
        description="Resolved scalar bindings visible to child modules",
    )

    @field_validator("proguard_configs", "variables")
    @classmethod
    def freeze_mapping(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))

    @field_serializer("proguard_configs", "variables")
    def serialize_mapping(self, value: Mapping) -> dict:
        return dict(value)

    @classmethod
    def builder(cls) -> "BuildContextBuilder":
        """Create a builder holding the default values."""
        return BuildContextBuilder()

    @classmethod
    def create(
        cls,
        min_sdk_version: int,
        target_sdk_version: int,
        on_demand: bool = False,
        embeds_wear_apk: bool = False,
    ) -> "BuildContext":
        """Create a context with everything but the given fields defaulted."""
        return (
            cls.builder()
            .set_min_sdk_version(min_sdk_version)
            .set_target_sdk_version(target_sdk_version)
            .set_on_demand(on_demand)
            .set_embeds_wear_apk(embeds_wear_apk)
            .build()
        )


class BuildContextBuilder(BaseModel):
    """Mutable accumulator for a :class:`BuildContext`.

    Setters return the builder so calls can be chained.
    """

    min_sdk_version: int | None = None
    target_sdk_version: int | None = None
    on_demand: bool = False
    plugin_type: PluginType = PluginType.UNKNOWN
    build_tool_version: AndroidPluginVersion | None = None
    proguard_configs: dict[str, ProguardConfig] = Field(default_factory=dict)
    bundle_config: BundleConfig = Field(default_factory=BundleConfig)
    embeds_wear_apk: bool = False
    library_dependencies: set[Library] = Field(default_factory=set)
    variables: dict[str, ScalarValue] = Field(default_factory=dict)

    def set_min_sdk_version(self, value: int) -> "BuildContextBuilder":
        self.min_sdk_version = value
        return self

    def set_target_sdk_version(self, value: int) -> "BuildContextBuilder":
        self.target_sdk_version = value
        return self

    def set_on_demand(self, value: bool) -> "BuildContextBuilder":
        self.on_demand = value
        return self

    def set_plugin_type(self, value: PluginType) -> "BuildContextBuilder":
        self.plugin_type = value
        return self

    def set_build_tool_version(
        self, value: AndroidPluginVersion | None
    ) -> "BuildContextBuilder":
        self.build_tool_version = value
        return self

    def set_proguard_configs(
        self, value: dict[str, ProguardConfig]
    ) -> "BuildContextBuilder":
        self.proguard_configs = dict(value)
        return self

    def set_bundle_config(self, value: BundleConfig) -> "BuildContextBuilder":
        self.bundle_config = value
        return self

    def set_embeds_wear_apk(self, value: bool) -> "BuildContextBuilder":
        self.embeds_wear_apk = value
        return self

    def set_library_dependencies(self, value: set[Library]) -> "BuildContextBuilder":
        self.library_dependencies = set(value)
        return self

    def set_variables(self, value: dict[str, ScalarValue]) -> "BuildContextBuilder":
        self.variables = dict(value)
        return self

    def build(self) -> BuildContext:
        """Freeze the accumulated values into a :class:`BuildContext`.

        Raises:
            ContextBuildError: If either SDK version was never set.
        """
        missing = [
            name
            for name in ("min_sdk_version", "target_sdk_version")
            if getattr(self, name) is None
        ]
        if missing:
            raise ContextBuildError(
                "Build context is missing required fields",
                missing_fields=missing,
            )

        return BuildContext(
            min_sdk_version=self.min_sdk_version,
            target_sdk_version=self.target_sdk_version,
            on_demand=self.on_demand,
            plugin_type=self.plugin_type,
            build_tool_version=self.build_tool_version,
            proguard_configs=dict(self.proguard_configs),
            bundle_config=self.bundle_config,
            embeds_wear_apk=self.embeds_wear_apk,
            library_dependencies=frozenset(self.library_dependencies),
            variables=dict(self.variables),
        )
