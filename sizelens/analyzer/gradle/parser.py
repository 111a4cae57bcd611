"""Gradle build script parser: text in, build context builder out."""

from pathlib import Path

from sizelens.analyzer.gradle.ast_builder import AstBuilder
from sizelens.analyzer.gradle.extractor import ContextExtractor
from sizelens.analyzer.gradle.variables import VariableTable
from sizelens.analyzer.model.build_context import BuildContext, BuildContextBuilder
from sizelens.core.config.settings import ParserSettings, get_settings
from sizelens.core.exceptions.errors import GradleFileError, GradleParseError
from sizelens.core.logger.logger import get_logger


class GradleBuildParser:
    """Parses Groovy DSL build scripts into build contexts.

    The parser keeps no state between calls; one instance may parse any
    number of scripts.
    """

    def __init__(self, settings: ParserSettings | None = None) -> None:
        """Initialize the parser.

        Args:
            settings: Parser settings. Uses global settings if not provided.
        """
        self.logger = get_logger(__name__)
        self.settings = settings or get_settings().parser

    def parse(
        self,
        content: str,
        default_min_sdk_version: int,
        default_target_sdk_version: int,
        parent_context: BuildContext | None = None,
    ) -> BuildContextBuilder:
        """Parse build script text.

        Args:
            content: Full text of a ``build.gradle`` file.
            default_min_sdk_version: Used when the script declares none.
            default_target_sdk_version: Used when the script declares none.
            parent_context: Context of the enclosing project, whose variables
                and Android plugin version are visible to this script.

        Returns:
            Builder populated from the script. Call ``build()`` to freeze it.

        Raises:
            GradleParseError: If the script is not syntactically valid.
        """
        builder = AstBuilder(max_depth=self.settings.max_nesting_depth)
        try:
            script = builder.build(content)
        except GradleParseError as e:
            self.logger.warning(f"Failed to parse build script: {e}")
            raise

        parent_variables = parent_context.variables if parent_context else None
        variables = VariableTable.resolve(
            script,
            parent=parent_variables,
            max_depth=self.settings.max_variable_depth,
        )

        extractor = ContextExtractor(
            variables,
            default_min_sdk_version=default_min_sdk_version,
            default_target_sdk_version=default_target_sdk_version,
        )
        context = extractor.extract(script)

        if context.build_tool_version is None and parent_context is not None:
            context.set_build_tool_version(parent_context.build_tool_version)

        self.logger.debug(
            f"Extracted build context: plugin={context.plugin_type.value}, "
            f"minSdk={context.min_sdk_version}, targetSdk={context.target_sdk_version}, "
            f"libraries={len(context.library_dependencies)}"
        )
        return context

    def parse_file(
        self,
        path: Path | str,
        default_min_sdk_version: int,
        default_target_sdk_version: int,
        parent_context: BuildContext | None = None,
    ) -> BuildContextBuilder:
        """Read a UTF-8 build script from disk and parse it.

        Raises:
            GradleFileError: If the file cannot be read or decoded.
            GradleParseError: If the script is not syntactically valid.
        """
        path = Path(path)
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise GradleFileError(
                f"Cannot read build script: {e}",
                file_path=str(path),
            ) from e

        self.logger.debug(f"Parsing {path}")
        return self.parse(
            content,
            default_min_sdk_version,
            default_target_sdk_version,
            parent_context,
        )


def parse(
    content: str,
    default_min_sdk_version: int,
    default_target_sdk_version: int,
    parent_context: BuildContext | None = None,
) -> BuildContextBuilder:
    """Parse build script text with the global parser settings.

    Raises:
        GradleParseError: If the script is not syntactically valid.
    """
    return GradleBuildParser().parse(
        content,
        default_min_sdk_version,
        default_target_sdk_version,
        parent_context,
    )


def parse_gradle_file(
    path: Path | str,
    default_min_sdk_version: int,
    default_target_sdk_version: int,
    parent_context: BuildContext | None = None,
) -> BuildContextBuilder:
    """Read and parse a build script file with the global parser settings.

    Raises:
        GradleFileError: If the file cannot be read or decoded.
        GradleParseError: If the script is not syntactically valid.
    """
    return GradleBuildParser().parse_file(
        path,
        default_min_sdk_version,
        default_target_sdk_version,
        parent_context,
    )
