"""Gradle build script parsing module."""

from sizelens.analyzer.gradle.ast_builder import AstBuilder, build_ast
from sizelens.analyzer.gradle.extractor import ContextExtractor
from sizelens.analyzer.gradle.parser import GradleBuildParser, parse, parse_gradle_file
from sizelens.analyzer.gradle.variables import VariableTable

__all__ = [
    # Entry points
    "GradleBuildParser",
    "parse",
    "parse_gradle_file",
    # Stages
    "AstBuilder",
    "build_ast",
    "VariableTable",
    "ContextExtractor",
]
