"""
Base class for code generation backends.

Defines the interface that all language-specific backends must implement,
and the emission decisions shared by every target language.
"""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from enum import Enum
from pathlib import Path

import jinja2

from ... import __version__
from ...cli_utils import reconstruct_command_line
from ..analyzer.ir_nodes import DispatchGroup, EnumDescriptor, PropertyDescriptor, TypeDescriptor
from ..analyzer.session import GenerationSession
from ..config import CodeGeneratorConfig


class MethodFlavor(Enum):
    """Declaration shape of the generated contract methods."""

    FINAL = "final"  # Sealed type, no implementing ancestor
    OVERRIDABLE = "overridable"  # Open type, no implementing ancestor
    REFINEMENT = "refinement"  # An ancestor implements the contract; call it first


class CodeBackend(ABC):
    """Abstract base class for code generation backends.

    A backend renders one type at a time so that a failing type can be left
    out, then assembles the rendered fragments into output files.
    """

    # Template directory name, empty for backends without templates
    TEMPLATE_LANG: str = ""

    # File extension
    FILE_EXTENSION: str = ""

    def __init__(self, config: CodeGeneratorConfig, session: GenerationSession):
        """
        Initialize the backend.

        Args:
            config: Code generation configuration
            session: The analyzed generation session
        """
        self.config = config
        self.session = session
        if self.TEMPLATE_LANG:
            self._setup_templates()

    def _setup_templates(self) -> None:
        """Set up Jinja2 templates."""
        template_dir = Path(__file__).parent.parent.parent / "templates" / self.TEMPLATE_LANG
        self.jinja_env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            lstrip_blocks=True,
            trim_blocks=True,
            keep_trailing_newline=True,
        )

    @abstractmethod
    def render_type(self, type_desc: TypeDescriptor, enums: list[EnumDescriptor]) -> str:
        """
        Render the bindings of one type.

        Args:
            type_desc: The resolved type
            enums: Enums whose registration block this type carries

        Returns:
            Generated code fragment
        """

    @abstractmethod
    def assemble(self, fragments: list[tuple[TypeDescriptor, str]]) -> dict[str, str]:
        """
        Assemble rendered fragments into output files.

        Args:
            fragments: Successfully rendered types with their code

        Returns:
            Map of relative output file name to file content
        """

    def method_flavor(self, type_desc: TypeDescriptor) -> MethodFlavor:
        if type_desc.ancestor_already_implements:
            return MethodFlavor.REFINEMENT
        if type_desc.is_sealed:
            return MethodFlavor.FINAL
        return MethodFlavor.OVERRIDABLE

    def dispatch_table(self, type_desc: TypeDescriptor) -> dict[DispatchGroup, list[PropertyDescriptor]]:
        """Own generated properties grouped by the name-keyed setter they go through."""
        table: dict[DispatchGroup, list[PropertyDescriptor]] = {group: [] for group in DispatchGroup}
        for prop in type_desc.generated_properties:
            group = prop.category.dispatch_group
            if group is not None:
                table[group].append(prop)
        return table

    def use_branch_table(self, count: int) -> bool:
        """Whether ``count`` cases get a multi-way branch instead of a chain."""
        return count >= self.config.dispatch_switch_threshold

    @staticmethod
    def identifier(text: str) -> str:
        """Make a dotted name usable as a single identifier."""
        return re.sub(r"\W", "_", text)

    def _get_comment_prefix(self) -> str:
        """Get the comment prefix for the language."""
        return "#" if self.FILE_EXTENSION == "py" else "//"

    def _generate_command_comment(self) -> str:
        """Generate a simplified command line comment for the generated file"""
        if not self.config.add_generation_comment:
            return ""

        comment_prefix = self._get_comment_prefix()

        # Reconstruct command line using CLI utilities
        try:
            from ...bindable_codegen import bindable_codegen as click_command  # noqa

            command_line = reconstruct_command_line(click_command)
        except (ImportError, AttributeError):
            command_line = "bindable_codegen"

        return f"{comment_prefix} Generated by bindable_codegen v{__version__} : {command_line}"
