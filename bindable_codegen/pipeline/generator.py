"""
Pipeline generator.

Orchestrates the phases: parse the declaration model, analyze it, render
each type through the target backend, format and write.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import structlog

from ..errors import OutputError
from .analyzer import BindingAnalyzer, Diagnostic, GenerationSession
from .ast_backends import CSharpAstBackend
from .backends import CodeBackend, PythonBackend
from .config import CodeGeneratorConfig, OutputMode
from .declarations import Compilation, DeclarationParser
from .formatters import RuffFormatter
from .output import AtomicWriter

logger = structlog.get_logger()

BACKENDS: dict[str, type[CodeBackend]] = {
    "cs": CSharpAstBackend,
    "python": PythonBackend,
}


@dataclass
class GenerationResult:
    """Output of one generation run.

    Attributes:
        sources: Map of relative output file name to generated code
        diagnostics: Diagnostics reported during analysis
        omitted: Types left out after an unexpected failure
    """

    sources: dict[str, str] = field(default_factory=dict)
    diagnostics: list[Diagnostic] = field(default_factory=list)
    omitted: list[str] = field(default_factory=list)


class BindingGenerator:
    """Generates binding code for every eligible type of a declaration model."""

    def __init__(
        self,
        declarations: dict[str, Any] | Compilation,
        config: CodeGeneratorConfig | None = None,
        language: str = "cs",
    ):
        """
        Initialize the generator.

        Args:
            declarations: Declaration model, raw or already parsed
            config: Code generation configuration
            language: Target language ("cs" or "python")
        """
        if language not in BACKENDS:
            raise ValueError(f"Unsupported language: {language}")
        self.declarations = declarations
        self.config = config or CodeGeneratorConfig()
        self.language = language

    def generate(self) -> GenerationResult:
        """
        Run the pipeline.

        Returns:
            Generated sources and diagnostics

        Raises:
            DeclarationError: If the declaration model is malformed
        """
        # Phase 1: Parse
        if isinstance(self.declarations, Compilation):
            compilation = self.declarations
        else:
            compilation = DeclarationParser().parse(self.declarations)

        # Phase 2: Analyze
        session = GenerationSession(compilation=compilation, config=self.config)
        types = BindingAnalyzer(session).analyze()

        # Phase 3: Render, one type at a time
        backend = BACKENDS[self.language](self.config, session)
        fragments = []
        for type_desc in types:
            claimed = session.enums.claim(type_desc)
            try:
                code = backend.render_type(type_desc, claimed)
            except Exception:
                logger.error("type_failed", phase="emit", type_name=type_desc.full_name, exc_info=True)
                session.types.pop(type_desc.full_name, None)
                session.omitted.append(type_desc.full_name)
                continue
            session.enums.commit(claimed)
            fragments.append((type_desc, code))

        sources = backend.assemble(fragments) if fragments else {}

        # Phase 4: Format
        if self.language == "python" and self.config.formatter.enabled:
            formatter = RuffFormatter(self.config.formatter)
            sources = {name: formatter.format(name, code) for name, code in sources.items()}

        logger.debug("generation_complete", language=self.language, files=sorted(sources), omitted=session.omitted)
        return GenerationResult(
            sources=sources,
            diagnostics=list(session.diagnostics),
            omitted=list(session.omitted),
        )

    def write(self, output_dir: str | Path, result: GenerationResult | None = None) -> list[Path]:
        """
        Write generated sources into a directory.

        Args:
            output_dir: Target directory, created if missing
            result: A previous result; generated now if omitted

        Returns:
            Paths of the written files

        Raises:
            OutputError: If a file exists in error mode or fails validation
        """
        if result is None:
            result = self.generate()

        output = self.config.output
        writer = AtomicWriter()
        written = []
        for name, content in result.sources.items():
            path = Path(output_dir) / name
            if output.atomic_write:
                if output.mode == OutputMode.FORCE:
                    writer.write(path, content, self.language, output.validate_before_write)
                else:
                    writer.write_if_not_exists(path, content, self.language, output.validate_before_write)
            else:
                if path.exists() and output.mode != OutputMode.FORCE:
                    raise OutputError(f"Output file already exists: {path}. Use --force to overwrite.", path=str(path))
                if output.validate_before_write:
                    writer.validate(content, self.language, path)
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(content, encoding="utf-8")

            logger.info("file_written", path=str(path))
            written.append(path)
        return written
