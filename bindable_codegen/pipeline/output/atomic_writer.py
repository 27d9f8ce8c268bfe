"""
Atomic file writer for generated bindings.

Ensures that an interrupted write never leaves a half-written file behind.
"""

from __future__ import annotations

import ast
import re
import tempfile
from collections.abc import Callable
from pathlib import Path

from ...errors import OutputError

# Comments and string or char literals, which may hold user text
CSHARP_NON_CODE = re.compile(
    r"//[^\n]*"
    r"|/\*.*?\*/"
    r"|@\"(?:[^\"]|\"\")*\""
    r"|\"(?:[^\"\\\n]|\\.)*\""
    r"|'(?:[^'\\\n]|\\.)*'",
    re.DOTALL,
)


class AtomicWriter:
    """Handles atomic file writes with validation.

    Uses a two-phase commit approach:
    1. Write to a temporary file in the same directory
    2. Validate the content
    3. Atomically replace the target file
    """

    def __init__(
        self,
        validate_python: Callable[[str], None] | None = None,
        validate_csharp: Callable[[str], None] | None = None,
    ):
        """Initialize the atomic writer.

        Args:
            validate_python: Optional validation function for Python code
            validate_csharp: Optional validation function for C# code
        """
        self._validate_python = validate_python or self._default_validate_python
        self._validate_csharp = validate_csharp or self._default_validate_csharp

    def write(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content to file atomically.

        Args:
            path: Target file path
            content: Content to write
            language: Language for validation ("python" or "cs")
            validate: Whether to validate before finalizing

        Raises:
            OutputError: If validation fails
            OSError: If file operations fail
        """
        path.parent.mkdir(parents=True, exist_ok=True)

        # Same directory ensures atomic rename on the same filesystem
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=path.parent,
            prefix=f".{path.name}.",
            suffix=".tmp",
            text=True,
        )
        temp_path = Path(temp_path_str)

        try:
            with open(temp_fd, "w", encoding="utf-8") as f:
                f.write(content)

            if validate:
                self.validate(content, language, path)

            temp_path.replace(path)
        except BaseException:
            temp_path.unlink(missing_ok=True)
            raise

    def write_if_not_exists(
        self,
        path: Path,
        content: str,
        language: str,
        validate: bool = True,
    ) -> None:
        """Write content only if the file doesn't exist.

        Raises:
            OutputError: If the file already exists or validation fails
        """
        if path.exists():
            raise OutputError(f"Output file already exists: {path}. Use --force to overwrite.", path=str(path))

        self.write(path, content, language, validate)

    def validate(self, content: str, language: str, path: Path) -> None:
        """Run the validator for a language; unknown languages pass."""
        try:
            if language == "python":
                self._validate_python(content)
            elif language == "cs":
                self._validate_csharp(content)
        except OutputError as e:
            e.details.setdefault("path", str(path))
            raise

    def _default_validate_python(self, content: str) -> None:
        """Default Python validation.

        Raises:
            OutputError: If the code does not parse
        """
        try:
            ast.parse(content)
        except SyntaxError as e:
            raise OutputError(f"Generated Python code is not valid: {e}") from e

    def _default_validate_csharp(self, content: str) -> None:
        """Default C# validation.

        Basic structural checks only; the host compiler does the real parse.

        Raises:
            OutputError: If a check fails
        """
        code = CSHARP_NON_CODE.sub("", content)
        if "partial " not in code:
            raise OutputError("Generated C# code has no partial type declaration")

        open_braces = code.count("{")
        close_braces = code.count("}")
        if open_braces != close_braces:
            raise OutputError(f"Generated C# code has unbalanced braces: {open_braces} open, {close_braces} close")
