"""
Ruff formatter for generated Python bindings.
"""

from __future__ import annotations

import subprocess

import structlog

from ..config import FormatterConfig

logger = structlog.get_logger()


class RuffFormatter:
    """Runs ``ruff format`` over generated modules, reading stdin.

    Formatting is best effort: when ruff is missing or rejects the code,
    a warning is logged and the module is kept as generated.
    """

    def __init__(self, config: FormatterConfig):
        self.config = config
        self._available: bool | None = None

    def is_available(self) -> bool:
        if self._available is None:
            try:
                result = subprocess.run(["ruff", "--version"], capture_output=True, text=True, timeout=5)
                self._available = result.returncode == 0
            except (subprocess.SubprocessError, FileNotFoundError):
                self._available = False
            if not self._available:
                logger.warning("formatter_unavailable", formatter="ruff")
        return self._available

    def command(self, filename: str) -> list[str]:
        cmd = ["ruff", "format", "--stdin-filename", filename]
        if self.config.line_length:
            cmd.extend(["--line-length", str(self.config.line_length)])
        if self.config.target_version:
            cmd.extend(["--target-version", self.config.target_version])
        return cmd

    def format(self, filename: str, code: str) -> str:
        """
        Format one generated module.

        Args:
            filename: Output file name, tells ruff the source type
            code: The generated source

        Returns:
            Formatted code, or the input unchanged if formatting failed
        """
        if not self.is_available():
            return code

        try:
            result = subprocess.run(self.command(filename), input=code, capture_output=True, text=True, timeout=30)
        except subprocess.SubprocessError as e:
            logger.warning("formatter_failed", formatter="ruff", filename=filename, error=str(e))
            return code

        if result.returncode != 0:
            logger.warning("formatter_failed", formatter="ruff", filename=filename, error=result.stderr.strip())
            return code
        return result.stdout
