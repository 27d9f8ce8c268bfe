"""
Configuration for the binding generator pipeline.

Covers analysis options, target-language settings, the optional Python
formatter and output handling.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum

from ..errors import ConfigError


class OutputMode(str, Enum):
    """Output mode for file generation.

    Controls behavior when an output file already exists.
    """

    ERROR_IF_EXISTS = "error"  # Default: raise error if file exists
    FORCE = "force"  # Overwrite


@dataclass
class OutputConfig:
    """Configuration for output file handling.

    Attributes:
        mode: How to handle existing output files
        validate_before_write: Whether to validate code before writing
        atomic_write: Whether to use atomic file writes
    """

    mode: OutputMode = OutputMode.ERROR_IF_EXISTS
    validate_before_write: bool = True
    atomic_write: bool = True


@dataclass
class FormatterConfig:
    """Configuration for post-processing formatters (Python output only)."""

    # Whether formatting is enabled
    enabled: bool = False

    # Line length for the formatter
    line_length: int = 100

    # Python version target (e.g., "py312", "py313")
    target_version: str = "py312"


@dataclass
class CodeGeneratorConfig:
    """Configuration options for binding generation."""

    # Add generation comment at top of each generated file
    add_generation_comment: bool = True

    # Full names of types to skip even if they carry the binding annotation
    ignore_types: list[str] = field(default_factory=list)

    # Minimum number of properties for which a name-keyed branch table is
    # emitted instead of a chain of equality checks
    dispatch_switch_threshold: int = 3

    # Declared type names treated as the opaque resource category
    opaque_resource_types: list[str] = field(default_factory=lambda: ["UnityEngine.Sprite"])

    # C# specific configuration
    csharp_runtime_namespace: str = "Bindable.Runtime"

    # Python specific configuration
    python_runtime_module: str = "bindable_codegen.runtime"
    python_mixin_suffix: str = "Bindable"
    python_module_name: str = "bindings"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"  # "console" or "json"

    # Formatter configuration
    formatter: FormatterConfig = field(default_factory=FormatterConfig)

    # Output configuration
    output: OutputConfig = field(default_factory=OutputConfig)

    @staticmethod
    def from_dict(d: dict) -> CodeGeneratorConfig:
        """Create a config from a dictionary."""
        config = CodeGeneratorConfig()
        for k, v in d.items():
            if k == "formatter" and isinstance(v, dict):
                unknown = sorted(set(v) - {f.name for f in fields(FormatterConfig)})
                if unknown:
                    raise ConfigError.invalid_value("formatter", unknown, f"unknown key(s) {', '.join(unknown)}")
                config.formatter = FormatterConfig(**v)
            elif k == "output" and isinstance(v, dict):
                mode = v.get("mode", OutputMode.ERROR_IF_EXISTS)
                if isinstance(mode, str):
                    try:
                        mode = OutputMode(mode)
                    except ValueError as e:
                        raise ConfigError.invalid_value("output.mode", mode, "expected 'error' or 'force'") from e
                config.output = OutputConfig(
                    mode=mode,
                    validate_before_write=v.get("validate_before_write", True),
                    atomic_write=v.get("atomic_write", True),
                )
            elif hasattr(config, k):
                setattr(config, k, v)

        if not isinstance(config.dispatch_switch_threshold, int) or config.dispatch_switch_threshold < 1:
            raise ConfigError.invalid_value("dispatch_switch_threshold", config.dispatch_switch_threshold, "must be a positive integer")
        if config.log_format not in ("console", "json"):
            raise ConfigError.invalid_value("log_format", config.log_format, "expected 'console' or 'json'")
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "add_generation_comment": self.add_generation_comment,
            "ignore_types": self.ignore_types,
            "dispatch_switch_threshold": self.dispatch_switch_threshold,
            "opaque_resource_types": self.opaque_resource_types,
            "csharp_runtime_namespace": self.csharp_runtime_namespace,
            "python_runtime_module": self.python_runtime_module,
            "python_mixin_suffix": self.python_mixin_suffix,
            "python_module_name": self.python_module_name,
            "log_level": self.log_level,
            "log_format": self.log_format,
            "formatter": {
                "enabled": self.formatter.enabled,
                "line_length": self.formatter.line_length,
                "target_version": self.formatter.target_version,
            },
            "output": {
                "mode": self.output.mode.value,
                "validate_before_write": self.output.validate_before_write,
                "atomic_write": self.output.atomic_write,
            },
        }
