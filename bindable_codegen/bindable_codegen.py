import json
from pathlib import Path

import click
import structlog

from .errors import BindableCodegenError, ConfigError, DeclarationError
from .logging_config import configure_logging
from .pipeline import BindingGenerator, CodeGeneratorConfig, OutputMode

logger = structlog.get_logger()


def load_config(config_path: str | None) -> CodeGeneratorConfig:
    if config_path is None:
        return CodeGeneratorConfig()
    try:
        with open(config_path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Configuration is not valid JSON: {e}", path=str(config_path)) from e
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a JSON object", path=str(config_path))
    return CodeGeneratorConfig.from_dict(data)


def load_declarations(path: str) -> dict:
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise DeclarationError(f"Declaration model is not valid JSON: {e}", path=str(path)) from e


@click.command()
@click.option("--config", "-c", default=None, type=click.Path(exists=True, resolve_path=True))
@click.option("--language", "-l", default="cs", type=click.Choice(["cs", "python"]))
@click.option("--force", is_flag=True, default=False, help="Overwrite existing output files")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Log debug output")
@click.option("--log-json", is_flag=True, default=False, help="Log as JSON lines")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, resolve_path=True))
@click.argument("output", type=click.Path(file_okay=False, resolve_path=True))
def bindable_codegen(config, language, force, verbose, log_json, path, output):
    """Generate bindings for the declaration model at PATH into the OUTPUT directory."""
    try:
        codegen_config = load_config(config)
    except BindableCodegenError as e:
        click.echo(f"Error: {e.message}", err=True)
        raise click.exceptions.Exit(1) from e

    configure_logging(
        level="DEBUG" if verbose else codegen_config.log_level,
        json_format=log_json or codegen_config.log_format == "json",
    )

    if force:
        codegen_config.output.mode = OutputMode.FORCE

    try:
        declarations = load_declarations(path)
        codegen = BindingGenerator(declarations, codegen_config, language)
        result = codegen.generate()
        for diagnostic in result.diagnostics:
            click.echo(str(diagnostic), err=True)
        written = codegen.write(output, result)
    except BindableCodegenError as e:
        logger.debug("generation_failed", **e.to_dict())
        click.echo(f"Error: {e.message}", err=True)
        raise click.exceptions.Exit(1) from e

    for omitted in result.omitted:
        click.echo(f"Skipped {omitted}: generation failed, see log", err=True)
    click.echo(f"Generated {len(written)} file(s) in {Path(output)}")


if __name__ == "__main__":
    bindable_codegen()
