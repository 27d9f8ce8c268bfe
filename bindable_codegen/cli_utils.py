"""
CLI utilities for command line reconstruction and introspection.
"""

from pathlib import Path

import click

PROGRAM_NAME = "bindable_codegen"


def _display_value(value) -> str:
    # Existing paths by file name only
    if isinstance(value, (str, Path)):
        path = Path(str(value))
        return path.name if path.exists() else str(value)
    return str(value)


def _param_tokens(param: click.Parameter, value) -> list[str]:
    """Command line tokens reproducing one parameter value, if it was set."""
    if not value:
        return []
    if isinstance(param, click.Option):
        if value == param.default:
            return []
        flag = param.opts[0] if param.opts else f"--{param.name}"
        return [flag] if param.is_flag else [flag, _display_value(value)]
    return [_display_value(value)]


def reconstruct_command_line(click_command: click.Command) -> str:
    """
    Reconstruct the command line of the current invocation, for the
    generation comment of emitted files.

    Args:
        click_command: Click command object for introspection

    Returns:
        Reconstructed command line string
    """
    try:
        params = click.get_current_context().params
    except RuntimeError:
        return PROGRAM_NAME

    arguments: list[str] = []
    options: list[str] = []
    for param in click_command.params:
        if param.name not in params:
            continue
        target = options if isinstance(param, click.Option) else arguments
        target.extend(_param_tokens(param, params[param.name]))

    return " ".join([PROGRAM_NAME, *arguments, *options])
