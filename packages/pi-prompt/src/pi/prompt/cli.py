"""CLI entry point for pi-prompt. Uses Click for argument parsing."""

from __future__ import annotations

import logging
import sys

import click

from pi.prompt.errors import PromptEOFError, PromptInterrupted, UnsupportedInputError
from pi.prompt.prompt import prompt_sync
from pi.prompt.types import PromptOptions

EXIT_INTERRUPTED = 130
EXIT_NOT_A_TTY = 2
EXIT_EOF = 1


@click.command()
@click.argument("text", default="> ")
@click.option("--mask", "mask_char", default="*", show_default=True, help="Character echoed for each keystroke")
@click.option("--no-mask", is_flag=True, help="Echo typed characters as-is")
@click.option("--silent", is_flag=True, help="Echo nothing while typing")
@click.option("--default", "default", default=None, help="Value used when the answer is empty")
@click.option(
    "--required/--optional",
    default=None,
    help="Refuse empty answers (default: required unless --default is given)",
)
@click.option("--stderr", "use_stderr", is_flag=True, help="Render the prompt on stderr")
@click.option(
    "--log-level",
    default="warning",
    type=click.Choice(["debug", "info", "warning", "error"]),
    show_default=True,
)
def main(text, mask_char, no_mask, silent, default, required, use_stderr, log_level):
    """Read one line from the terminal and print it to stdout."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if silent:
        mask: bool | str = ""
    elif no_mask:
        mask = False
    else:
        mask = mask_char

    options = PromptOptions(
        default=default,
        mask=mask,
        required=required,
        output="stderr" if use_stderr else "stdout",
        input="stdin",
    )

    try:
        answer = prompt_sync(text, options)
    except PromptInterrupted:
        sys.exit(EXIT_INTERRUPTED)
    except PromptEOFError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_EOF)
    except UnsupportedInputError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_NOT_A_TTY)

    click.echo(answer)


if __name__ == "__main__":
    main()
