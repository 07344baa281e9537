"""Prompt coordinator: stream selection, option defaults and the required loop."""

from __future__ import annotations

import asyncio
import dataclasses
import logging
from contextlib import contextmanager
from typing import Any, Iterator

from pi.prompt.errors import PromptBusyError
from pi.prompt.line_editor import read_line
from pi.prompt.streams import InputSource, select_input, select_output
from pi.prompt.types import PromptOptions, resolve_options

logger = logging.getLogger(__name__)

# Input sources with a prompt in flight. TTY sources are keyed by file
# descriptor so two wrappers around the same terminal collide.
_active_sources: set[tuple[str, int]] = set()


class Prompter:
    """Asks for lines of input, optionally reusing the previous options.

    Options are only carried over between calls when ``reuse_last=True`` is
    passed to :meth:`ask`.
    """

    def __init__(self, options: PromptOptions | None = None) -> None:
        self._last_options: PromptOptions = options or PromptOptions()

    @property
    def last_options(self) -> PromptOptions:
        return self._last_options

    async def ask(
        self,
        text: str,
        options: PromptOptions | None = None,
        *,
        reuse_last: bool = False,
        **overrides: Any,
    ) -> str:
        """Prompt with *text* and return the entered line.

        The options used are *options* (or the previous call's options when
        *reuse_last* is true, or the defaults), with the keyword *overrides*
        applied on top. An override always wins, even when it names the
        default value.

        Raises :class:`UnsupportedInputError` if the input cannot be put into
        raw mode, :class:`PromptBusyError` if another prompt is reading the
        same input, :class:`PromptInterrupted` on Ctrl-C and
        :class:`PromptEOFError` if the input closes before a required answer.
        """
        if reuse_last:
            if options is not None:
                raise ValueError("Pass keyword overrides instead of options when reuse_last=True")
            options = self._last_options
        elif options is None:
            options = PromptOptions()
        if overrides:
            options = dataclasses.replace(options, **overrides)

        output = select_output(options.output)
        instream = select_input(options.input)

        self._last_options = options
        resolved = resolve_options(options)
        instream.set_encoding("utf8")

        with _exclusive(instream):
            while True:
                value = await read_line(text, output, instream, resolved)
                if value or not resolved.required:
                    return value
                logger.debug("Empty answer to a required prompt, asking again")


def _source_key(source: InputSource) -> tuple[str, int]:
    fd = getattr(source, "fd", None)
    if isinstance(fd, int):
        return ("fd", fd)
    return ("id", id(source))


@contextmanager
def _exclusive(source: InputSource) -> Iterator[None]:
    key = _source_key(source)
    if key in _active_sources:
        raise PromptBusyError()
    _active_sources.add(key)
    try:
        yield
    finally:
        _active_sources.discard(key)


async def prompt(text: str, options: PromptOptions | None = None, **overrides: Any) -> str:
    """Prompt once with a fresh :class:`Prompter`.

    Keyword *overrides* are applied on top of *options*, e.g.
    ``await prompt("Password: ", mask="#")``.
    """
    return await Prompter().ask(text, options, **overrides)


def prompt_sync(text: str, options: PromptOptions | None = None, **overrides: Any) -> str:
    """Blocking variant of :func:`prompt`."""
    return asyncio.run(prompt(text, options, **overrides))
