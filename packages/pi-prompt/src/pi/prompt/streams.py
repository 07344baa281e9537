"""Input sources and output sinks for the line editor.

Provides the ``InputSource`` and ``OutputSink`` protocols together with
concrete implementations backed by a TTY file descriptor (``TtyInput``) and a
text stream (``StreamOutput``). Raw mode is managed via :mod:`tty` and
:mod:`termios`; input is delivered through the running asyncio event loop.
"""

from __future__ import annotations

import asyncio
import codecs
import errno
import logging
import os
import sys
import termios
import tty
from typing import Any, Callable, Protocol, TextIO

from pi.prompt.errors import UnsupportedInputError

logger = logging.getLogger(__name__)

DataHandler = Callable[[str], None]
EndHandler = Callable[[], None]

_INPUT_METHODS = ("set_raw_mode", "pause", "resume", "set_encoding", "on_data", "remove_listener")

# termios attribute indices
_OFLAG = 1

_HANGUP_ERRNOS = (errno.EIO, errno.ENXIO, errno.EBADF)


# ---------------------------------------------------------------------------
# Protocols
# ---------------------------------------------------------------------------


class InputSource(Protocol):
    """Interface for a raw-capable stream of character events.

    Sources may also offer ``on_end(handler)`` to report that no more input
    will arrive; ``remove_listener`` then detaches end handlers as well.
    """

    def set_raw_mode(self, enabled: bool) -> None: ...

    def pause(self) -> None: ...

    def resume(self) -> None: ...

    def set_encoding(self, encoding: str) -> None: ...

    def on_data(self, handler: DataHandler) -> None: ...

    def remove_listener(self, handler: DataHandler) -> None: ...


class OutputSink(Protocol):
    """Interface for the stream the prompt is rendered to."""

    def write(self, data: str) -> Any: ...

    def end(self) -> None: ...


def is_input_source(obj: object) -> bool:
    return all(callable(getattr(obj, name, None)) for name in _INPUT_METHODS)


def is_output_sink(obj: object) -> bool:
    return callable(getattr(obj, "write", None))


# ---------------------------------------------------------------------------
# TtyInput
# ---------------------------------------------------------------------------


class TtyInput:
    """``InputSource`` reading from a terminal file descriptor.

    Raw mode keeps output post-processing enabled so a written ``"\\n"``
    still returns the carriage. End of file, or a read error such as a
    hangup, pauses the reader and notifies the ``on_end`` listeners.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdin
        try:
            self._fd = self._stream.fileno()
        except (AttributeError, ValueError, OSError) as e:
            raise UnsupportedInputError() from e
        if not os.isatty(self._fd):
            raise UnsupportedInputError()

        self._handlers: list[DataHandler] = []
        self._end_handlers: list[EndHandler] = []
        self._original_termios: list | None = None
        self._reader_loop: asyncio.AbstractEventLoop | None = None
        self.set_encoding("utf-8")

    @property
    def fd(self) -> int:
        return self._fd

    @property
    def is_raw(self) -> bool:
        return self._original_termios is not None

    def set_encoding(self, encoding: str) -> None:
        self._decoder = codecs.getincrementaldecoder(encoding)(errors="replace")

    def set_raw_mode(self, enabled: bool) -> None:
        if enabled:
            if self._original_termios is not None:
                return
            self._original_termios = termios.tcgetattr(self._fd)
            tty.setraw(self._fd)
            attrs = termios.tcgetattr(self._fd)
            attrs[_OFLAG] |= termios.OPOST | termios.ONLCR
            termios.tcsetattr(self._fd, termios.TCSANOW, attrs)
        elif self._original_termios is not None:
            original, self._original_termios = self._original_termios, None
            try:
                termios.tcsetattr(self._fd, termios.TCSADRAIN, original)
            except termios.error as e:
                # A hung-up terminal has no attributes left to restore
                if e.args[0] not in _HANGUP_ERRNOS:
                    raise
                logger.debug("Terminal on fd %d is gone, skipping restore: %s", self._fd, e)

    def resume(self) -> None:
        """Start delivering data events from the running event loop."""
        if self._reader_loop is not None:
            return
        loop = asyncio.get_running_loop()
        loop.add_reader(self._fd, self._on_readable)
        self._reader_loop = loop

    def pause(self) -> None:
        if self._reader_loop is None:
            return
        try:
            self._reader_loop.remove_reader(self._fd)
        except (RuntimeError, ValueError):
            # Loop already closed
            pass
        self._reader_loop = None

    def on_data(self, handler: DataHandler) -> None:
        self._handlers.append(handler)

    def on_end(self, handler: EndHandler) -> None:
        self._end_handlers.append(handler)

    def remove_listener(self, handler: Callable[..., None]) -> None:
        """Detach *handler* from both data and end notifications."""
        if handler in self._handlers:
            self._handlers.remove(handler)
        if handler in self._end_handlers:
            self._end_handlers.remove(handler)

    def _on_readable(self) -> None:
        try:
            raw = os.read(self._fd, 4096)
        except (BlockingIOError, InterruptedError):
            return
        except OSError as e:
            logger.debug("Read from fd %d failed: %s", self._fd, e)
            raw = b""

        if not raw:
            self._end()
            return

        data = self._decoder.decode(raw)
        if data:
            self._emit(data)

    def _end(self) -> None:
        logger.debug("End of input on fd %d", self._fd)
        self.pause()
        tail = self._decoder.decode(b"", final=True)
        if tail:
            self._emit(tail)
        for handler in list(self._end_handlers):
            handler()

    def _emit(self, data: str) -> None:
        for handler in list(self._handlers):
            handler(data)


# ---------------------------------------------------------------------------
# StreamOutput
# ---------------------------------------------------------------------------


class StreamOutput:
    """``OutputSink`` writing to a text stream, flushing after every write.

    When ``PI_PROMPT_WRITE_LOG`` is set, all output is also appended to that
    file.
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream if stream is not None else sys.stdout
        self._write_log_path: str = os.environ.get("PI_PROMPT_WRITE_LOG", "")

    def write(self, data: str) -> None:
        try:
            self._stream.write(data)
            self._stream.flush()
        except OSError:
            pass

        if self._write_log_path:
            try:
                with open(self._write_log_path, "a") as f:
                    f.write(data)
            except OSError:
                pass

    def end(self) -> None:
        try:
            self._stream.flush()
        except OSError:
            pass


# ---------------------------------------------------------------------------
# Endpoint selection
# ---------------------------------------------------------------------------


def select_output(target: object = None) -> OutputSink:
    """Map the ``output`` option onto a sink. Unknown values mean stdout."""
    if target == "stderr":
        return StreamOutput(sys.stderr)
    if target == "stdout" or target is None:
        return StreamOutput(sys.stdout)
    if is_output_sink(target):
        return target  # type: ignore[return-value]
    logger.debug("Ignoring unusable output target %r, using stdout", target)
    return StreamOutput(sys.stdout)


def select_input(target: object = None) -> InputSource:
    """Map the ``input`` option onto a source. Unknown values mean stdin.

    Raises :class:`UnsupportedInputError` when the chosen source cannot be
    put into raw mode.
    """
    if target is not None and target != "stdin":
        if is_input_source(target):
            return target  # type: ignore[return-value]
        logger.debug("Ignoring unusable input target %r, using stdin", target)
    return TtyInput(sys.stdin)
