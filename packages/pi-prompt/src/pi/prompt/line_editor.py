"""Raw-mode single-line editor.

The editor is split in two parts:

* :func:`step` is the pure transition function. Given the current buffer and
  one input event it returns the next action, the new buffer and the writes
  needed to render the change.
* :class:`LineEditor` is a one-shot session. It owns the raw-mode lifecycle
  of its input source, applies the writes produced by :func:`step` and
  resolves an :class:`asyncio.Future` with the final line, or fails it with
  :class:`~pi.prompt.errors.PromptInterrupted` (Ctrl-C) or
  :class:`~pi.prompt.errors.PromptEOFError` (input closed with nothing to
  submit). Raw mode is released on every one of those paths.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from pi.prompt.ansi import (
    BACKSPACE,
    CR,
    CTRL_C,
    CTRL_D,
    CURSOR_LEFT,
    ERASE_END_LINE,
    ERASE_LINE,
    LF,
    SHOW_CURSOR,
    cursor_backward,
)
from pi.prompt.errors import PromptEOFError, PromptInterrupted
from pi.prompt.streams import InputSource, OutputSink
from pi.prompt.types import ResolvedOptions

logger = logging.getLogger(__name__)

_SUBMIT_KEYS = frozenset((CTRL_D, CR, LF))


class Step(Enum):
    CONTINUE = "continue"
    SUBMIT = "submit"
    CANCEL = "cancel"


class SessionState(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    RESOLVED = "resolved"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class StepResult:
    action: Step
    buffer: str
    writes: tuple[str, ...] = ()


def step(buffer: str, event: str, options: ResolvedOptions) -> StepResult:
    """Apply a single input *event* to *buffer*."""
    if event in _SUBMIT_KEYS:
        if options.required and not buffer:
            return StepResult(Step.CONTINUE, buffer)
        return StepResult(Step.SUBMIT, buffer)

    if event == CTRL_C:
        return StepResult(Step.CANCEL, buffer)

    if event == BACKSPACE:
        if not buffer:
            return StepResult(Step.CONTINUE, buffer)
        return StepResult(Step.CONTINUE, buffer[:-1], (cursor_backward(1), ERASE_END_LINE))

    echo = options.mask.render(event)
    return StepResult(Step.CONTINUE, buffer + event, (echo,) if echo else ())


def finalize(buffer: str, default: str | None) -> str:
    """Turn a submitted buffer into the resolved value.

    Strips one trailing carriage return, then falls back to *default* when
    nothing is left.
    """
    if buffer.endswith(CR):
        buffer = buffer[:-1]
    if not buffer and default:
        return default
    return buffer


class LineEditor:
    """One prompt session on an input source.

    Sessions are one-shot: ``idle -> active -> resolved | cancelled``.
    """

    def __init__(
        self,
        prompt: str,
        output: OutputSink,
        input: InputSource,
        options: ResolvedOptions,
    ) -> None:
        self._prompt = prompt
        self._output = output
        self._input = input
        self._options = options
        self._buffer: str = ""
        self._state = SessionState.IDLE
        self._future: asyncio.Future[str] | None = None
        self._end_attached = False

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def buffer(self) -> str:
        return self._buffer

    @property
    def prompt(self) -> str:
        return self._prompt

    # -- lifecycle ----------------------------------------------------------

    def start(self) -> asyncio.Future[str]:
        """Render the prompt, enter raw mode and begin accepting input."""
        if self._state is not SessionState.IDLE:
            raise RuntimeError("LineEditor session has already been started")

        self._future = asyncio.get_running_loop().create_future()

        self._output.write(ERASE_LINE)
        self._output.write(CURSOR_LEFT)
        self._output.write(self._prompt)

        self._input.resume()
        try:
            self._input.set_raw_mode(True)
        except BaseException:
            self._input.pause()
            raise
        self._input.on_data(self._on_data)
        on_end = getattr(self._input, "on_end", None)
        if callable(on_end):
            on_end(self._on_end)
            self._end_attached = True
        self._state = SessionState.ACTIVE

        logger.debug(
            "Prompt session started (mask=%s, required=%s)",
            self._options.mask.mode,
            self._options.required,
        )
        return self._future

    async def run(self) -> str:
        """Run the session to completion and return the entered line."""
        future = self.start()
        try:
            return await future
        except asyncio.CancelledError:
            try:
                self.abort()
            except Exception:
                logger.warning("Prompt teardown failed after cancellation", exc_info=True)
            raise

    def abort(self) -> None:
        """Tear the session down without producing a value."""
        if self._state is not SessionState.ACTIVE:
            return
        logger.debug("Prompt session aborted")
        self._finish(SessionState.CANCELLED)

    # -- event handling -----------------------------------------------------

    def feed(self, event: str) -> Step:
        """Process a single character event."""
        if self._state is not SessionState.ACTIVE:
            raise RuntimeError(f"Cannot feed input to a {self._state.value} session")

        result = step(self._buffer, event, self._options)
        self._buffer = result.buffer
        try:
            for data in result.writes:
                self._output.write(data)
        except Exception as e:
            self._finish(SessionState.CANCELLED, error=e)
            raise

        if result.action is Step.SUBMIT:
            self._resolve()
        elif result.action is Step.CANCEL:
            logger.debug("Prompt session interrupted")
            self._finish(SessionState.CANCELLED, error=PromptInterrupted())
        return result.action

    def _on_data(self, data: str) -> None:
        for char in data:
            if self._state is not SessionState.ACTIVE:
                break
            self.feed(char)

    def _on_end(self) -> None:
        """The input source closed: submit what we have, or fail."""
        if self._state is not SessionState.ACTIVE:
            return
        if step(self._buffer, CTRL_D, self._options).action is Step.SUBMIT:
            self._resolve()
        else:
            logger.debug("Input closed before a required answer was given")
            self._finish(SessionState.CANCELLED, error=PromptEOFError())

    def _resolve(self) -> None:
        logger.debug("Prompt session resolved")
        value = finalize(self._buffer, self._options.default)
        self._finish(SessionState.RESOLVED, value=value)

    def _finish(
        self,
        state: SessionState,
        value: str | None = None,
        error: BaseException | None = None,
    ) -> None:
        """Enter a terminal *state*, tear down, then settle the future.

        The future is settled even when teardown raises; the teardown error
        is re-raised afterwards.
        """
        self._state = state
        try:
            self._stop()
        finally:
            future = self._future
            if future is not None and not future.done():
                if error is not None:
                    future.set_exception(error)
                elif value is not None:
                    future.set_result(value)
                else:
                    future.cancel()

    def _stop(self) -> None:
        # Every step runs even if an earlier one raises
        try:
            self._output.write(LF + SHOW_CURSOR)
        finally:
            try:
                self._input.remove_listener(self._on_data)
                if self._end_attached:
                    self._input.remove_listener(self._on_end)
            finally:
                try:
                    self._input.set_raw_mode(False)
                finally:
                    self._input.pause()


async def read_line(
    prompt: str,
    output: OutputSink,
    input: InputSource,
    options: ResolvedOptions,
) -> str:
    """Run a single :class:`LineEditor` session."""
    return await LineEditor(prompt, output, input, options).run()
