"""pi-prompt: masked single-line terminal input."""

from pi.prompt.errors import (
    PromptBusyError,
    PromptEOFError,
    PromptError,
    PromptInterrupted,
    UnsupportedInputError,
)
from pi.prompt.line_editor import LineEditor, SessionState, Step, StepResult, finalize, read_line, step
from pi.prompt.prompt import Prompter, prompt, prompt_sync
from pi.prompt.streams import (
    InputSource,
    OutputSink,
    StreamOutput,
    TtyInput,
    is_input_source,
    is_output_sink,
    select_input,
    select_output,
)
from pi.prompt.types import NO_MASK, SUPPRESSED, Mask, PromptOptions, ResolvedOptions, resolve_options

__all__ = [
    # Errors
    "PromptError",
    "PromptInterrupted",
    "PromptBusyError",
    "PromptEOFError",
    "UnsupportedInputError",
    # Types
    "Mask",
    "NO_MASK",
    "SUPPRESSED",
    "PromptOptions",
    "ResolvedOptions",
    "resolve_options",
    # Streams
    "InputSource",
    "OutputSink",
    "TtyInput",
    "StreamOutput",
    "is_input_source",
    "is_output_sink",
    "select_input",
    "select_output",
    # Line editor
    "LineEditor",
    "SessionState",
    "Step",
    "StepResult",
    "step",
    "finalize",
    "read_line",
    # Coordinator
    "Prompter",
    "prompt",
    "prompt_sync",
]

__version__ = "0.1.0"
