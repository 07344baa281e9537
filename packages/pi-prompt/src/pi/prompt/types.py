"""Option and masking types for pi-prompt."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, Union

if TYPE_CHECKING:
    from pi.prompt.streams import InputSource, OutputSink

MaskMode = Literal["none", "fixed", "suppressed"]

OutputTarget = Union[Literal["stdout", "stderr"], "OutputSink", None]
InputTarget = Union[Literal["stdin"], "InputSource", None]

DEFAULT_MASK_CHAR = "*"


@dataclass(frozen=True)
class Mask:
    """How typed characters are echoed back.

    ``char=None`` echoes the characters themselves, ``char=""`` echoes
    nothing, and any other string is echoed once per typed character.
    """

    char: str | None = DEFAULT_MASK_CHAR

    @property
    def mode(self) -> MaskMode:
        if self.char is None:
            return "none"
        if self.char == "":
            return "suppressed"
        return "fixed"

    def render(self, text: str) -> str:
        if self.char is None:
            return text
        return self.char * len(text)

    @classmethod
    def from_option(cls, value: bool | str) -> Mask:
        """Build a mask from the ``mask`` option (``True`` means ``"*"``)."""
        if isinstance(value, str):
            return cls(value)
        return cls(DEFAULT_MASK_CHAR) if value else cls(None)


NO_MASK = Mask(None)
SUPPRESSED = Mask("")


@dataclass
class PromptOptions:
    """Caller-facing prompt configuration.

    ``required`` left as ``None`` means input is required exactly when no
    ``default`` is given.
    """

    default: str | None = None
    mask: bool | str = True
    required: bool | None = None
    output: OutputTarget = None
    input: InputTarget = None


@dataclass(frozen=True)
class ResolvedOptions:
    default: str | None = None
    mask: Mask = Mask()
    required: bool = True


def resolve_options(options: PromptOptions | None = None) -> ResolvedOptions:
    """Apply defaults to *options* and freeze the result for one prompt call."""
    options = options or PromptOptions()
    required = options.required
    if required is None:
        required = options.default is None
    return ResolvedOptions(
        default=options.default,
        mask=Mask.from_option(options.mask),
        required=required,
    )
