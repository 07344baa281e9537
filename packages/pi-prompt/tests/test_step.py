"""Tests for the pure line editor transition function."""

from __future__ import annotations

from pi.prompt.ansi import ERASE_END_LINE, cursor_backward
from pi.prompt.line_editor import Step, finalize, step
from pi.prompt.types import NO_MASK, SUPPRESSED, Mask, ResolvedOptions

KEY_ENTER = "\r"
KEY_LINEFEED = "\n"
KEY_CTRL_C = "\x03"
KEY_CTRL_D = "\x04"
KEY_BACKSPACE = "\x7f"

STAR = ResolvedOptions(mask=Mask("*"), required=False)
OPTIONAL = ResolvedOptions(mask=NO_MASK, required=False)
REQUIRED = ResolvedOptions(mask=NO_MASK, required=True)


def run_keys(keys: str, options: ResolvedOptions) -> tuple[Step, str, list[str]]:
    """Apply *keys* until a terminal action; return action, buffer and writes."""
    buffer = ""
    writes: list[str] = []
    action = Step.CONTINUE
    for key in keys:
        result = step(buffer, key, options)
        buffer = result.buffer
        writes.extend(result.writes)
        action = result.action
        if action is not Step.CONTINUE:
            break
    return action, buffer, writes


class TestStepAppend:
    def test_printable_char_is_appended(self) -> None:
        result = step("ab", "c", OPTIONAL)
        assert result.action is Step.CONTINUE
        assert result.buffer == "abc"

    def test_unmasked_echo_is_literal(self) -> None:
        assert step("", "x", OPTIONAL).writes == ("x",)

    def test_fixed_mask_echoes_substitute_once(self) -> None:
        assert step("secret", "z", STAR).writes == ("*",)

    def test_custom_mask_character(self) -> None:
        options = ResolvedOptions(mask=Mask("#"), required=False)
        assert step("", "q", options).writes == ("#",)

    def test_suppressed_mask_writes_nothing(self) -> None:
        options = ResolvedOptions(mask=SUPPRESSED, required=False)
        result = step("", "a", options)
        assert result.buffer == "a"
        assert result.writes == ()

    def test_masking_never_changes_the_value(self) -> None:
        text = "hunter2!"
        for mask in (NO_MASK, SUPPRESSED, Mask("*"), Mask("-")):
            options = ResolvedOptions(mask=mask, required=False)
            action, buffer, _ = run_keys(text + KEY_ENTER, options)
            assert action is Step.SUBMIT
            assert buffer == text


class TestStepSubmit:
    def test_carriage_return_submits(self) -> None:
        assert step("a", KEY_ENTER, OPTIONAL).action is Step.SUBMIT

    def test_line_feed_submits(self) -> None:
        assert step("a", KEY_LINEFEED, OPTIONAL).action is Step.SUBMIT

    def test_ctrl_d_submits(self) -> None:
        assert step("a", KEY_CTRL_D, OPTIONAL).action is Step.SUBMIT

    def test_submit_writes_nothing(self) -> None:
        assert step("a", KEY_ENTER, STAR).writes == ()

    def test_empty_required_submit_is_ignored(self) -> None:
        result = step("", KEY_ENTER, REQUIRED)
        assert result.action is Step.CONTINUE
        assert result.buffer == ""
        assert result.writes == ()

    def test_empty_optional_submit_resolves(self) -> None:
        assert step("", KEY_ENTER, OPTIONAL).action is Step.SUBMIT

    def test_required_submit_after_typing(self) -> None:
        action, buffer, _ = run_keys(KEY_ENTER + "x" + KEY_ENTER, REQUIRED)
        assert action is Step.SUBMIT
        assert buffer == "x"


class TestStepCancel:
    def test_ctrl_c_cancels(self) -> None:
        result = step("ab", KEY_CTRL_C, STAR)
        assert result.action is Step.CANCEL
        assert result.writes == ()

    def test_ctrl_c_on_empty_buffer_cancels(self) -> None:
        assert step("", KEY_CTRL_C, REQUIRED).action is Step.CANCEL


class TestStepBackspace:
    def test_backspace_removes_last_char(self) -> None:
        result = step("abc", KEY_BACKSPACE, STAR)
        assert result.buffer == "ab"
        assert result.writes == (cursor_backward(1), ERASE_END_LINE)

    def test_backspace_on_empty_buffer_is_noop(self) -> None:
        result = step("", KEY_BACKSPACE, STAR)
        assert result.action is Step.CONTINUE
        assert result.buffer == ""
        assert result.writes == ()

    def test_extra_backspaces_render_nothing(self) -> None:
        action, buffer, writes = run_keys("ab" + KEY_BACKSPACE * 3 + KEY_ENTER, STAR)
        assert action is Step.SUBMIT
        assert buffer == ""
        assert writes == ["*", "*"] + [cursor_backward(1), ERASE_END_LINE] * 2

    def test_backspace_with_suppressed_mask_still_erases(self) -> None:
        options = ResolvedOptions(mask=SUPPRESSED, required=False)
        result = step("ab", KEY_BACKSPACE, options)
        assert result.buffer == "a"
        assert result.writes == (cursor_backward(1), ERASE_END_LINE)

    def test_backspace_with_suppressed_mask_on_empty_buffer_is_noop(self) -> None:
        options = ResolvedOptions(mask=SUPPRESSED, required=False)
        assert step("", KEY_BACKSPACE, options).writes == ()


class TestFinalize:
    def test_strips_single_trailing_carriage_return(self) -> None:
        assert finalize("abc\r", None) == "abc"

    def test_strips_only_one_carriage_return(self) -> None:
        assert finalize("abc\r\r", None) == "abc\r"

    def test_keeps_other_line_endings(self) -> None:
        assert finalize("abc\n", None) == "abc\n"

    def test_empty_uses_default(self) -> None:
        assert finalize("", "fallback") == "fallback"

    def test_lone_carriage_return_uses_default(self) -> None:
        assert finalize("\r", "fallback") == "fallback"

    def test_empty_default_is_not_substituted(self) -> None:
        assert finalize("", "") == ""

    def test_typed_value_wins_over_default(self) -> None:
        assert finalize("typed", "fallback") == "typed"
