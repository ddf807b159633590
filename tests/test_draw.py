"""Tests for draw instructions and frame rasterization."""

from __future__ import annotations

from rich.style import Style

from ternbird.draw import RESET, Canvas, DrawInstruction, Frame
from ternbird.geometry import Region


def _lines(canvas: Canvas, width: int, height: int) -> list[str]:
    return Frame(width, height, canvas.instructions).lines()


def test_instruction_style() -> None:
    assert DrawInstruction(0, 0, "a", fg="red", invert=True).style() == Style(
        color="red", reverse=True
    )
    assert DrawInstruction(0, 0, "a", fg=RESET, bold=True).style() == Style(bold=True)


def test_canvas_skips_empty_text() -> None:
    canvas = Canvas()
    canvas.text(0, 0, "")
    assert canvas.instructions == []


def test_frame_clips_to_its_size() -> None:
    canvas = Canvas()
    canvas.text(3, 0, "abc")
    canvas.text(-1, 1, "xyz")
    canvas.text(0, 5, "off screen")
    assert _lines(canvas, 4, 2) == ["   a", "yz  "]


def test_later_instructions_overwrite_earlier_ones() -> None:
    canvas = Canvas()
    canvas.text(0, 0, "hello")
    canvas.text(1, 0, "EY")
    assert _lines(canvas, 5, 1) == ["hEYlo"]


def test_wide_characters_take_two_cells() -> None:
    canvas = Canvas()
    canvas.text(1, 0, "日")
    assert _lines(canvas, 4, 1) == [" 日 "]
    canvas.text(2, 0, "a")
    assert _lines(canvas, 4, 1) == ["  a "]


def test_wide_character_that_does_not_fit_is_dropped() -> None:
    canvas = Canvas()
    canvas.text(2, 0, "a日")
    assert _lines(canvas, 4, 1) == ["  a "]


def test_box_and_rules() -> None:
    canvas = Canvas()
    canvas.box(Region(0, 0, 4, 3))
    assert _lines(canvas, 4, 3) == ["┌──┐", "│  │", "└──┘"]
    canvas = Canvas()
    canvas.hline(0, 0, 3)
    canvas.vline(3, 0, 2)
    assert _lines(canvas, 4, 2) == ["───│", "   │"]


def test_clear_blanks_a_region() -> None:
    canvas = Canvas()
    canvas.text(0, 0, "xxxx")
    canvas.text(0, 1, "xxxx")
    canvas.clear(Region(1, 0, 2, 2))
    assert _lines(canvas, 4, 2) == ["x  x", "x  x"]


def test_empty_frame() -> None:
    assert Frame(0, 0, []).lines() == []
    assert Frame(3, 1, []).to_text().plain == "   "
