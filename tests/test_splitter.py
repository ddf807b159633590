"""Tests for splitter layout, drawing and focus."""

from __future__ import annotations

from typing import Any

from ternbird import events
from ternbird.context import AppContext
from ternbird.draw import Canvas, Frame
from ternbird.events import Emit
from ternbird.geometry import REMAINDER, Absolute, Percent, Region
from ternbird.ui.base import Widget
from ternbird.ui.splitter import HorizontalSplitter, Panel, VerticalSplitter


class _Leaf(Widget):
    def __init__(self, name: str, fill: str = "x") -> None:
        super().__init__(name)
        self.fill = fill
        self.focused_draws: list[bool] = []
        self.broadcasts: list[Any] = []
        self.focus_events: list[Any] = []

    def draw(self, canvas: Canvas, region: Region, focused: bool) -> None:
        self.focused_draws.append(focused)
        for row in range(region.h):
            canvas.text(region.x, region.y + row, self.fill * region.w)

    def handle_broadcast(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        self.broadcasts.append(event)

    def handle_focus(self, ctx: AppContext, event: Any, emit: Emit) -> None:
        self.focus_events.append(event)


def _three() -> HorizontalSplitter:
    return HorizontalSplitter(
        "Row",
        [Panel(REMAINDER, _Leaf(name)) for name in ("a", "b", "c")],
    )


def test_focus_next_stops_at_last_panel() -> None:
    splitter = _three()
    assert splitter.focus_next()
    assert splitter.selection == 1
    assert splitter.focus_next()
    assert splitter.selection == 2
    assert not splitter.focus_next()
    assert splitter.selection == 2


def test_focus_prev_stops_at_first_panel() -> None:
    splitter = _three()
    assert not splitter.focus_prev()
    assert splitter.selection == 0
    splitter.selection = 2
    assert splitter.focus_prev()
    assert splitter.selection == 1


def test_horizontal_regions_with_border() -> None:
    splitter = HorizontalSplitter(
        "Row", [Panel(Percent(40), _Leaf("a")), Panel(REMAINDER, _Leaf("b"))]
    )
    assert splitter.regions(Region(0, 0, 100, 10)) == [
        Region(0, 0, 40, 10),
        Region(41, 0, 59, 10),
    ]


def test_vertical_regions_without_border() -> None:
    splitter = VerticalSplitter(
        "Column",
        [Panel(Absolute(1), _Leaf("a")), Panel(REMAINDER, _Leaf("b"))],
        borders=False,
    )
    assert splitter.regions(Region(2, 3, 10, 6)) == [
        Region(2, 3, 10, 1),
        Region(2, 4, 10, 5),
    ]


def test_draw_separators_and_children() -> None:
    splitter = HorizontalSplitter(
        "Row",
        [Panel(Absolute(2), _Leaf("a", "a")), Panel(REMAINDER, _Leaf("b", "b"))],
    )
    canvas = Canvas()
    splitter.draw(canvas, Region(0, 0, 5, 2), True)
    assert Frame(5, 2, canvas.instructions).lines() == ["aa│bb", "aa│bb"]


def test_vertical_separator_is_a_rule() -> None:
    splitter = VerticalSplitter(
        "Column",
        [Panel(Absolute(1), _Leaf("a", "a")), Panel(REMAINDER, _Leaf("b", "b"))],
    )
    canvas = Canvas()
    splitter.draw(canvas, Region(0, 0, 3, 3), True)
    assert Frame(3, 3, canvas.instructions).lines() == ["aaa", "───", "bbb"]


def test_only_selected_child_is_drawn_focused() -> None:
    splitter = _three()
    splitter.selection = 1
    splitter.draw(Canvas(), Region(0, 0, 30, 3), True)
    leaves = [panel.widget for panel in splitter.panels]
    assert [leaf.focused_draws for leaf in leaves] == [[False], [True], [False]]
    splitter.draw(Canvas(), Region(0, 0, 30, 3), False)
    assert leaves[1].focused_draws[-1] is False


def test_broadcast_reaches_every_panel_focus_only_selected() -> None:
    splitter = _three()
    splitter.selection = 2
    ctx = AppContext()
    splitter.handle_broadcast(ctx, events.LibraryUpdated(), lambda _e: None)
    splitter.handle_focus(ctx, events.Next(), lambda _e: None)
    leaves = [panel.widget for panel in splitter.panels]
    assert all(leaf.broadcasts == [events.LibraryUpdated()] for leaf in leaves)
    assert [leaf.focus_events for leaf in leaves] == [[], [], [events.Next()]]


def test_walk_and_find_descend_into_nested_splitters() -> None:
    inner = VerticalSplitter("Inner", [Panel(REMAINDER, _Leaf("deep"))])
    outer = HorizontalSplitter(
        "Outer", [Panel(REMAINDER, _Leaf("top")), Panel(REMAINDER, inner)]
    )
    assert [widget.name for widget in outer.walk()] == ["Outer", "top", "Inner", "deep"]
    assert outer.find("deep") is inner.panels[0].widget
    assert outer.find("missing") is None
    assert outer.splitter is outer
    assert _Leaf("leaf").splitter is None


def test_empty_splitter_draws_nothing() -> None:
    splitter = HorizontalSplitter("Empty")
    canvas = Canvas()
    splitter.draw(canvas, Region(0, 0, 10, 2), True)
    assert canvas.instructions == []
    assert splitter.selected() is None
    assert not splitter.focus_next()


def test_oversubscribed_panels_are_clipped_to_the_parent() -> None:
    inner = HorizontalSplitter(
        "Inner",
        [Panel(Absolute(8), _Leaf("a", "a")), Panel(Absolute(8), _Leaf("b", "b"))],
    )
    outer = HorizontalSplitter(
        "Outer", [Panel(Absolute(10), inner), Panel(REMAINDER, _Leaf("c", "c"))]
    )
    assert inner.regions(Region(0, 0, 10, 1)) == [
        Region(0, 0, 8, 1),
        Region(9, 0, 1, 1),
    ]
    canvas = Canvas()
    outer.draw(canvas, Region(0, 0, 16, 1), True)
    assert Frame(16, 1, canvas.instructions).lines() == ["aaaaaaaa│b│ccccc"]


def test_panels_past_the_parent_edge_are_skipped() -> None:
    hidden = _Leaf("hidden", "h")
    splitter = VerticalSplitter(
        "Column",
        [Panel(Absolute(3), _Leaf("a", "a")), Panel(Absolute(2), hidden)],
        borders=False,
    )
    canvas = Canvas()
    splitter.draw(canvas, Region(0, 0, 2, 3), False)
    assert splitter.regions(Region(0, 0, 2, 3))[1].is_empty
    assert hidden.focused_draws == []
    assert Frame(2, 3, canvas.instructions).lines() == ["aa", "aa", "aa"]
