from __future__ import annotations

from typing import Callable, Dict, List, Optional, Sequence

import pytest

from panel_plugin.controller import WidgetController
from panel_plugin.host import PanelCallbacks
from panel_plugin.layout import ANCHOR_TOPLEFT, LayoutStore, PanelLayout


class FakePanel:
    def __init__(self, callbacks: Optional[PanelCallbacks] = None, portrait_fn: Optional[Callable[[str], str]] = None) -> None:
        self.callbacks = callbacks
        self.portrait_fn = portrait_fn
        self.visible = False
        self.size: Optional[tuple] = None
        self.position: Optional[tuple] = None
        self.portrait: Optional[str] = None
        self.portrait_text: Optional[str] = None
        self.portrait_binds = 0
        self.moving = False
        self.start_moving_calls = 0

    def set_position(self, anchor: str, x: int, y: int) -> None:
        self.position = (anchor, x, y)

    def set_size(self, width: int, height: int) -> None:
        self.size = (width, height)

    def show(self) -> None:
        self.visible = True

    def hide(self) -> None:
        self.visible = False

    def is_visible(self) -> bool:
        return self.visible

    def bind_portrait(self, subject: str) -> None:
        self.portrait = subject
        self.portrait_binds += 1
        if self.portrait_fn is not None:
            self.portrait_text = self.portrait_fn(subject)

    def start_moving(self) -> None:
        self.moving = True
        self.start_moving_calls += 1

    def stop_moving(self) -> None:
        self.moving = False

    def move_to(self, x: int, y: int) -> None:
        # Stand-in for the host dragging the window around.
        assert self.moving
        self.position = (ANCHOR_TOPLEFT, x, y)

    def geometry(self) -> PanelLayout:
        anchor, x, y = self.position
        width, height = self.size
        return PanelLayout(width=width, height=height, anchor=anchor, x=x, y=y)


class FakeHost:
    def __init__(self) -> None:
        self.panel: Optional[FakePanel] = None
        self.created: List[tuple] = []
        self.subscribed: set = set()
        self.subscribe_calls: List[str] = []
        self.unsubscribe_calls: List[str] = []
        self.unsubscribe_all_calls = 0
        self.text_commands: Dict[str, Callable[[str], None]] = {}
        self.messages: List[str] = []

    def create_panel(self, kind, owner, template, callbacks: PanelCallbacks) -> FakePanel:
        self.created.append((kind, owner, template))
        self.panel = FakePanel(callbacks)
        return self.panel

    def subscribe(self, name: str) -> None:
        self.subscribe_calls.append(name)
        self.subscribed.add(name)

    def unsubscribe(self, name: str) -> None:
        self.unsubscribe_calls.append(name)
        self.subscribed.discard(name)

    def unsubscribe_all(self) -> None:
        self.unsubscribe_all_calls += 1
        self.subscribed.clear()

    def register_text_command(self, aliases: Sequence[str], interpreter: Callable[[str], None]) -> None:
        for alias in aliases:
            self.text_commands[alias] = interpreter

    def unregister_text_command(self, aliases: Sequence[str]) -> None:
        for alias in aliases:
            self.text_commands.pop(alias, None)

    def message(self, text: str) -> None:
        self.messages.append(text)


@pytest.fixture
def host() -> FakeHost:
    return FakeHost()


@pytest.fixture
def store(tmp_path) -> LayoutStore:
    return LayoutStore(tmp_path)


@pytest.fixture
def make_controller(host, store):
    def _make(**kwargs) -> WidgetController:
        kwargs.setdefault("identity", "Generic")
        return WidgetController(host, store, **kwargs)

    return _make


@pytest.fixture
def controller(make_controller) -> WidgetController:
    ctrl = make_controller()
    ctrl.start(owner="edmc-frame")
    return ctrl
