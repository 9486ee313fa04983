"""Capabilities the panel core needs from its host application.

The controller only talks to these protocols, so tests can drive it with plain
fakes and the EDMC/Tk specifics stay in :mod:`panel_plugin.edmc_host` and
:mod:`panel_plugin.tk_panel`.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol, Sequence

from .layout import PanelLayout


@dataclass
class PanelCallbacks:
    """Chrome signals the panel forwards to its owner."""

    pointer_down: Callable[[], None]
    pointer_up: Callable[[], None]
    close: Callable[[], None]


class WidgetHandle(Protocol):
    def set_position(self, anchor: str, x: int, y: int) -> None: ...
    def set_size(self, width: int, height: int) -> None: ...
    def show(self) -> None: ...
    def hide(self) -> None: ...
    def is_visible(self) -> bool: ...
    def bind_portrait(self, subject: str) -> None: ...
    def start_moving(self) -> None: ...
    def stop_moving(self) -> None: ...
    def geometry(self) -> PanelLayout: ...


class HostBinding(Protocol):
    def create_panel(self, kind: str, owner: Any, template: str, callbacks: PanelCallbacks) -> WidgetHandle: ...
    def subscribe(self, name: str) -> None: ...
    def unsubscribe(self, name: str) -> None: ...
    def unsubscribe_all(self) -> None: ...
    def register_text_command(self, aliases: Sequence[str], interpreter: Callable[[str], None]) -> None: ...
    def unregister_text_command(self, aliases: Sequence[str]) -> None: ...
    def message(self, text: str) -> None: ...
