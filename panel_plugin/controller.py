"""State owner for the panel: visibility, drag tracking, layout and portrait.

The controller is the only component that touches the widget handle or the
layout store. The event router and the command interpreter both call back into
it rather than holding widget state of their own.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, Optional, Tuple

from .commands import DEFAULT_ALIASES, CommandInterpreter, normalise_aliases
from .event_router import EventRouter, Notification
from .host import HostBinding, PanelCallbacks, WidgetHandle
from .layout import LayoutStore, PanelLayout


_LOGGER = logging.getLogger("EDMC.GenericPanel.Controller")

PANEL_KIND = "Frame"
PANEL_TEMPLATE = "PortraitFrame"
PLAYER_SUBJECT = "player"


# Notification handlers ----------------------------------------------------


def on_loaded(controller: "WidgetController", name: Optional[str] = None, *_args: Any) -> None:
    # The host announces every plugin's load on the same notification.
    if name != controller.identity:
        return
    controller.log_diagnostics()
    controller.router.unsubscribe(Notification.LOADED)
    controller.announce(f"{controller.identity}: Addon has loaded.")


def on_portrait_update(controller: "WidgetController", subject: Optional[str] = None, *_args: Any) -> None:
    if subject != PLAYER_SUBJECT:
        return
    controller.refresh_portrait(subject)


def on_logout(controller: "WidgetController", *_args: Any) -> None:
    controller.router.unsubscribe_all()
    controller.announce(f"{controller.identity}: Time for a break ...")


class WidgetController:
    """Two independent axes of state: visible/hidden and fixed/dragging."""

    def __init__(
        self,
        host: HostBinding,
        store: LayoutStore,
        *,
        identity: str,
        aliases: Iterable[str] = DEFAULT_ALIASES,
        start_hidden: bool = False,
        echo_commands: bool = True,
        diagnostics: Optional[logging.Logger] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._host = host
        self._store = store
        self._identity = identity
        self._aliases: Tuple[str, ...] = normalise_aliases(aliases) or DEFAULT_ALIASES
        self._start_hidden = bool(start_hidden)
        self._echo_commands = bool(echo_commands)
        self._diagnostics = diagnostics
        self._logger = logger or _LOGGER
        self._handle: Optional[WidgetHandle] = None
        self._visible = False
        self._dragging = False
        self._layout = PanelLayout()
        self._portrait_subject: Optional[str] = None
        self.router = EventRouter(host, self)
        self.router.register(Notification.LOADED, on_loaded)
        self.router.register(Notification.PORTRAIT_UPDATE, on_portrait_update)
        self.router.register(Notification.LOGOUT, on_logout)
        self.interpreter = CommandInterpreter(self, self._echo, label=identity)

    # State ----------------------------------------------------------------

    @property
    def identity(self) -> str:
        return self._identity

    @property
    def started(self) -> bool:
        return self._handle is not None

    @property
    def visible(self) -> bool:
        return self._visible

    @property
    def dragging(self) -> bool:
        return self._dragging

    @property
    def layout(self) -> PanelLayout:
        return self._layout

    @property
    def portrait_subject(self) -> Optional[str]:
        return self._portrait_subject

    @property
    def aliases(self) -> Tuple[str, ...]:
        return self._aliases

    def describe(self) -> Dict[str, Any]:
        return {
            "identity": self._identity,
            "started": self.started,
            "visible": self._visible,
            "dragging": self._dragging,
            "layout": self._layout.to_dict(),
            "portrait_subject": self._portrait_subject,
            "subscriptions": sorted(item.value for item in self.router.subscriptions),
            "aliases": list(self._aliases),
            "layout_file": str(self._store.path),
        }

    # Lifecycle ------------------------------------------------------------

    def start(self, owner: Any) -> WidgetHandle:
        """Build the panel, restore its layout and wire up notifications and commands."""

        if self._handle is not None:
            return self._handle
        callbacks = PanelCallbacks(pointer_down=self.pointer_down, pointer_up=self.pointer_up, close=self.close)
        handle = self._host.create_panel(PANEL_KIND, owner, PANEL_TEMPLATE, callbacks)
        self._handle = handle
        persisted = self._store.load()
        if persisted is None:
            self._logger.debug("No persisted layout; using defaults")
        self._apply_layout(persisted or PanelLayout())
        self.refresh_portrait(PLAYER_SUBJECT)
        if self._start_hidden:
            handle.hide()
            self._visible = False
        else:
            handle.show()
            self._visible = True
        self._host.register_text_command(self._aliases, self.interpreter.execute)
        self.router.subscribe_all()
        self._logger.debug(
            "Panel started: visible=%s layout=%s aliases=%s",
            self._visible,
            self._layout,
            ", ".join(self._aliases),
        )
        return handle

    def notify(self, name: object, *args: Any) -> bool:
        return self.router.dispatch(name, *args)

    def set_aliases(self, aliases: Iterable[str]) -> None:
        resolved = normalise_aliases(aliases) or DEFAULT_ALIASES
        if resolved == self._aliases:
            return
        if self._handle is not None:
            self._host.unregister_text_command(self._aliases)
            self._host.register_text_command(resolved, self.interpreter.execute)
        self._aliases = resolved

    def set_echo_commands(self, enabled: bool) -> None:
        self._echo_commands = bool(enabled)

    def set_diagnostics(self, diagnostics: Optional[logging.Logger]) -> None:
        self._diagnostics = diagnostics

    # Visibility -----------------------------------------------------------

    def show(self) -> None:
        if self._handle is None:
            return
        self._handle.show()
        self._visible = True

    def hide(self) -> None:
        if self._handle is None:
            return
        self._handle.hide()
        self._visible = False

    def close(self) -> None:
        """Chrome close control."""

        self.hide()

    def reset(self) -> None:
        """Default size and centred position, persisted, and visible."""

        if self._handle is None:
            return
        layout = PanelLayout()
        self._apply_layout(layout)
        self._commit_layout(layout)
        self.show()

    # Dragging -------------------------------------------------------------

    def pointer_down(self) -> None:
        if self._handle is None or self._dragging or not self._visible:
            return
        self._dragging = True
        self._handle.start_moving()

    def pointer_up(self) -> None:
        if self._handle is None or not self._dragging:
            return
        self._handle.stop_moving()
        self._dragging = False
        self._commit_layout(self._handle.geometry())

    # Portrait -------------------------------------------------------------

    def refresh_portrait(self, subject: str) -> None:
        if self._handle is None:
            return
        self._handle.bind_portrait(subject)
        self._portrait_subject = subject

    # Output ---------------------------------------------------------------

    def announce(self, text: str) -> None:
        self._host.message(text)

    def log_diagnostics(self) -> None:
        snapshot = self.describe()
        self._logger.debug("Panel snapshot: %s", snapshot)
        if self._diagnostics is not None:
            self._diagnostics.info("Panel snapshot: %s", snapshot)

    # Helpers --------------------------------------------------------------

    def _apply_layout(self, layout: PanelLayout) -> None:
        assert self._handle is not None
        self._handle.set_size(layout.width, layout.height)
        self._handle.set_position(layout.anchor, layout.x, layout.y)
        self._layout = layout

    def _commit_layout(self, layout: PanelLayout) -> None:
        self._layout = layout
        if self._store.save(layout):
            self._logger.debug("Persisted panel layout %s", layout)

    def _echo(self, text: str) -> None:
        if self._echo_commands:
            self._host.message(text)
        else:
            self._logger.debug(text)
