"""HostBinding backed by EDMC's Tk main window and journal stream."""
from __future__ import annotations

import logging
from typing import Any, Callable, FrozenSet, Optional, Sequence, Set

from .commands import TextCommandRegistry
from .controller import PLAYER_SUBJECT
from .host import PanelCallbacks, WidgetHandle


_LOGGER = logging.getLogger("EDMC.GenericPanel")

PanelFactory = Callable[..., WidgetHandle]


def _build_tk_panel(owner: Any, **kwargs: Any) -> WidgetHandle:  # pragma: no cover - needs a Tk display
    from .tk_panel import TkPanel

    return TkPanel(owner, **kwargs)


class EDMCHost:
    """Adapts EDMC to the capabilities the panel controller expects.

    EDMC has no notion of subscriptions; the set kept here lets the plugin hooks
    ask whether a delivery is still wanted before translating it.
    """

    def __init__(
        self,
        *,
        title: str,
        tooltip_text: str = "",
        commander_fn: Optional[Callable[[], str]] = None,
        text_commands: Optional[TextCommandRegistry] = None,
        panel_factory: Optional[PanelFactory] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._title = title
        self._tooltip_text = tooltip_text
        self._commander_fn = commander_fn or (lambda: "")
        self.text_commands = text_commands or TextCommandRegistry()
        self._panel_factory = panel_factory or _build_tk_panel
        self._logger = logger or _LOGGER
        self._subscriptions: Set[str] = set()
        self._panel: Optional[WidgetHandle] = None
        self._status_label: Any = None

    # Panel ----------------------------------------------------------------

    def create_panel(self, kind: str, owner: Any, template: str, callbacks: PanelCallbacks) -> WidgetHandle:
        self._logger.debug("Creating %s panel from template %s", kind, template)
        panel = self._panel_factory(
            owner,
            title=self._title,
            tooltip_text=self._tooltip_text,
            portrait_fn=self.portrait_text,
            callbacks=callbacks,
        )
        self._panel = panel
        return panel

    def portrait_text(self, subject: str) -> str:
        if subject == PLAYER_SUBJECT:
            return self._commander_fn() or "Commander"
        return subject

    def set_tooltip(self, text: str) -> None:
        self._tooltip_text = text
        setter = getattr(self._panel, "set_tooltip", None)
        if callable(setter):
            setter(text)

    def attach_status_label(self, label: Any) -> None:
        self._status_label = label

    # Subscriptions --------------------------------------------------------

    @property
    def subscriptions(self) -> FrozenSet[str]:
        return frozenset(self._subscriptions)

    def is_subscribed(self, name: str) -> bool:
        return name in self._subscriptions

    def subscribe(self, name: str) -> None:
        self._subscriptions.add(name)

    def unsubscribe(self, name: str) -> None:
        self._subscriptions.discard(name)

    def unsubscribe_all(self) -> None:
        self._subscriptions.clear()

    # Text commands --------------------------------------------------------

    def register_text_command(self, aliases: Sequence[str], interpreter: Callable[[str], None]) -> None:
        self.text_commands.register(aliases, interpreter)

    def unregister_text_command(self, aliases: Sequence[str]) -> None:
        self.text_commands.unregister(aliases)

    # Output ---------------------------------------------------------------

    def message(self, text: str) -> None:
        self._logger.info(text)
        label = self._status_label
        if label is None:
            return
        try:
            label["text"] = text
        except Exception as exc:  # pragma: no cover - widget destroyed during shutdown
            self._logger.debug("Status label unavailable: %s", exc)
            self._status_label = None
