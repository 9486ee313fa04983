"""Primary entry point for the EDMC Generic Panel plugin."""
from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

if __package__:
    from .version import __version__ as GENERIC_PANEL_VERSION
    from .panel_plugin.controller import PLAYER_SUBJECT, WidgetController
    from .panel_plugin.edmc_host import EDMCHost
    from .panel_plugin.event_router import Notification
    from .panel_plugin.layout import LayoutStore
    from .panel_plugin.logging_utils import configure_diagnostic_logger, configure_logger
    from .panel_plugin.preferences import Preferences, PreferencesPanel
else:  # pragma: no cover - EDMC loads as top-level module
    from version import __version__ as GENERIC_PANEL_VERSION
    from panel_plugin.controller import PLAYER_SUBJECT, WidgetController
    from panel_plugin.edmc_host import EDMCHost
    from panel_plugin.event_router import Notification
    from panel_plugin.layout import LayoutStore
    from panel_plugin.logging_utils import configure_diagnostic_logger, configure_logger
    from panel_plugin.preferences import Preferences, PreferencesPanel

PLUGIN_NAME = "EDMC-GenericPanel"
PLUGIN_VERSION = GENERIC_PANEL_VERSION
LOGGER_NAME = "EDMC.GenericPanel"
LOG_TAG = "EDMC-GenericPanel"
DIAGNOSTIC_LOGGER_NAME = "EDMC.GenericPanel.Diagnostics"
DIAGNOSTIC_LOG_FILE = "generic_panel.log"


LOGGER = configure_logger(LOGGER_NAME, LOG_TAG)


def _log(message: str) -> None:
    """Log to EDMC via the Python logging facade."""
    LOGGER.info(message)


def _portrait_subject(entry: Mapping[str, Any]) -> Optional[str]:
    """Return whose portrait a journal entry may have changed, if anyone's."""

    event = entry.get("event")
    if event in {"Commander", "LoadGame"}:
        return PLAYER_SUBJECT
    if event == "ReceiveText":
        sender = entry.get("From")
        return sender if isinstance(sender, str) and sender else None
    if event == "Friends":
        friend = entry.get("Name")
        return friend if isinstance(friend, str) and friend else None
    return None


class _PluginRuntime:
    """Encapsulates plugin state so EDMC globals stay tidy."""

    LOGOUT_EVENTS = {"Shutdown"}

    def __init__(self, plugin_dir: str, preferences: Preferences) -> None:
        self.plugin_dir = Path(plugin_dir)
        self._preferences = preferences
        self._lock = threading.Lock()
        self._running = False
        self._cmdr = ""
        self.host = EDMCHost(
            title=PLUGIN_NAME,
            tooltip_text=preferences.tooltip_text,
            commander_fn=lambda: self._cmdr,
            logger=LOGGER,
        )
        self.controller = WidgetController(
            self.host,
            LayoutStore(self.plugin_dir),
            identity=PLUGIN_NAME,
            aliases=preferences.command_aliases,
            start_hidden=preferences.start_hidden,
            echo_commands=preferences.echo_commands,
            diagnostics=self._configure_diagnostics(),
        )

    # Lifecycle ------------------------------------------------------------

    def start(self) -> str:
        with self._lock:
            if self._running:
                return PLUGIN_NAME
            self._running = True
        _log(f"Plugin started (version {PLUGIN_VERSION})")
        return PLUGIN_NAME

    def stop(self) -> None:
        with self._lock:
            if not self._running:
                return
            self._running = False
        _log("Plugin stopping")
        if self.host.is_subscribed(Notification.LOGOUT.value):
            self.deliver(Notification.LOGOUT)
        self._close_diagnostics()

    def attach(self, parent: Any) -> None:
        """Build the panel inside EDMC's window, then announce that loading finished."""

        self.controller.start(parent)
        self.deliver(Notification.LOADED, PLUGIN_NAME)

    def deliver(self, name: object, *args: Any) -> bool:
        return self.controller.notify(name, *args)

    # Journal handling -----------------------------------------------------

    def handle_journal(self, cmdr: str, entry: Mapping[str, Any]) -> None:
        if not self._running:
            return
        self._update_commander(cmdr, entry)
        if self.host.text_commands.handle_entry(entry):
            return
        event = entry.get("event")
        if not event:
            return
        if event in self.LOGOUT_EVENTS:
            self.deliver(Notification.LOGOUT)
            return
        subject = _portrait_subject(entry)
        if subject is not None:
            self.deliver(Notification.PORTRAIT_UPDATE, subject)

    # Preferences ----------------------------------------------------------

    def on_preferences_updated(self) -> None:
        prefs = self._preferences
        LOGGER.debug(
            "Applying updated preferences: start_hidden=%s echo_commands=%s aliases=%s "
            "diagnostic_log=%s diagnostic_log_retention=%d",
            prefs.start_hidden,
            prefs.echo_commands,
            prefs.command_aliases,
            prefs.diagnostic_log,
            prefs.diagnostic_log_retention,
        )
        self.controller.set_aliases(prefs.command_aliases)
        self.controller.set_echo_commands(prefs.echo_commands)
        self.controller.set_diagnostics(self._configure_diagnostics())
        self.host.set_tooltip(prefs.tooltip_text)

    def reset_panel(self) -> None:
        if not self.controller.started:
            raise RuntimeError("Panel has not been created yet")
        self.controller.reset()

    # Helpers --------------------------------------------------------------

    def _update_commander(self, cmdr: str, entry: Mapping[str, Any]) -> None:
        event = entry.get("event")
        name: Any = None
        if event == "Commander":
            name = entry.get("Name")
        elif event == "LoadGame":
            name = entry.get("Commander")
        commander = name if isinstance(name, str) and name else cmdr
        if commander:
            self._cmdr = commander

    def _configure_diagnostics(self) -> Optional[logging.Logger]:
        return configure_diagnostic_logger(
            DIAGNOSTIC_LOGGER_NAME,
            self.plugin_dir / "logs",
            DIAGNOSTIC_LOG_FILE,
            enabled=self._preferences.diagnostic_log,
            retention=self._preferences.diagnostic_log_retention,
        )

    def _close_diagnostics(self) -> None:
        self.controller.set_diagnostics(None)
        configure_diagnostic_logger(
            DIAGNOSTIC_LOGGER_NAME,
            self.plugin_dir / "logs",
            DIAGNOSTIC_LOG_FILE,
            enabled=False,
            retention=1,
        )


def _build_status_label(parent: Any) -> Optional[Any]:  # pragma: no cover - EDMC Tk frame
    try:
        import tkinter as tk

        return tk.Label(parent, text=f"{PLUGIN_NAME} ready", anchor="w")
    except Exception as exc:
        LOGGER.debug("Status label unavailable: %s", exc)
        return None


# EDMC hook functions ------------------------------------------------------

_plugin: Optional[_PluginRuntime] = None
_preferences: Optional[Preferences] = None
_prefs_panel: Optional[PreferencesPanel] = None


def plugin_start3(plugin_dir: str) -> str:
    global _plugin, _preferences
    if _plugin is not None:
        return PLUGIN_NAME
    _log(f"Initialising Generic Panel plugin from {plugin_dir}")
    _preferences = Preferences(Path(plugin_dir))
    _plugin = _PluginRuntime(plugin_dir, _preferences)
    return _plugin.start()


def plugin_stop() -> None:
    global _prefs_panel, _plugin, _preferences
    if _plugin:
        try:
            _plugin.stop()
        except Exception as exc:
            LOGGER.exception("Failed to stop plugin cleanly: %s", exc)
        finally:
            _plugin = None
    _prefs_panel = None
    _preferences = None


def plugin_app(parent) -> Optional[Any]:
    if _plugin is None:
        LOGGER.debug("plugin_app invoked before plugin_start3; no panel created")
        return None
    label = _build_status_label(parent)
    if label is not None:
        _plugin.host.attach_status_label(label)
    try:
        _plugin.attach(parent)
    except Exception as exc:
        LOGGER.exception("Failed to build panel: %s", exc)
    return label


def plugin_prefs(parent, cmdr: str, is_beta: bool):  # pragma: no cover - optional settings pane
    LOGGER.debug("plugin_prefs invoked: parent=%r cmdr=%r is_beta=%s", parent, cmdr, is_beta)
    if _preferences is None:
        LOGGER.debug("Preferences not initialised; returning no UI")
        return None
    reset_callback = _plugin.reset_panel if _plugin else None
    try:
        panel = PreferencesPanel(parent, _preferences, reset_callback)
    except Exception as exc:
        LOGGER.exception("Failed to build preferences panel: %s", exc)
        return None
    global _prefs_panel
    _prefs_panel = panel
    return panel.frame


def plugin_prefs_save(cmdr: str, is_beta: bool) -> None:  # pragma: no cover - save hook
    LOGGER.debug("plugin_prefs_save invoked: cmdr=%r is_beta=%s", cmdr, is_beta)
    if _prefs_panel is None:
        LOGGER.debug("No preferences panel to save")
        return
    try:
        _prefs_panel.apply()
        if _plugin:
            _plugin.on_preferences_updated()
    except Exception as exc:
        LOGGER.exception("Failed to save preferences: %s", exc)


def journal_entry(
    cmdr: str,
    is_beta: bool,
    system: str,
    station: str,
    entry: Dict[str, Any],
    state: Dict[str, Any],
) -> None:
    if not _plugin:
        return
    try:
        _plugin.handle_journal(cmdr, entry)
    except Exception as exc:
        LOGGER.exception("Failed to handle journal entry %s: %s", entry.get("event"), exc)


# Metadata expected by some plugin loaders
name = PLUGIN_NAME
version = PLUGIN_VERSION
