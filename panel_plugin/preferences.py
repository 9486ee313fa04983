"""Preferences management and Tk settings tab for the Generic Panel plugin."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .commands import DEFAULT_ALIASES, normalise_aliases


PREFERENCES_FILE = "panel_settings.json"
DEFAULT_TOOLTIP = "EDMC-GenericPanel:\nWhat a lovely tooltip!"
DIAGNOSTIC_RETENTION_DEFAULT = 3
DIAGNOSTIC_RETENTION_MAX = 20


@dataclass
class Preferences:
    """Simple JSON-backed preferences store."""

    plugin_dir: Path
    start_hidden: bool = False
    echo_commands: bool = True
    command_aliases: List[str] = field(default_factory=lambda: list(DEFAULT_ALIASES))
    tooltip_text: str = DEFAULT_TOOLTIP
    diagnostic_log: bool = False
    diagnostic_log_retention: int = DIAGNOSTIC_RETENTION_DEFAULT

    def __post_init__(self) -> None:
        self.plugin_dir = Path(self.plugin_dir)
        self._path = self.plugin_dir / PREFERENCES_FILE
        self._load()

    # Persistence ---------------------------------------------------------

    def _load(self) -> None:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return
        except json.JSONDecodeError:
            return
        if not isinstance(data, dict):
            return
        self.start_hidden = bool(data.get("start_hidden", False))
        self.echo_commands = bool(data.get("echo_commands", True))
        raw_aliases = data.get("command_aliases")
        if isinstance(raw_aliases, str):
            raw_aliases = raw_aliases.split(",")
        aliases = normalise_aliases(raw_aliases) if isinstance(raw_aliases, list) else ()
        self.command_aliases = list(aliases or DEFAULT_ALIASES)
        tooltip = data.get("tooltip_text")
        self.tooltip_text = tooltip if isinstance(tooltip, str) else DEFAULT_TOOLTIP
        self.diagnostic_log = bool(data.get("diagnostic_log", False))
        try:
            retention = int(data.get("diagnostic_log_retention", DIAGNOSTIC_RETENTION_DEFAULT))
        except (TypeError, ValueError):
            retention = DIAGNOSTIC_RETENTION_DEFAULT
        self.diagnostic_log_retention = max(1, min(retention, DIAGNOSTIC_RETENTION_MAX))

    def save(self) -> None:
        payload: Dict[str, Any] = {
            "start_hidden": bool(self.start_hidden),
            "echo_commands": bool(self.echo_commands),
            "command_aliases": list(normalise_aliases(self.command_aliases) or DEFAULT_ALIASES),
            "tooltip_text": str(self.tooltip_text),
            "diagnostic_log": bool(self.diagnostic_log),
            "diagnostic_log_retention": int(self.diagnostic_log_retention),
        }
        self._path.write_text(json.dumps(payload, indent=2), encoding="utf-8")


class PreferencesPanel:
    """Builds a Tkinter frame that edits Generic Panel preferences."""

    def __init__(
        self,
        parent,
        preferences: Preferences,
        reset_panel_callback: Optional[Callable[[], None]] = None,
    ) -> None:  # pragma: no cover - requires EDMC's myNotebook and a Tk display
        import tkinter as tk
        from tkinter import ttk
        import myNotebook as nb

        self._preferences = preferences
        self._reset_panel = reset_panel_callback
        self._var_start_hidden = tk.BooleanVar(value=preferences.start_hidden)
        self._var_echo = tk.BooleanVar(value=preferences.echo_commands)
        self._var_aliases = tk.StringVar(value=", ".join(preferences.command_aliases))
        self._var_tooltip = tk.StringVar(value=preferences.tooltip_text.replace("\n", "\\n"))
        self._var_diagnostic = tk.BooleanVar(value=preferences.diagnostic_log)
        self._var_retention = tk.IntVar(value=preferences.diagnostic_log_retention)
        self._status_var = tk.StringVar(value="")

        frame = nb.Frame(parent)
        frame.columnconfigure(1, weight=1)
        row = 0

        nb.Checkbutton(
            frame,
            text="Start with the panel hidden",
            variable=self._var_start_hidden,
            onvalue=True,
            offvalue=False,
        ).grid(row=row, column=0, columnspan=2, sticky="w")
        row += 1

        nb.Checkbutton(
            frame,
            text="Confirm chat commands in the EDMC status line",
            variable=self._var_echo,
            onvalue=True,
            offvalue=False,
        ).grid(row=row, column=0, columnspan=2, sticky="w", pady=(4, 0))
        row += 1

        nb.Label(frame, text="Chat command aliases:").grid(row=row, column=0, sticky="w", pady=(8, 0))
        nb.Entry(frame, textvariable=self._var_aliases, width=30).grid(row=row, column=1, sticky="we", pady=(8, 0))
        row += 1

        nb.Label(frame, text="Tooltip text:").grid(row=row, column=0, sticky="w", pady=(4, 0))
        nb.Entry(frame, textvariable=self._var_tooltip, width=40).grid(row=row, column=1, sticky="we", pady=(4, 0))
        row += 1

        diagnostic_row = ttk.Frame(frame)
        nb.Checkbutton(
            diagnostic_row,
            text="Write diagnostic log (logs/generic_panel.log)",
            variable=self._var_diagnostic,
            onvalue=True,
            offvalue=False,
        ).pack(side="left")
        nb.Label(diagnostic_row, text="Files kept:").pack(side="left", padx=(12, 4))
        ttk.Spinbox(
            diagnostic_row,
            from_=1,
            to=DIAGNOSTIC_RETENTION_MAX,
            increment=1,
            width=4,
            textvariable=self._var_retention,
        ).pack(side="left")
        diagnostic_row.grid(row=row, column=0, columnspan=2, sticky="w", pady=(8, 0))
        row += 1

        nb.Button(frame, text="Reset panel position", command=self._on_reset_panel).grid(
            row=row, column=0, sticky="w", pady=(12, 0)
        )
        nb.Label(frame, textvariable=self._status_var).grid(row=row, column=1, sticky="w", pady=(12, 0))

        self.frame = frame

    def apply(self) -> None:
        prefs = self._preferences
        prefs.start_hidden = bool(self._var_start_hidden.get())
        prefs.echo_commands = bool(self._var_echo.get())
        prefs.command_aliases = list(normalise_aliases(self._var_aliases.get().split(",")) or DEFAULT_ALIASES)
        prefs.tooltip_text = self._var_tooltip.get().replace("\\n", "\n")
        prefs.diagnostic_log = bool(self._var_diagnostic.get())
        try:
            retention = int(self._var_retention.get())
        except (TypeError, ValueError):
            retention = DIAGNOSTIC_RETENTION_DEFAULT
        prefs.diagnostic_log_retention = max(1, min(retention, DIAGNOSTIC_RETENTION_MAX))
        prefs.save()

    def _on_reset_panel(self) -> None:
        if self._reset_panel is None:
            self._status_var.set("Panel is not running.")
            return
        try:
            self._reset_panel()
        except Exception as exc:
            self._status_var.set(f"Failed to reset panel: {exc}")
            return
        self._status_var.set("Panel reset to default size and position.")
