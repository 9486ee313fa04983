"""Text commands for the panel.

EDMC plugins never receive keyboard focus while Elite Dangerous is running, so
commands are typed into the in-game chat and arrive as ``SendText`` journal
entries. :class:`TextCommandRegistry` carves a few aliases (``!ge``,
``!generic``) out of that stream and hands the remainder of the message to the
registered callback, which for this plugin is :meth:`CommandInterpreter.execute`.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Callable, Dict, Iterable, Mapping, Optional, Protocol, Tuple


_LOGGER = logging.getLogger("EDMC.GenericPanel.Commands")

DEFAULT_ALIASES: Tuple[str, ...] = ("!ge", "!generic")


class Verb(str, Enum):
    SHOW = "show"
    HIDE = "hide"
    RESET = "reset"


class _CommandTarget(Protocol):
    def show(self) -> None: ...
    def hide(self) -> None: ...
    def reset(self) -> None: ...


def parse_verb(raw: object) -> Optional[Verb]:
    """Normalise ``raw`` to a :class:`Verb`; anything else yields ``None``."""

    if not isinstance(raw, str):
        return None
    try:
        return Verb(raw.strip().lower())
    except ValueError:
        return None


def normalise_aliases(aliases: Iterable[object]) -> Tuple[str, ...]:
    seen: Dict[str, None] = {}
    for alias in aliases:
        if not isinstance(alias, str):
            continue
        token = alias.strip().lower()
        if token and " " not in token:
            seen.setdefault(token, None)
    return tuple(seen)


class CommandInterpreter:
    """Closed, case-insensitive verb dispatch with a confirmation echo."""

    def __init__(self, target: _CommandTarget, echo: Callable[[str], None], *, label: str) -> None:
        self._target = target
        self._echo = echo
        self._label = label

    def execute(self, raw: str) -> Optional[Verb]:
        verb = parse_verb(raw)
        if verb is Verb.SHOW:
            self._target.show()
        elif verb is Verb.HIDE:
            self._target.hide()
        elif verb is Verb.RESET:
            self._target.reset()
        else:
            _LOGGER.debug("Unrecognised panel command %r", raw)
        self._echo(f"{self._label}: Processed ({raw}) command")
        return verb


class TextCommandRegistry:
    """Alias table for chat commands; the last registration of an alias wins."""

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self._commands: Dict[str, Callable[[str], None]] = {}
        self._logger = logger or _LOGGER

    @property
    def aliases(self) -> Tuple[str, ...]:
        return tuple(self._commands)

    def register(self, aliases: Iterable[str], callback: Callable[[str], None]) -> None:
        for alias in normalise_aliases(aliases):
            self._commands[alias] = callback
        self._logger.debug("Registered text command aliases: %s", ", ".join(self._commands))

    def unregister(self, aliases: Iterable[str]) -> None:
        for alias in normalise_aliases(aliases):
            self._commands.pop(alias, None)

    def clear(self) -> None:
        self._commands.clear()

    def handle_entry(self, entry: Mapping[str, object]) -> bool:
        """Attempt to process a ``SendText`` journal entry.

        Returns ``True`` when the message started with a registered alias.
        """

        if str(entry.get("event") or "").lower() != "sendtext":
            return False
        raw_message = entry.get("Message")
        if not isinstance(raw_message, str):
            return False
        message = raw_message.strip()
        if not message:
            return False
        parts = message.split(None, 1)
        callback = self._commands.get(parts[0].lower())
        if callback is None:
            return False
        raw = parts[1] if len(parts) > 1 else ""
        self._logger.debug("Handling text command %s", message)
        callback(raw)
        return True
