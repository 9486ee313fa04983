"""Panel size/position and its JSON-backed persistence."""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional


LAYOUT_FILE = "panel_layout.json"
DEFAULT_WIDTH = 250
DEFAULT_HEIGHT = 400
ANCHOR_CENTER = "CENTER"
ANCHOR_TOPLEFT = "TOPLEFT"
ANCHORS = frozenset({ANCHOR_CENTER, ANCHOR_TOPLEFT})

_LOGGER = logging.getLogger("EDMC.GenericPanel.Layout")


@dataclass(frozen=True)
class PanelLayout:
    """Size plus anchored position; ``CENTER`` offsets are relative to the screen centre."""

    width: int = DEFAULT_WIDTH
    height: int = DEFAULT_HEIGHT
    anchor: str = ANCHOR_CENTER
    x: int = 0
    y: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": int(self.width),
            "height": int(self.height),
            "position": {"anchor": self.anchor, "x": int(self.x), "y": int(self.y)},
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> Optional["PanelLayout"]:
        if not isinstance(data, Mapping):
            return None
        position = data.get("position")
        if not isinstance(position, Mapping):
            return None
        try:
            width = int(data["width"])
            height = int(data["height"])
            x = int(position.get("x", 0))
            y = int(position.get("y", 0))
        except (KeyError, TypeError, ValueError):
            return None
        anchor = str(position.get("anchor") or "").strip().upper()
        if width <= 0 or height <= 0 or anchor not in ANCHORS:
            return None
        return cls(width=width, height=height, anchor=anchor, x=x, y=y)


class LayoutStore:
    """Persisted layout keyed to the plugin directory.

    Read once when the panel is built; written whenever the controller commits a
    new position or size.
    """

    def __init__(self, plugin_dir: Path, logger: Optional[logging.Logger] = None) -> None:
        self._path = Path(plugin_dir) / LAYOUT_FILE
        self._logger = logger or _LOGGER

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> Optional[PanelLayout]:
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            self._logger.debug("Ignoring unreadable layout file %s: %s", self._path, exc)
            return None
        layout = PanelLayout.from_mapping(data)
        if layout is None:
            self._logger.debug("Ignoring invalid layout data in %s", self._path)
        return layout

    def save(self, layout: PanelLayout) -> bool:
        try:
            self._path.write_text(json.dumps(layout.to_dict(), indent=2), encoding="utf-8")
        except OSError as exc:
            self._logger.warning("Failed to save panel layout to %s: %s", self._path, exc)
            return False
        return True
