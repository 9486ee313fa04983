"""Tk rendition of the panel: a frameless, draggable Toplevel owned by EDMC."""
from __future__ import annotations

import tkinter as tk
from typing import Callable, Optional, Tuple

from .host import PanelCallbacks
from .layout import ANCHOR_CENTER, ANCHOR_TOPLEFT, DEFAULT_HEIGHT, DEFAULT_WIDTH, PanelLayout


PARCHMENT = "#e9dcb8"
BORDER = "#6b4f2a"
TITLE_FG = "#3b2a12"
PORTRAIT_BG = "#c9b48a"
INSET = 20


class TkPanel:  # pragma: no cover - requires a Tk display
    """Presentation only; every state change goes through the callbacks."""

    def __init__(
        self,
        owner: tk.Misc,
        *,
        title: str,
        tooltip_text: str,
        portrait_fn: Callable[[str], str],
        callbacks: PanelCallbacks,
    ) -> None:
        self._callbacks = callbacks
        self._portrait_fn = portrait_fn
        self._tooltip_text = tooltip_text
        self._tooltip: Optional[tk.Toplevel] = None
        self._drag_offset: Optional[Tuple[int, int]] = None
        self._width = DEFAULT_WIDTH
        self._height = DEFAULT_HEIGHT

        window = tk.Toplevel(owner)
        window.withdraw()
        window.title(title)
        window.overrideredirect(True)
        window.configure(bg=PARCHMENT, highlightthickness=2, highlightbackground=BORDER)
        window.protocol("WM_DELETE_WINDOW", callbacks.close)
        self._window = window

        header = tk.Frame(window, bg=PARCHMENT)
        header.pack(fill="x", padx=4, pady=(4, 0))
        self._portrait = tk.Label(
            header,
            text="",
            width=6,
            height=3,
            bg=PORTRAIT_BG,
            fg=TITLE_FG,
            relief="ridge",
            font=("TkDefaultFont", 9, "bold"),
        )
        self._portrait.pack(side="left")
        # Centre the title over the whole panel, not just the space beside the portrait.
        self._title = tk.Label(window, text=title, bg=PARCHMENT, fg=TITLE_FG, font=("TkDefaultFont", 10, "bold"))
        self._title.place(relx=0.5, y=8, anchor="n")

        exit_button = tk.Button(window, text="×", width=2, command=callbacks.close, relief="flat", bg=PARCHMENT)
        exit_button.place(relx=1.0, x=-2, y=2, anchor="ne")
        close_button = tk.Button(window, text="Close", width=8, command=callbacks.close)
        close_button.pack(side="bottom", pady=(0, INSET))

        window.bind("<ButtonPress-1>", self._on_press, add="+")
        window.bind("<B1-Motion>", self._on_motion, add="+")
        window.bind("<ButtonRelease-1>", self._on_release, add="+")
        window.bind("<Enter>", self._show_tooltip, add="+")
        window.bind("<Leave>", self._hide_tooltip, add="+")

    # WidgetHandle ---------------------------------------------------------

    def set_position(self, anchor: str, x: int, y: int) -> None:
        if anchor == ANCHOR_CENTER:
            left = (self._window.winfo_screenwidth() - self._width) // 2 + int(x)
            top = (self._window.winfo_screenheight() - self._height) // 2 + int(y)
        elif anchor == ANCHOR_TOPLEFT:
            left, top = int(x), int(y)
        else:
            raise ValueError(f"Unsupported anchor {anchor!r}")
        self._window.geometry(f"+{left}+{top}")

    def set_size(self, width: int, height: int) -> None:
        self._width = max(1, int(width))
        self._height = max(1, int(height))
        self._window.geometry(f"{self._width}x{self._height}")

    def show(self) -> None:
        self._window.deiconify()
        self._window.lift()

    def hide(self) -> None:
        self._hide_tooltip()
        self._window.withdraw()

    def is_visible(self) -> bool:
        return self._window.state() != "withdrawn"

    def bind_portrait(self, subject: str) -> None:
        self._portrait.configure(text=self._portrait_fn(subject))

    def start_moving(self) -> None:
        pointer_x, pointer_y = self._window.winfo_pointerxy()
        self._drag_offset = (
            pointer_x - self._window.winfo_rootx(),
            pointer_y - self._window.winfo_rooty(),
        )

    def stop_moving(self) -> None:
        self._drag_offset = None

    def geometry(self) -> PanelLayout:
        self._window.update_idletasks()
        return PanelLayout(
            width=self._width,
            height=self._height,
            anchor=ANCHOR_TOPLEFT,
            x=self._window.winfo_x(),
            y=self._window.winfo_y(),
        )

    def set_tooltip(self, text: str) -> None:
        self._tooltip_text = text

    # Tk events ------------------------------------------------------------

    def _on_press(self, event: tk.Event) -> None:
        if isinstance(event.widget, tk.Button):
            return
        self._hide_tooltip()
        self._callbacks.pointer_down()

    def _on_motion(self, event: tk.Event) -> None:
        if self._drag_offset is None:
            return
        x = int(event.x_root - self._drag_offset[0])
        y = int(event.y_root - self._drag_offset[1])
        self._window.geometry(f"+{x}+{y}")

    def _on_release(self, event: tk.Event) -> None:
        if isinstance(event.widget, tk.Button):
            return
        self._callbacks.pointer_up()

    def _show_tooltip(self, event: tk.Event) -> None:
        if event.widget is not self._window or self._tooltip is not None or not self._tooltip_text:
            return
        tip = tk.Toplevel(self._window)
        tip.overrideredirect(True)
        tip.geometry(f"+{event.x_root + 12}+{event.y_root + 12}")
        tk.Label(tip, text=self._tooltip_text, justify="left", bg="#1f1f1f", fg="#ffffff", padx=6, pady=4).pack()
        self._tooltip = tip

    def _hide_tooltip(self, _event: Optional[tk.Event] = None) -> None:
        if self._tooltip is None:
            return
        self._tooltip.destroy()
        self._tooltip = None
