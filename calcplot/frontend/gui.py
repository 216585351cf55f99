#!/usr/bin/env python3
"""
Calculator GUI

Tkinter front end for the keypad calculator and the f(x) plotter.

- Keypad buttons and the keyboard both go through InputDispatcher.
- The plot is a pixel-exact matplotlib Figure embedded with FigureCanvasTkAgg.
- A "Dark" checkbox switches the theme; the choice is stored in the
  settings file and the plot is redrawn in the new colours.
"""

import logging
import os
import tkinter as tk
from tkinter import filedialog, messagebox
from typing import Dict, Optional

import matplotlib
matplotlib.use("TkAgg")  # use TkAgg backend for embedding in Tkinter windows
from matplotlib.backends.backend_tkagg import FigureCanvasTkAgg

from calcplot.backend.calculator import Calculator
from calcplot.backend.engine import CalculatorEngine
from calcplot.backend.settings import SettingsStore
from calcplot.backend.theme import DARK, LIGHT, ThemeManager
from calcplot.frontend.dispatcher import InputDispatcher, key_from_tk
from calcplot.frontend.formatter import format_display
from calcplot.frontend.plotter import GraphPlotter

logger = logging.getLogger(__name__)

LOG_LEVEL_ENV = "CALCPLOT_LOG_LEVEL"

# -------------------------
# Layout constants
# -------------------------
WINDOW_WIDTH = 440
WINDOW_HEIGHT = 860

TITLE_FONT = ("Segoe UI", 13, "bold")
PREVIOUS_FONT = ("Consolas", 12)
DISPLAY_FONT = ("Consolas", 22)
BUTTON_FONT = ("Segoe UI", 12)

# label -> button kind; "" leaves an empty cell
KEYPAD = [
    [("sin", "operation"), ("cos", "operation"), ("tan", "operation"),
     ("log", "operation"), ("ln", "operation"), ("√", "operation")],
    [("(", "number"), (")", "number"), ("^", "operation"),
     ("π", "constant"), ("e", "constant"), ("AC", "clear")],
    [("7", "number"), ("8", "number"), ("9", "number"),
     ("÷", "operation"), ("DEL", "delete"), ("", "")],
    [("4", "number"), ("5", "number"), ("6", "number"),
     ("×", "operation"), ("±", "negate"), ("", "")],
    [("1", "number"), ("2", "number"), ("3", "number"),
     ("-", "operation"), ("", ""), ("", "")],
    [("0", "number"), (".", "number"), ("=", "equals"),
     ("+", "operation"), ("", ""), ("", "")],
]


class CalculatorGUI(tk.Tk):
    def __init__(self, store: Optional[SettingsStore] = None):
        super().__init__()

        self.title("Calculator")
        self.geometry(f"{WINDOW_WIDTH}x{WINDOW_HEIGHT}")
        self.minsize(400, 760)

        # Backend objects
        self.engine = CalculatorEngine()
        self.calculator = Calculator(self.engine)
        self.dispatcher = InputDispatcher(self.calculator, refresh=self.update_display)
        self.theme = ThemeManager(store or SettingsStore())
        self.plotter = GraphPlotter(self.engine, self.theme)

        self.dark_var = tk.BooleanVar(value=False)

        self._build_header()
        self._build_display()
        self._build_keypad()
        self._build_graph()

        self.theme.subscribe(self._on_theme_applied)
        self.plotter.follow_theme(on_redraw=self.canvas.draw)
        self.theme.load()
        self.update_display()

        # Keyboard input goes to the calculator unless the formula entry is focused
        self.bind("<Key>", self._on_key, add="+")

    # -------------------------
    # Layout
    # -------------------------
    def _build_header(self):
        header = tk.Frame(self, height=48)
        header.pack(fill="x", side="top")
        tk.Label(header, text="Scientific", font=TITLE_FONT).pack(side="left", padx=10, pady=6)
        tk.Frame(header).pack(side="left", expand=True)
        self.theme_toggle = tk.Checkbutton(header, text="Dark", variable=self.dark_var,
                                           command=self._on_theme_toggle)
        self.theme_toggle.pack(side="right", padx=10, pady=6)

    def _build_display(self):
        disp = tk.Frame(self)
        disp.pack(fill="x", padx=8)
        self.previous_var = tk.StringVar()
        self.current_var = tk.StringVar()
        tk.Label(disp, textvariable=self.previous_var, anchor="e",
                 font=PREVIOUS_FONT).pack(fill="x", padx=6, pady=(6, 0))
        tk.Label(disp, textvariable=self.current_var, anchor="e",
                 font=DISPLAY_FONT).pack(fill="x", padx=6, pady=(0, 6))

    def _build_keypad(self):
        """Uniform grid of keypad tiles; each label is mapped to a dispatcher call."""
        tiles = tk.Frame(self)
        tiles.pack(fill="both", expand=True, padx=8, pady=(0, 6))
        for r, row in enumerate(KEYPAD):
            for c, (label, kind) in enumerate(row):
                if not label:
                    tk.Frame(tiles).grid(row=r, column=c, sticky="nsew", padx=3, pady=3)
                else:
                    btn = tk.Button(tiles, text=label, relief="flat", font=BUTTON_FONT,
                                    command=self._map_button(label, kind))
                    btn.grid(row=r, column=c, sticky="nsew", padx=3, pady=3)
                tiles.grid_columnconfigure(c, weight=1)
            tiles.grid_rowconfigure(r, weight=1)

    def _map_button(self, label: str, kind: str):
        d = self.dispatcher
        if kind == "number":
            return lambda: d.press_number(label)
        if kind == "constant":
            return lambda: d.press_constant(label)
        if kind == "operation":
            return lambda: d.press_operation(label)
        handlers = {
            "negate": d.press_negate,
            "equals": d.press_equals,
            "delete": d.press_delete,
            "clear": d.press_clear,
        }
        return handlers[kind]

    def _build_graph(self):
        top = tk.Frame(self)
        top.pack(fill="x", padx=8, pady=(6, 4))
        tk.Label(top, text="f(x) =").grid(row=0, column=0, sticky="w")
        self.fx_var = tk.StringVar(value="")
        self.fx_entry = tk.Entry(top, textvariable=self.fx_var, relief="flat")
        self.fx_entry.grid(row=0, column=1, sticky="ew", padx=6, ipady=4)
        self.fx_entry.bind("<Return>", lambda e: self._plot())
        top.columnconfigure(1, weight=1)
        tk.Button(top, text="Plot", relief="flat", command=self._plot).grid(row=0, column=2, padx=4)
        tk.Button(top, text="Export", relief="flat", command=self._export_png).grid(row=0, column=3, padx=4)

        canvas_frame = tk.Frame(self)
        canvas_frame.pack(padx=8, pady=(0, 8))
        self.canvas = FigureCanvasTkAgg(self.plotter.fig, master=canvas_frame)
        self.canvas.get_tk_widget().config(width=self.plotter.width, height=self.plotter.height)
        self.canvas.get_tk_widget().pack()

    # -------------------------
    # Display / input
    # -------------------------
    def update_display(self):
        self.current_var.set(format_display(self.calculator.current))
        self.previous_var.set(self.calculator.previous)

    def _on_key(self, event):
        key = key_from_tk(event.keysym, event.char)
        if self.dispatcher.handle_key(key, editing_formula=self.focus_get() is self.fx_entry):
            return "break"
        return None

    # -------------------------
    # Graph actions
    # -------------------------
    def _plot(self):
        self.plotter.draw(self.fx_var.get())
        self.canvas.draw()

    def _export_png(self):
        """Save the plot canvas to a PNG image via a file dialog."""
        path = filedialog.asksaveasfilename(defaultextension=".png",
                                            filetypes=[("PNG", "*.png")],
                                            initialfile="plot.png")
        if not path:
            return
        try:
            self.plotter.export_png(path)
            messagebox.showinfo("Export", f"Saved plot to {path}")
        except (OSError, ValueError) as e:
            logger.error("Export to %s failed: %s", path, e)
            messagebox.showerror("Export error", str(e))

    # -------------------------
    # Theme
    # -------------------------
    def _on_theme_toggle(self):
        self.theme.change(DARK if self.dark_var.get() else LIGHT)

    def _on_theme_applied(self, theme: str):
        self.dark_var.set(theme == DARK)
        self._restyle(self, self.theme.colors)

    def _restyle(self, widget, colors: Dict[str, str]):
        """Recolour widget and all its descendants for the active palette."""
        if isinstance(widget, tk.Tk):
            widget.configure(bg=colors["window"])
        elif isinstance(widget, tk.Button):
            widget.configure(bg=colors["button"], fg=colors["text"],
                             activebackground=colors["panel"], activeforeground=colors["text"])
        elif isinstance(widget, tk.Checkbutton):
            widget.configure(bg=colors["panel"], fg=colors["text"], selectcolor=colors["button"],
                             activebackground=colors["panel"], activeforeground=colors["text"])
        elif isinstance(widget, tk.Entry):
            widget.configure(bg=colors["background"], fg=colors["text"], insertbackground=colors["text"])
        elif isinstance(widget, tk.Label):
            widget.configure(bg=colors["panel"], fg=colors["text"])
        elif isinstance(widget, tk.Frame):
            widget.configure(bg=colors["panel"])
        for child in widget.winfo_children():
            self._restyle(child, colors)


def setup_logging():
    level = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(level=getattr(logging, level, logging.INFO),
                        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s")


# -------------------------
# Run the application
# -------------------------
def main():
    setup_logging()
    app = CalculatorGUI()
    app.mainloop()


if __name__ == "__main__":
    main()
