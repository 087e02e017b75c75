from __future__ import annotations

import logging
import queue
import threading
import tkinter as tk
from tkinter import ttk, filedialog, messagebox
from typing import Optional

from .config import ChartSettings
from .data_model import Dataset, LoadError
from .interaction import HoverController
from .loader import fetch_text, parse_text
from .renderer import ChartRenderer
from .scales import SurfaceSize, build_scales
from .surface import TkSurface

logger = logging.getLogger(__name__)

MIN_SIZE = 80


class ChartWindow(tk.Tk):
    def __init__(self, settings: ChartSettings):
        super().__init__()
        self.title("Multi-Line Chart")
        self.geometry("1000x700")
        self.resizable(True, True)

        self.settings = settings
        self.dataset: Optional[Dataset] = None
        self.hover: Optional[HoverController] = None

        self.status_var = tk.StringVar(value="")
        self._render_after_id: Optional[str] = None
        self._load_queue: "queue.Queue[tuple[str, object]]" = queue.Queue()
        self._loading = False

        self._build_ui()
        self.renderer = ChartRenderer(TkSurface(self.canvas))
        self.reload()

    # ---------- UI ----------
    def _build_ui(self):
        root = ttk.Frame(self, padding=8)
        root.pack(fill="both", expand=True)

        ttk.Label(root, text="Multi-Line Chart", font=("Helvetica", 16, "bold")).pack(side="top")
        ttk.Label(root, text=self.settings.source, foreground="#666").pack(side="top", pady=(0, 6))

        bar = ttk.Frame(root)
        bar.pack(side="bottom", fill="x", pady=(6, 0))
        ttk.Label(bar, textvariable=self.status_var).pack(side="left")
        ttk.Button(bar, text="Export PNG...", command=self.export_png).pack(side="right")
        ttk.Button(bar, text="Reload", command=self.reload).pack(side="right", padx=(0, 8))

        # viewport: the canvas takes a fixed fraction of this area
        self._area = ttk.Frame(root)
        self._area.pack(side="top", fill="both", expand=True)
        self.canvas = tk.Canvas(self._area, background="white", highlightthickness=0)
        self.canvas.place(relx=0.5, rely=0.5, anchor="center")
        self._area.bind("<Configure>", self._on_area_configure)

    def set_status(self, msg: str) -> None:
        self.status_var.set(msg)

    # ---------- viewport ----------
    def _on_area_configure(self, _evt=None):
        # Avoid thrashing when resizing: schedule a single re-render
        if self._render_after_id is not None:
            self.after_cancel(self._render_after_id)
        self._render_after_id = self.after(30, self.redraw)

    def surface_size(self) -> SurfaceSize:
        f = self.settings.viewport_fraction
        w = max(MIN_SIZE, int(self._area.winfo_width() * f))
        h = max(MIN_SIZE, int(self._area.winfo_height() * f))
        return SurfaceSize(width=w, height=h, margins=self.settings.margins())

    def redraw(self) -> None:
        self._render_after_id = None
        size = self.surface_size()
        if self.dataset is None:
            self.renderer.surface.clear()
            self.renderer.surface.resize(size.width, size.height)
            self.hover = None
            return
        scales = build_scales(self.dataset, size)
        self.renderer.draw(self.dataset, scales, size)
        self.hover = HoverController(self.dataset, scales, self.renderer)
        self.hover.bind(self.canvas)

    # ---------- loading ----------
    def reload(self) -> None:
        if self._loading:
            return
        self._loading = True
        source = self.settings.source
        self.set_status(f"Loading {source}...")
        threading.Thread(target=self._fetch_worker, args=(source,), daemon=True).start()
        self.after(50, self._poll_load)

    def _fetch_worker(self, source: str) -> None:
        s = self.settings
        try:
            text = fetch_text(source, retries=s.retries, backoff=s.backoff, timeout=s.timeout)
        except Exception as e:
            # the poller must always get a result, or the window stays "Loading"
            logger.exception("fetch worker failed")
            self._load_queue.put(("error", e))
            return
        self._load_queue.put(("ok", text))

    def _poll_load(self) -> None:
        try:
            kind, payload = self._load_queue.get_nowait()
        except queue.Empty:
            self.after(50, self._poll_load)
            return
        self._loading = False

        if kind == "ok":
            try:
                dataset = parse_text(str(payload), self.settings.source, self.settings)
            except (ValueError, LoadError) as e:
                self._show_load_error(e)
                return
            self.dataset = dataset
            self.set_status(f"{len(dataset.series)} series, {len(dataset)} dates")
            self.redraw()
        else:
            self._show_load_error(payload)

    def _show_load_error(self, err) -> None:
        logger.error("load failed: %s", err)
        self.set_status("Load failed. Press Reload to retry.")
        messagebox.showerror("Load failed", str(err))
        self.redraw()

    # ---------- export ----------
    def export_png(self) -> None:
        if self.dataset is None:
            messagebox.showinfo("Export PNG", "Nothing to export.")
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".png",
            filetypes=[("PNG images", "*.png"), ("All files", "*.*")],
            title="Export chart as PNG",
        )
        if not path:
            return
        try:
            self.renderer.export_png(path)
            self.set_status(f"Saved: {path}")
        except Exception as e:
            logger.exception("export failed")
            messagebox.showerror("Export failed", str(e))
