from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Sequence, Tuple, Union

from PIL import Image, ImageChops, ImageDraw, ImageFont

Point = Tuple[float, float]
TagOrId = Union[str, int]


@dataclass
class Item:
    id: int
    kind: str  # 'line' | 'text' | 'circle'
    coords: Tuple[float, ...]
    tags: Tuple[str, ...] = ()
    style: Dict[str, Any] = field(default_factory=dict)
    text: str = ""
    # translation applied by place()
    offset: Point = (0.0, 0.0)

    def matches(self, tag: TagOrId) -> bool:
        if isinstance(tag, int):
            return self.id == tag
        return tag == "all" or tag in self.tags

    @property
    def hidden(self) -> bool:
        return bool(self.style.get("hidden", False))

    def points(self) -> List[Point]:
        ox, oy = self.offset
        c = self.coords
        return [(c[i] + ox, c[i + 1] + oy) for i in range(0, len(c), 2)]


def _flatten(points: Iterable[Point]) -> Tuple[float, ...]:
    flat: List[float] = []
    for x, y in points:
        flat.append(float(x))
        flat.append(float(y))
    return tuple(flat)


class ImageSurface:
    """
    Retained display list rasterized with Pillow.

    Items paint in list order. Items styled ``blend="multiply"`` are drawn on
    their own white layer and multiplied into the image, so overlapping lines
    darken each other.
    """

    def __init__(self, width: int, height: int, *, background: str = "white") -> None:
        self.width = int(width)
        self.height = int(height)
        self.background = background
        self.items: List[Item] = []
        self._next_id = 1

    # ---------- display list ----------
    def clear(self) -> None:
        self.items = []
        self._next_id = 1

    def resize(self, width: float, height: float) -> None:
        self.width = max(1, int(round(width)))
        self.height = max(1, int(round(height)))

    def _add(self, kind: str, coords: Tuple[float, ...], tags: Sequence[str], style: Dict[str, Any], text: str = "") -> int:
        item = Item(id=self._next_id, kind=kind, coords=coords, tags=tuple(tags), style=dict(style), text=text)
        self._next_id += 1
        self.items.append(item)
        return item.id

    def line(self, points: Sequence[Point], *, tags: Sequence[str] = (), **style) -> int:
        return self._add("line", _flatten(points), tags, style)

    def text(self, x: float, y: float, text: str, *, tags: Sequence[str] = (), **style) -> int:
        return self._add("text", (float(x), float(y)), tags, style, text=text)

    def circle(self, x: float, y: float, r: float, *, tags: Sequence[str] = (), **style) -> int:
        return self._add("circle", (float(x), float(y), float(r)), tags, style)

    def find_withtag(self, tag: TagOrId) -> List[Item]:
        return [it for it in self.items if it.matches(tag)]

    def restyle(self, tag: TagOrId, **style) -> None:
        for it in self.find_withtag(tag):
            it.style.update(style)

    def set_text(self, tag: TagOrId, text: str) -> None:
        for it in self.find_withtag(tag):
            if it.kind == "text":
                it.text = text

    def set_hidden(self, tag: TagOrId, hidden: bool) -> None:
        self.restyle(tag, hidden=bool(hidden))

    def raise_tag(self, tag: TagOrId) -> None:
        # same as Tk: matching items go to the top, keeping their relative order
        keep = [it for it in self.items if not it.matches(tag)]
        top = [it for it in self.items if it.matches(tag)]
        self.items = keep + top

    def place(self, tag: TagOrId, x: float, y: float) -> None:
        for it in self.find_withtag(tag):
            it.offset = (float(x), float(y))

    # ---------- rasterization ----------
    def render(self) -> Image.Image:
        img = Image.new("RGB", (self.width, self.height), self.background)
        font = ImageFont.load_default()
        for it in self.items:
            if it.hidden:
                continue
            if it.style.get("blend") == "multiply":
                layer = Image.new("RGB", img.size, "white")
                self._paint(ImageDraw.Draw(layer), it, font)
                img = ImageChops.multiply(img, layer)
            else:
                self._paint(ImageDraw.Draw(img), it, font)
        return img

    def save(self, path: str) -> None:
        self.render().save(path)

    def _paint(self, draw: ImageDraw.ImageDraw, it: Item, font) -> None:
        if it.kind == "line":
            pts = it.points()
            width = max(1, int(round(float(it.style.get("width", 1)))))
            color = it.style.get("stroke") or "black"
            joint = "curve" if it.style.get("joinstyle") == "round" else None
            draw.line(pts, fill=color, width=width, joint=joint)
            if it.style.get("capstyle") == "round" and width > 1:
                r = width / 2
                for x, y in (pts[0], pts[-1]):
                    draw.ellipse((x - r, y - r, x + r, y + r), fill=color)
        elif it.kind == "circle":
            (x, y), r = it.points()[0], it.coords[2]
            draw.ellipse((x - r, y - r, x + r, y + r), fill=it.style.get("fill") or "black")
        elif it.kind == "text":
            x, y = it.points()[0]
            x0, y0, x1, y1 = font.getbbox(it.text)
            w, h = x1 - x0, y1 - y0
            dx, dy = _anchor_offset(it.style.get("anchor", "center"), w, h)
            draw.text((x + dx - x0, y + dy - y0), it.text, fill=it.style.get("fill") or "black", font=font)


def _anchor_offset(anchor: str, w: float, h: float) -> Point:
    # Tk compass anchors: the named side/corner of the text sits at (x, y)
    anchor = anchor or "center"
    if "w" in anchor:
        dx = 0.0
    elif "e" in anchor:
        dx = -w
    else:
        dx = -w / 2
    if "n" in anchor:
        dy = 0.0
    elif "s" in anchor:
        dy = -h
    else:
        dy = -h / 2
    return dx, dy


class TkSurface:
    """Surface backed by a ``tk.Canvas``; ``blend`` is accepted and ignored."""

    def __init__(self, canvas) -> None:
        self.canvas = canvas
        self._offsets: Dict[TagOrId, Point] = {}

    def clear(self) -> None:
        self.canvas.delete("all")
        self._offsets = {}

    def resize(self, width: float, height: float) -> None:
        self.canvas.configure(width=int(round(width)), height=int(round(height)))

    def line(self, points: Sequence[Point], *, tags: Sequence[str] = (), **style) -> int:
        return self.canvas.create_line(*_flatten(points), tags=tuple(tags), **self._line_options(style))

    def text(self, x: float, y: float, text: str, *, tags: Sequence[str] = (), **style) -> int:
        opts = self._text_options(style)
        return self.canvas.create_text(x, y, text=text, tags=tuple(tags), **opts)

    def circle(self, x: float, y: float, r: float, *, tags: Sequence[str] = (), **style) -> int:
        return self.canvas.create_oval(
            x - r, y - r, x + r, y + r,
            fill=style.get("fill") or "black", outline="",
            state=_state(style), tags=tuple(tags),
        )

    def restyle(self, tag: TagOrId, **style) -> None:
        opts: Dict[str, Any] = {}
        if "stroke" in style:
            opts["fill"] = style["stroke"]
        if "width" in style:
            opts["width"] = style["width"]
        if "hidden" in style:
            opts["state"] = _state(style)
        if opts:
            self.canvas.itemconfigure(tag, **opts)

    def set_text(self, tag: TagOrId, text: str) -> None:
        for item in self.canvas.find_withtag(tag):
            if self.canvas.type(item) == "text":
                self.canvas.itemconfigure(item, text=text)

    def set_hidden(self, tag: TagOrId, hidden: bool) -> None:
        self.canvas.itemconfigure(tag, state="hidden" if hidden else "normal")

    def raise_tag(self, tag: TagOrId) -> None:
        self.canvas.tag_raise(tag)

    def place(self, tag: TagOrId, x: float, y: float) -> None:
        ox, oy = self._offsets.get(tag, (0.0, 0.0))
        self.canvas.move(tag, x - ox, y - oy)
        self._offsets[tag] = (float(x), float(y))

    def _line_options(self, style: Dict[str, Any]) -> Dict[str, Any]:
        opts: Dict[str, Any] = {
            "fill": style.get("stroke") or "black",
            "width": style.get("width", 1),
            "state": _state(style),
        }
        if style.get("capstyle"):
            opts["capstyle"] = style["capstyle"]
        if style.get("joinstyle"):
            opts["joinstyle"] = style["joinstyle"]
        return opts

    def _text_options(self, style: Dict[str, Any]) -> Dict[str, Any]:
        weight = "bold" if style.get("font_weight") == "bold" else "normal"
        return {
            "fill": style.get("fill") or "black",
            "anchor": style.get("anchor", "center"),
            "font": ("Helvetica", -int(style.get("font_size", 10)), weight),
            "state": _state(style),
        }


def _state(style: Dict[str, Any]) -> str:
    return "hidden" if style.get("hidden") else "normal"
