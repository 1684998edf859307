"""Draw surface capability.

The chart renderer only talks to ``DrawSurface``; concrete backends adapt it
to a painting API (``QtPainterSurface``, ``MatplotlibSurface`` in
``backends``). ``RecordingSurface`` keeps the calls as a list of
``DrawCommand`` so a frame can be inspected, diffed or replayed without any
GUI toolkit.

Coordinates are surface pixels with y growing downwards; angles are radians
measured clockwise from the positive x axis (canvas convention). Colors are
``#RRGGBB`` or ``#RRGGBBAA`` strings.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import (
    Any,
    Iterable,
    List,
    Literal,
    Optional,
    Protocol,
    Sequence,
    Tuple,
    runtime_checkable,
)

__all__ = [
    "DrawSurface",
    "DrawCommand",
    "RecordingSurface",
    "TextAlign",
    "TextBaseline",
    "parse_color",
    "replay",
]

TextAlign = Literal["left", "center", "right"]
TextBaseline = Literal["top", "middle", "bottom"]


@runtime_checkable
class DrawSurface(Protocol):  # pragma: no cover - structural only
    def save(self) -> None: ...

    def restore(self) -> None: ...

    def set_alpha(self, alpha: float) -> None: ...

    def clip_rect(self, x: float, y: float, width: float, height: float) -> None: ...

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def stroke_rect(
        self, x: float, y: float, width: float, height: float, color: str, line_width: float
    ) -> None: ...

    def begin_path(self) -> None: ...

    def move_to(self, x: float, y: float) -> None: ...

    def line_to(self, x: float, y: float) -> None: ...

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float) -> None: ...

    def close_path(self) -> None: ...

    def fill(self, color: str) -> None: ...

    def stroke(
        self, color: str, line_width: float, dash: Optional[Sequence[float]] = None
    ) -> None: ...

    def fill_text(
        self,
        text: str,
        x: float,
        y: float,
        color: str,
        *,
        size: float = 12,
        bold: bool = False,
        align: TextAlign = "left",
        baseline: TextBaseline = "middle",
    ) -> None: ...

    def measure_text(self, text: str, *, size: float = 12, bold: bool = False) -> float: ...


def parse_color(color: str) -> Tuple[int, int, int, int]:
    """Return ``(r, g, b, a)`` 0..255 components of a hex color string."""
    text = color.strip().lstrip("#")
    if len(text) == 3:
        text = "".join(c * 2 for c in text)
    if len(text) not in (6, 8):
        raise ValueError(f"Unsupported color: {color!r}")
    r, g, b = (int(text[i : i + 2], 16) for i in (0, 2, 4))
    a = int(text[6:8], 16) if len(text) == 8 else 255
    return r, g, b, a


@dataclass(frozen=True)
class DrawCommand:
    op: str
    args: Tuple[Any, ...] = ()
    kwargs: Tuple[Tuple[str, Any], ...] = ()


class RecordingSurface:
    """In-memory surface recording every call as a ``DrawCommand``.

    ``measure_text`` uses a fixed advance of ``0.6 * size`` per character so
    layouts computed against a recording are deterministic.
    """

    def __init__(self) -> None:
        self.commands: List[DrawCommand] = []

    def _record(self, op: str, *args: Any, **kwargs: Any) -> None:
        self.commands.append(DrawCommand(op, args, tuple(sorted(kwargs.items()))))

    def save(self) -> None:
        self._record("save")

    def restore(self) -> None:
        self._record("restore")

    def set_alpha(self, alpha: float) -> None:
        self._record("set_alpha", alpha)

    def clip_rect(self, x, y, width, height) -> None:
        self._record("clip_rect", x, y, width, height)

    def fill_rect(self, x, y, width, height, color) -> None:
        self._record("fill_rect", x, y, width, height, color)

    def stroke_rect(self, x, y, width, height, color, line_width) -> None:
        self._record("stroke_rect", x, y, width, height, color, line_width)

    def begin_path(self) -> None:
        self._record("begin_path")

    def move_to(self, x, y) -> None:
        self._record("move_to", x, y)

    def line_to(self, x, y) -> None:
        self._record("line_to", x, y)

    def arc(self, cx, cy, radius, start, end) -> None:
        self._record("arc", cx, cy, radius, start, end)

    def close_path(self) -> None:
        self._record("close_path")

    def fill(self, color) -> None:
        self._record("fill", color)

    def stroke(self, color, line_width, dash=None) -> None:
        self._record("stroke", color, line_width, tuple(dash) if dash else None)

    def fill_text(
        self, text, x, y, color, *, size=12, bold=False, align="left", baseline="middle"
    ) -> None:
        self._record(
            "fill_text", text, x, y, color, size=size, bold=bold, align=align, baseline=baseline
        )

    def measure_text(self, text, *, size=12, bold=False) -> float:
        return len(text) * size * 0.6

    # Query helpers -----------------------------------------------------
    def ops(self) -> List[str]:
        return [c.op for c in self.commands]

    def find(self, op: str) -> List[DrawCommand]:
        return [c for c in self.commands if c.op == op]

    def texts(self) -> List[str]:
        return [c.args[0] for c in self.commands if c.op == "fill_text"]


def replay(commands: Iterable[DrawCommand], surface: DrawSurface) -> None:
    """Re-issue recorded commands on another surface."""
    for cmd in commands:
        getattr(surface, cmd.op)(*cmd.args, **dict(cmd.kwargs))
