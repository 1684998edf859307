"""Chart export helpers.

Renders the engine's current frame (selection and legend state included)
through ``MatplotlibSurface`` and writes it to disk, without any widget.
"""
from __future__ import annotations

import logging
import os
from typing import Union

from .backends import MatplotlibSurface
from .engine import ChartEngine

__all__ = ["EXPORT_FORMATS", "export_chart"]

log = logging.getLogger(__name__)

EXPORT_FORMATS = frozenset({"png", "svg"})


def export_chart(
    engine: ChartEngine,
    path: Union[str, os.PathLike],
    *,
    format: str = "png",
    dpi: int = 120,
) -> MatplotlibSurface:
    """Export a chart to ``path``.

    Args:
        engine: The configured chart engine.
        path: Destination file path (existing directory required).
        format: 'png' or 'svg'.
        dpi: Raster resolution for PNG.

    Returns the surface used, so callers can inspect or re-save the figure.
    """
    fmt = format.lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError("format must be 'png' or 'svg'")
    spec = engine.spec
    surface = MatplotlibSurface(spec.width, spec.height, dpi=dpi)
    if not engine.render(surface, progress=1.0):
        raise RuntimeError("Chart render failed; see error log")
    surface.savefig(path, format=fmt, dpi=dpi)
    log.info("Exported %s chart to %s", spec.kind.value, path)
    return surface
