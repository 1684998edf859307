"""Charting engine.

Line, bar, pie, area and scatter charts drawn on an abstract ``DrawSurface``:

 - ``validate`` / processors turn raw option data into typed payloads
 - ``ScaleEngine`` maps data space to the drawing box
 - ``HitTestEngine`` resolves pointer positions back to data elements
 - ``ChartEngine`` owns the published model plus selection, legend and
   tooltip state and exposes ``render(surface)``

The Qt host lives in ``widgetkit.charting.widget`` (imported on demand so this
package stays usable headless); ``export_chart`` writes PNG/SVG through
Matplotlib.
"""

from .engine import ChartEngine, ChartModel  # noqa: F401
from .errors import ChartError, DataShapeError, InteractionError, ScaleError  # noqa: F401
from .export import export_chart  # noqa: F401
from .hit_testing import HitTestEngine  # noqa: F401
from .legend import LegendEntry, LegendModel  # noqa: F401
from .processors import processor_for  # noqa: F401
from .render import ChartRenderer, RenderFrame  # noqa: F401
from .scales import ScaleEngine  # noqa: F401
from .selection import SelectionModel  # noqa: F401
from .surface import DrawSurface, RecordingSurface  # noqa: F401
from .tooltip import TooltipState, format_tooltip  # noqa: F401
from .types import ChartKind, ChartSpec, ElementKey, Margin, PointerEvent  # noqa: F401
from .validation import validate  # noqa: F401

__all__ = [
    "ChartEngine",
    "ChartModel",
    "ChartError",
    "DataShapeError",
    "InteractionError",
    "ScaleError",
    "export_chart",
    "HitTestEngine",
    "LegendEntry",
    "LegendModel",
    "processor_for",
    "ChartRenderer",
    "RenderFrame",
    "ScaleEngine",
    "SelectionModel",
    "DrawSurface",
    "RecordingSurface",
    "TooltipState",
    "format_tooltip",
    "ChartKind",
    "ChartSpec",
    "ElementKey",
    "Margin",
    "PointerEvent",
    "validate",
]
