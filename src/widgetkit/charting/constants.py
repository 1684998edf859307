"""Layout and styling constants for the chart widget."""

from __future__ import annotations

from typing import Final, Tuple

DEFAULT_WIDTH: Final = 400
DEFAULT_HEIGHT: Final = 300
DEFAULT_MARGIN: Final = (50, 40, 50, 70)  # top, right, bottom, left

PADDING_RATIO: Final = 0.1  # share of the raw span added on both ends of a range
RADIUS_MARGIN: Final = 20  # px kept between pie rim and drawing box

POINT_RADIUS: Final = 4
SCATTER_POINT_RADIUS: Final = 5
LINE_WIDTH: Final = 3
AREA_OPACITY: Final = 0.3
BAR_WIDTH_RATIO: Final = 0.8
LABEL_RADIUS_RATIO: Final = 0.7
GRID_STEPS: Final = 5
MAX_LINE_GRID_COLUMNS: Final = 10

SUBTITLE_Y: Final = 35
LEGEND_WIDTH: Final = 140
LEGEND_OFFSET: Final = 150  # legend x is measured from the right edge
LEGEND_ITEM_HEIGHT: Final = 20
LEGEND_INDICATOR_SIZE: Final = (15, 10)
LEGEND_TEXT_OFFSET: Final = 35
TOOLTIP_HEIGHT: Final = 20
TOOLTIP_PADDING: Final = 8

# Named colors used by the renderer.
WHITE: Final = "#FFFFFF"
GRAY_200: Final = "#E5E7EB"
GRAY_300: Final = "#D1D5DB"
GRAY_400: Final = "#9CA3AF"
GRAY_600: Final = "#4B5563"
GRAY_700: Final = "#374151"
GRAY_900: Final = "#111827"
HIGHLIGHT: Final = "#FF9800"
LEGEND_BACKGROUND: Final = "#FFFFFFE6"
TOOLTIP_BACKGROUND: Final = "#000000CC"

DEFAULT_PALETTE: Final[Tuple[str, ...]] = (
    "#1976D2",
    "#388E3C",
    "#F57C00",
    "#D32F2F",
    "#0288D1",
    "#9C27B0",
    "#607D8B",
    "#795548",
)
