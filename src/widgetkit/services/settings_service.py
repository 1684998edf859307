"""Application-level settings for widget behaviour.

Centralizes interaction and performance knobs so tests and host applications
can adjust them without touching widget code. Widgets read
``SettingsService.instance`` unless a settings object is injected.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar


@dataclass
class SettingsService:
    """Runtime settings for chart widgets.

    Attributes:
        hit_tolerance_px: Maximum pointer distance (inclusive) for a point to
            count as hovered on line/area/scatter charts. Default 10.
        tooltip_offset_px: Tooltip anchor offset from the pointer; the anchor
            is placed right of and above the pointer. Default 10.
        slow_frame_ms: Render passes slower than this log a warning (one
            frame at 60 fps). Default 16.
        entrance_animation_ms: Duration of the entrance tween driven by the
            Qt host widget. Default 500.
    """

    # singleton convenience instance; tests may replace it with a test double.
    instance: ClassVar["SettingsService"]

    hit_tolerance_px: float = 10.0
    tooltip_offset_px: float = 10.0
    slow_frame_ms: float = 16.0
    entrance_animation_ms: int = 500


SettingsService.instance = SettingsService()
