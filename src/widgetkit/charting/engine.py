"""Chart engine: owns the processed model and interaction state.

Pipeline on (re)configuration::

    ChartSpec -> validate -> process -> scale -> ChartModel (published)

Pointer and key events run hit-testing against the published model and
update selection / tooltip state; renderers pull an immutable ``RenderFrame``
each paint. The engine never draws on its own initiative.

State publication: a reconfiguration builds a complete ``ChartModel`` first
and then swaps the single ``_model`` reference. A failing reconfiguration
(``DataShapeError`` / ``ScaleError``) is reported to the error handler and
re-raised; the previously published model, legend and selection stay as
they were.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from ..services.error_handling_service import ErrorHandlingService
from ..services.event_bus import ChartEvent, EventBus
from ..services.settings_service import SettingsService
from .errors import ChartError, InteractionError
from .hit_testing import HitTestEngine
from .legend import LegendModel
from .processors import processor_for
from .render import ChartRenderer, RenderFrame
from .scales import Scale, ScaleEngine
from .selection import SelectionModel
from .surface import DrawSurface
from .tooltip import TooltipState, format_tooltip
from .types import ChartElement, ChartSpec, ElementKey, PointerEvent, ProcessedData
from .validation import validate

__all__ = ["ChartModel", "ChartEngine", "ErrorHandler"]

log = logging.getLogger(__name__)

ErrorHandler = Callable[[BaseException, str], Any]
SpecLike = Union[ChartSpec, Mapping[str, Any]]

SELECT_KEYS = frozenset({"Enter", " ", "Space"})


@dataclass(frozen=True)
class ChartModel:
    """Published processed state; replaced as a whole, never patched."""

    spec: ChartSpec
    payload: ProcessedData
    scale: Scale
    hit_test: HitTestEngine


class ChartEngine:
    """Orchestrates validation, processing, scaling and interaction.

    Parameters
    ----------
    spec:
        A ``ChartSpec`` or a configuration mapping (camelCase options).
    event_bus:
        Receives ``dataPointHover`` / ``dataPointSelect`` /
        ``selectionCleared`` / ``error``. A private bus is created when omitted.
    error_handler:
        ``handler(error, context)``; defaults to an ``ErrorHandlingService``
        publishing on ``event_bus``.
    settings:
        Interaction knobs; defaults to ``SettingsService.instance``.
    """

    def __init__(
        self,
        spec: SpecLike,
        *,
        event_bus: EventBus | None = None,
        error_handler: ErrorHandler | None = None,
        settings: SettingsService | None = None,
    ) -> None:
        self._settings = settings or SettingsService.instance
        self._bus = event_bus if event_bus is not None else EventBus()
        self._error_handler: ErrorHandler = error_handler or ErrorHandlingService(
            event_bus=self._bus
        )
        self._scale_engine = ScaleEngine()
        self._renderer = ChartRenderer(
            error_handler=self._report, slow_frame_ms=self._settings.slow_frame_ms
        )
        self._selection = SelectionModel()
        self._tooltip = TooltipState.hidden()
        self._model: Optional[ChartModel] = None
        self._legend: Optional[LegendModel] = None
        self.reconfigure(spec)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def model(self) -> ChartModel:
        if self._model is None:
            raise RuntimeError("ChartEngine has no configuration")
        return self._model

    @property
    def spec(self) -> ChartSpec:
        return self.model.spec

    @property
    def payload(self) -> ProcessedData:
        return self.model.payload

    @property
    def scale(self) -> Scale:
        return self.model.scale

    @property
    def legend(self) -> LegendModel:
        if self._legend is None:
            raise RuntimeError("ChartEngine has no configuration")
        return self._legend

    @property
    def selection(self) -> SelectionModel:
        return self._selection

    @property
    def tooltip(self) -> TooltipState:
        return self._tooltip

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def renderer(self) -> ChartRenderer:
        return self._renderer

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def reconfigure(self, spec: SpecLike) -> ChartModel:
        try:
            if not isinstance(spec, ChartSpec):
                spec = ChartSpec.from_options(spec)
            model = self._build_model(spec)
        except Exception as exc:
            self._report(exc, "reconfigure")
            raise
        self._model = model
        self._legend = LegendModel(model.payload)
        self._selection.reset()
        self._tooltip = TooltipState.hidden()
        log.debug(
            "Chart configured: kind=%s elements=%d", spec.kind.value, len(model.payload.items)
        )
        return model

    def set_data(self, data: Any, labels: Optional[Sequence[str]] = None) -> ChartModel:
        """Replace the raw data (and optionally labels) keeping every other option."""
        changes: dict[str, Any] = {"raw_data": data}
        if labels is not None:
            changes["labels"] = labels
        current = self._model.spec if self._model is not None else ChartSpec()
        return self.reconfigure(current.replace(**changes))

    def _build_model(self, spec: ChartSpec) -> ChartModel:
        validated = validate(spec.kind, spec.raw_data)
        payload = processor_for(spec.kind).process(spec, validated)
        scale = self._scale_engine.compute(spec, payload)
        return ChartModel(spec, payload, scale, self._hit_tester(payload, scale))

    def _hit_tester(self, payload: ProcessedData, scale: Scale) -> HitTestEngine:
        return HitTestEngine(payload, scale, tolerance=self._settings.hit_tolerance_px)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    def find_element_at(self, local_x: float, local_y: float) -> Optional[ChartElement]:
        """Hit-test in drawing-box coordinates (surface minus margins)."""
        return self.model.hit_test.find_element_at(local_x, local_y)

    def element_for(self, key: ElementKey) -> Optional[ChartElement]:
        return self.model.hit_test.element_for(key)

    def selected_elements(self) -> list[ChartElement]:
        model = self.model
        found = (model.hit_test.element_for(k) for k in self._selection.selected_keys)
        return [e for e in found if e is not None]

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def handle_pointer(self, event: PointerEvent) -> Optional[ChartElement]:
        """Process a pointer event given in surface coordinates.

        Returns the element under the pointer (``None`` when nothing is hit
        or the chart is not interactive). Unexpected failures are reported as
        ``InteractionError`` and swallowed so the event loop keeps running.
        """
        model = self.model
        if not model.spec.interactive:
            return None
        try:
            local_x = event.x - model.spec.margin.left
            local_y = event.y - model.spec.margin.top
            if event.type == "move":
                return self._on_move(model, event, local_x, local_y)
            if event.type == "down":
                return self._on_down(model, event, local_x, local_y)
            if event.type == "up":
                return None
            raise ValueError(f"Unknown pointer event type: {event.type!r}")
        except Exception as exc:  # noqa: BLE001
            self._report_interaction(exc, "handle_pointer")
            return None

    def _on_move(
        self, model: ChartModel, event: PointerEvent, local_x: float, local_y: float
    ) -> Optional[ChartElement]:
        element = model.hit_test.find_element_at(local_x, local_y)
        if self._selection.set_hovered(element):
            if element is not None and model.spec.show_tooltips:
                offset = self._settings.tooltip_offset_px
                self._tooltip = TooltipState(
                    visible=True,
                    anchor_x=event.x + offset,
                    anchor_y=event.y - offset,
                    text=format_tooltip(element),
                )
            else:
                self._tooltip = TooltipState.hidden()
            self._bus.publish(
                ChartEvent.DATA_POINT_HOVER, {"element": element, "x": local_x, "y": local_y}
            )
        return element

    def _on_down(
        self, model: ChartModel, event: PointerEvent, local_x: float, local_y: float
    ) -> Optional[ChartElement]:
        element = model.hit_test.find_element_at(local_x, local_y)
        if element is not None:
            self._selection.toggle_selected(element, additive=event.ctrl_or_meta)
            self._publish_selection(element)
        return element

    def handle_key(self, key: str) -> None:
        if not self.model.spec.interactive:
            return
        try:
            if key == "Escape":
                self.clear_selection()
            elif key in SELECT_KEYS:
                hovered = self._selection.hovered_key
                if hovered is not None:
                    self._selection.select_only(hovered)
                    self._publish_selection(self.model.hit_test.element_for(hovered))
        except Exception as exc:  # noqa: BLE001
            self._report_interaction(exc, "handle_key")

    def clear_selection(self) -> None:
        self._selection.reset()
        self._tooltip = TooltipState.hidden()
        self._bus.publish(ChartEvent.SELECTION_CLEARED)

    def toggle_legend_entry(self, index: int) -> bool:
        """Show/hide a series, slice or point without rescaling; returns new visibility."""
        model = self.model
        visible = self.legend.toggle_visibility(index)
        payload = model.payload.with_visibility(index, visible)
        self._model = replace(
            model, payload=payload, hit_test=self._hit_tester(payload, model.scale)
        )
        if not visible:
            hovered = self._selection.hovered_key
            self._selection.discard_group(index)
            if hovered is not None and self._selection.hovered_key is None:
                self._tooltip = TooltipState.hidden()
        return visible

    def _publish_selection(self, element: Optional[ChartElement]) -> None:
        self._bus.publish(
            ChartEvent.DATA_POINT_SELECT,
            {"element": element, "selected": self._selection.selected_keys},
        )

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def frame(self, progress: float = 1.0) -> RenderFrame:
        model = self.model
        return RenderFrame(
            spec=model.spec,
            payload=model.payload,
            scale=model.scale,
            legend=self.legend.entries,
            legend_box=self.legend.box(model.spec),
            selected=frozenset(self._selection.selected_keys),
            hovered=self._selection.hovered_key,
            tooltip=self._tooltip,
            progress=min(1.0, max(0.0, float(progress))),
        )

    def render(self, surface: DrawSurface, progress: float = 1.0) -> bool:
        return self._renderer.render(surface, self.frame(progress))

    # ------------------------------------------------------------------
    # Error routing
    # ------------------------------------------------------------------
    def _report(self, error: BaseException, context: str) -> None:
        self._error_handler(error, context)

    def _report_interaction(self, error: BaseException, context: str) -> None:
        if not isinstance(error, ChartError):
            wrapped = InteractionError(context, f"{type(error).__name__}: {error}")
            wrapped.__cause__ = error
            error = wrapped
        self._report(error, context)
