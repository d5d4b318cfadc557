"""Core type definitions for the charting engine.

All data models use Pydantic BaseModel for automatic validation, JSON
serialization, and better error messages.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

# ---------------------------------------------------------------------------
# Base Configuration
# ---------------------------------------------------------------------------


class FrozenModel(BaseModel):
    """Base model with frozen (immutable) configuration."""

    model_config = ConfigDict(frozen=True)


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class Trend(str, Enum):
    """Direction tag carried by Kagi and Point & Figure output."""

    UP = "up"
    DOWN = "down"


class ChartType(str, Enum):
    """Chart types offered by the dashboard.

    Only the types listed in :data:`TRANSFORM_CHART_TYPES` reshape the
    series; the others are rendering styles over the raw candles.
    """

    CANDLE = "candle"
    HOLLOW_CANDLE = "hollow_candle"
    HEIKIN_ASHI = "heikin_ashi"
    LINE = "line"
    STEP_LINE = "step_line"
    AREA = "area"
    BASELINE = "baseline"
    BAR = "bar"
    COLUMN = "column"
    HLC_AREA = "hlc_area"
    RENKO = "renko"
    LINE_BREAK = "line_break"
    KAGI = "kagi"
    POINT_FIGURE = "point_figure"
    RANGE = "range"


TRANSFORM_CHART_TYPES = frozenset([
    ChartType.HEIKIN_ASHI,
    ChartType.RENKO,
    ChartType.LINE_BREAK,
    ChartType.KAGI,
    ChartType.POINT_FIGURE,
    ChartType.RANGE,
])


class ZoomDirection(str, Enum):
    """Direction of a wheel/scroll zoom step."""

    IN = "in"
    OUT = "out"


# ---------------------------------------------------------------------------
# Market Data Types
# ---------------------------------------------------------------------------


class Candle(FrozenModel):
    """One OHLC(V) sample, raw or derived.

    :param time: Epoch timestamp in milliseconds, unique within a series.
    :param open: Opening price.
    :param high: Highest price during the period.
    :param low: Lowest price during the period.
    :param close: Closing price.
    :param volume: Traded volume, if known.
    :param trend: Column direction for Kagi and Point & Figure output.
    :param box_size: Box height used to build a Point & Figure candle.
    """

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None
    trend: Trend | None = None
    box_size: float | None = None


class OverlayPoint(FrozenModel):
    """One row of a comparison chart sharing a single time axis.

    :param time: Epoch timestamp in milliseconds.
    :param values: Percentage change per series name; series without a
        sample at this time are absent.
    """

    time: int
    values: dict[str, float] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Viewport Types
# ---------------------------------------------------------------------------


YDomain = Union[tuple[float, float], Literal["auto"]]

AUTO_DOMAIN: Literal["auto"] = "auto"


class ViewportState(FrozenModel):
    """Visible index window over the active series.

    The empty window (``end_index == -1``) stands for "no data loaded".

    :param start_index: First visible index (inclusive).
    :param end_index: Last visible index (inclusive).
    """

    start_index: int = Field(ge=0)
    end_index: int = Field(ge=-1)

    @classmethod
    def empty(cls) -> ViewportState:
        return cls(start_index=0, end_index=-1)

    @property
    def is_empty(self) -> bool:
        return self.end_index < self.start_index

    @property
    def visible_count(self) -> int:
        return max(0, self.end_index - self.start_index + 1)


class Crosshair(FrozenModel):
    """Pointer readout shown in detail mode.

    :param x: Value on the time axis under the pointer.
    :param y: Value on the price axis under the pointer.
    """

    x: float
    y: float


class SeriesKey(FrozenModel):
    """Identity of the series currently shown.

    Any change of symbol, timeframe or chart type resets the viewport.

    :param symbol: Market symbol or coin identifier.
    :param timeframe: Timeframe label (e.g. "1", "30", "max").
    :param chart_type: Selected chart type.
    """

    symbol: str
    timeframe: str
    chart_type: ChartType = ChartType.CANDLE


# ---------------------------------------------------------------------------
# Configuration Types
# ---------------------------------------------------------------------------


class TransformDefaults(FrozenModel):
    """Default sizing heuristics used when a caller supplies no size.

    Fractions are applied to the *last* close of the raw series.

    :param renko_fraction: Renko brick size as a fraction of the last close.
    :param kagi_fraction: Kagi reversal amount as a fraction of the last close.
    :param point_figure_fraction: P&F box size as a fraction of the last close.
    :param range_fraction: Range bar size as a fraction of the last close.
    :param line_break_lookback: Lines consulted by Three-Line-Break reversals.
    :param reversal_boxes: Boxes needed to reverse a P&F column.
    """

    renko_fraction: float = Field(default=0.005, gt=0)
    kagi_fraction: float = Field(default=0.01, gt=0)
    point_figure_fraction: float = Field(default=0.005, gt=0)
    range_fraction: float = Field(default=0.005, gt=0)
    line_break_lookback: int = Field(default=3, ge=1)
    reversal_boxes: int = Field(default=3, ge=1)


class ZoomEvent(FrozenModel):
    """A recorded wheel zoom step.

    :param cursor_ratio: Pointer position within the plot width, in [0, 1].
    :param direction: Zoom direction.
    """

    cursor_ratio: float
    direction: ZoomDirection


class CompareSource(FrozenModel):
    """A series drawn against the primary one in a comparison overlay.

    :param name: Display name, unique within the overlay.
    :param source_type: Candle source type ("csv" or "synthetic").
    :param source_params: Source-specific parameters.
    """

    name: str
    source_type: str
    source_params: dict[str, Any] = Field(default_factory=dict)


class ViewConfig(FrozenModel):
    """Configuration for the view command.

    :param source_type: Candle source type ("csv" or "synthetic").
    :param source_params: Source-specific parameters.
    :param symbol: Symbol label for the series.
    :param timeframe: Timeframe label for the series.
    :param chart_type: Chart type to build.
    :param transform_params: Keyword parameters for the transform.
    :param defaults: Default sizing heuristics.
    :param detail_mode: Whether the crosshair readout is enabled.
    :param zoom_events: Zoom steps replayed in order.
    :param window: Optional brush window applied after the zoom steps.
    :param compare: Series overlaid on the primary one as percentage change;
        when non-empty the chart type is not applied.
    :param log_level: Logging level.
    """

    source_type: str
    source_params: dict[str, Any] = Field(default_factory=dict)
    symbol: str = "SERIES"
    timeframe: str = "1d"
    chart_type: ChartType = ChartType.CANDLE
    transform_params: dict[str, Any] = Field(default_factory=dict)
    defaults: TransformDefaults = Field(default_factory=TransformDefaults)
    detail_mode: bool = False
    zoom_events: list[ZoomEvent] = Field(default_factory=list)
    window: tuple[int, int] | None = None
    compare: list[CompareSource] = Field(default_factory=list)
    log_level: str = "INFO"


class ViewSummary(FrozenModel):
    """Outputs of a replayed view, as consumed by a renderer.

    :param key: Identity of the shown series.
    :param candle_count: Length of the derived series.
    :param state: Final viewport window.
    :param y_domain: Padded value domain of the window, or "auto".
    :param visible_duration: Time spanned by the window in milliseconds.
    :param granularity: Tick label granularity name.
    :param tick_labels: Sample tick labels across the window.
    :param overlay_names: Series names in overlay mode, primary first; empty
        for a single-series view.
    """

    key: SeriesKey
    candle_count: int
    state: ViewportState
    y_domain: YDomain
    visible_duration: int
    granularity: str
    tick_labels: list[str] = Field(default_factory=list)
    overlay_names: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Exports
# ---------------------------------------------------------------------------

__all__ = [
    # Base models
    "FrozenModel",
    # Enums
    "Trend",
    "ChartType",
    "TRANSFORM_CHART_TYPES",
    "ZoomDirection",
    # Market data
    "Candle",
    "OverlayPoint",
    # Viewport
    "YDomain",
    "AUTO_DOMAIN",
    "ViewportState",
    "Crosshair",
    "SeriesKey",
    # Configuration
    "TransformDefaults",
    "ZoomEvent",
    "CompareSource",
    "ViewConfig",
    "ViewSummary",
]
