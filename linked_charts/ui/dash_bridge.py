from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import dash
from dash import Input, Output, html
from dash.development.base_component import Component
from dash.exceptions import PreventUpdate

from linked_charts.core import surface
from linked_charts.core.base_chart import BaseChart
from linked_charts.core.chart_group import ChartGroup
from linked_charts.core.exceptions import BadArgumentError
from linked_charts.core.schedulers import DeferredScheduler

logger = logging.getLogger(__name__)


# -----------------------------------------------------------------------------
# Component ids
# -----------------------------------------------------------------------------
def graph_id(chart: BaseChart) -> str:
    return f"{chart.anchor_name()}-graph"


def reset_id(chart: BaseChart) -> str:
    return f"{chart.anchor_name()}-reset"


def filter_id(chart: BaseChart) -> str:
    return f"{chart.anchor_name()}-filter"


# -----------------------------------------------------------------------------
# Panels
# -----------------------------------------------------------------------------
def chart_panel(chart: BaseChart, title: Optional[str] = None) -> Component:
    """
    Return the chart's root, ready to be placed in a Dash layout.

    Adds a heading with the '.filter' text and '.reset' link controls if the root
    has none yet, and renders the chart if it has no surface.
    :raises BadArgumentError: if the chart is not anchored
    """
    root = chart.root()
    if root is None:
        raise BadArgumentError(f"Chart {chart.chart_id()} must be anchored before building its panel")

    if chart.select(f".{surface.RESET_CLASS}") is None:
        controls = html.Div(
            className="chart-controls",
            children=[
                html.Strong(title or chart.anchor_name()),
                html.Span(id=filter_id(chart), className=surface.FILTER_CLASS),
                html.A("reset", id=reset_id(chart), className=surface.RESET_CLASS, href="#", n_clicks=0),
            ],
        )
        surface.prepend_child(root, controls)
        if chart.has_filter():
            chart.turn_on_controls()
        else:
            chart.turn_off_controls()

    if chart.svg() is None:
        chart.render()
    return root


def panel_state(chart: BaseChart) -> Dict[str, Any]:
    """Current values of the props the browser needs to update for one chart."""
    filter_el = chart.select(f".{surface.FILTER_CLASS}")
    reset_el = chart.select(f".{surface.RESET_CLASS}")
    return {
        "figure": chart.svg(),
        "filter_text": getattr(filter_el, "children", None) if filter_el is not None else None,
        "filter_style": getattr(filter_el, "style", None) if filter_el is not None else None,
        "reset_style": getattr(reset_el, "style", None) if reset_el is not None else None,
    }


# -----------------------------------------------------------------------------
# Interactions
# -----------------------------------------------------------------------------
def _datum_for_key(chart: BaseChart, key: Any) -> Any:
    key_of = chart.key_accessor()
    for d in chart.data():
        if key_of(d) == key:
            return d
    return {"key": key}


def handle_click(chart: BaseChart, click_data: Optional[Dict[str, Any]]) -> bool:
    """
    Apply a plotly click event to a chart: toggle the clicked key and redraw the
    chart's group.
    :return: False if the event carried no point
    """
    points = (click_data or {}).get("points") or []
    if not points:
        return False
    key = points[0].get("x")
    chart.on_click(_datum_for_key(chart, key))
    return True


def handle_reset(chart: BaseChart) -> None:
    chart.filter_all()
    chart.redraw_group()


def register_group_callbacks(
        app: dash.Dash,
        group: ChartGroup,
        scheduler: Optional[DeferredScheduler] = None,
) -> None:
    """
    One callback per chart group: a click or reset on any member updates every
    member's figure and controls.

    :param scheduler: the DeferredScheduler the group's charts are configured
        with, if any. Its pending continuations are flushed before responding:
        the browser animates the transition once it receives the figures.
    """
    charts: List[BaseChart] = group.list()
    by_graph = {graph_id(c): c for c in charts}
    by_reset = {reset_id(c): c for c in charts}

    outputs: List[Output] = []
    for c in charts:
        outputs += [
            Output(graph_id(c), "figure"),
            Output(filter_id(c), "children"),
            Output(filter_id(c), "style"),
            Output(reset_id(c), "style"),
        ]
    inputs = [Input(graph_id(c), "clickData") for c in charts] + [Input(reset_id(c), "n_clicks") for c in charts]

    @app.callback(outputs, inputs, prevent_initial_call=True)
    def on_group_interaction(*_values: Any):
        triggered = dash.ctx.triggered_id
        if triggered in by_graph:
            value = dash.ctx.triggered[0].get("value") if dash.ctx.triggered else None
            if not handle_click(by_graph[triggered], value):
                raise PreventUpdate
        elif triggered in by_reset:
            handle_reset(by_reset[triggered])
        else:
            raise PreventUpdate

        logger.info(
            "chart_group_interaction",
            extra={"chart_group": group.name, "trigger": triggered},
        )
        if scheduler is not None:
            scheduler.flush()

        result: List[Any] = []
        for c in charts:
            state = panel_state(c)
            result += [state["figure"], state["filter_text"], state["filter_style"], state["reset_style"]]
        return result
