"""
Helpers for the two things a chart attaches to:

- the root: a Dash component (usually an html.Div) the chart lives in. It may carry
  optional '.reset' and '.filter' control elements, and its 'style' width/height
  are the on-screen box used for automatic sizing.
- the surface: a plotly Figure shown through a dcc.Graph appended to the root.
"""
from __future__ import annotations

import re
from typing import Any, Iterator, List, Optional, Tuple

import plotly.graph_objs as go
from dash import dcc, html
from dash.development.base_component import Component

CHART_CLASS = "dc-chart"
RESET_CLASS = "reset"
FILTER_CLASS = "filter"

_PX = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(px)?\s*$")


# -----------------------------------------------------------------------------
# Root component tree
# -----------------------------------------------------------------------------
def make_root(anchor_id: str) -> html.Div:
    return html.Div(id=anchor_id, className=CHART_CLASS, children=[])


def _children_of(component: Any) -> List[Any]:
    children = getattr(component, "children", None)
    if children is None:
        return []
    if isinstance(children, (list, tuple)):
        return list(children)
    return [children]


def iter_components(root: Any) -> Iterator[Component]:
    """Depth-first walk over a component tree, root first."""
    if not isinstance(root, Component):
        return
    yield root
    for child in _children_of(root):
        yield from iter_components(child)


def class_names(component: Any) -> List[str]:
    return (getattr(component, "className", None) or "").split()


def add_class(component: Component, name: str) -> None:
    names = class_names(component)
    if name not in names:
        component.className = " ".join(names + [name])


def _matches(component: Component, selector: str) -> bool:
    if selector.startswith("#"):
        return getattr(component, "id", None) == selector[1:]
    if selector.startswith("."):
        return selector[1:] in class_names(component)
    return type(component).__name__ == selector


def select_all(root: Any, selector: str) -> List[Component]:
    """
    Minimal selector support: '.class', '#id' or a component type name
    (e.g. 'Graph'). The root itself is not a candidate.
    """
    return [c for c in iter_components(root) if c is not root and _matches(c, selector)]


def select(root: Any, selector: str) -> Optional[Component]:
    found = select_all(root, selector)
    return found[0] if found else None


def append_child(root: Component, child: Component) -> None:
    root.children = _children_of(root) + [child]


def prepend_child(root: Component, child: Component) -> None:
    root.children = [child] + _children_of(root)


def remove_children(root: Component, selector: str) -> None:
    root.children = [c for c in _children_of(root) if not (isinstance(c, Component) and _matches(c, selector))]


def set_style(component: Component, attribute: str, value: Optional[str]) -> None:
    """Set one style attribute; None removes it."""
    style = dict(getattr(component, "style", None) or {})
    if value is None:
        style.pop(attribute, None)
    else:
        style[attribute] = value
    component.style = style


def set_text(component: Component, text: Any) -> None:
    component.children = "" if text is None else str(text)


def _to_px(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        m = _PX.match(value)
        if m:
            return float(m.group(1))
    return None


def bounding_box(element: Any) -> Tuple[Optional[float], Optional[float]]:
    """
    Width and height of a root as far as it can be known server-side: absolute
    sizes in its style. Relative sizes ('50%', 'auto') are unknown.
    """
    style = getattr(element, "style", None) or {}
    return _to_px(style.get("width")), _to_px(style.get("height"))


# -----------------------------------------------------------------------------
# Drawing surface
# -----------------------------------------------------------------------------
def new_surface(graph_id: str) -> Tuple[dcc.Graph, go.Figure]:
    fig = go.Figure()
    fig.update_layout(margin=dict(l=40, r=40, t=40, b=40))
    graph = dcc.Graph(id=graph_id, figure=fig)
    return graph, fig


def size_surface(fig: go.Figure, width: float, height: float, use_view_box_resizing: bool) -> None:
    if not use_view_box_resizing:
        fig.update_layout(width=width, height=height, autosize=False)
    elif not fig.layout.autosize:
        # scale with the container instead of fixing the size
        fig.update_layout(autosize=True, width=None, height=None)


def start_transition(fig: go.Figure, duration: int) -> None:
    fig.update_layout(transition=dict(duration=duration, easing="cubic-in-out"))
