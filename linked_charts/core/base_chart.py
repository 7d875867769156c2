from __future__ import annotations

import itertools
import logging
import warnings
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple, Union

import plotly.graph_objs as go
from dash import dcc
from dash.development.base_component import Component

from . import surface
from .chart_config import ChartConfig, key_of, value_of
from .chart_group import ChartGroup
from .chart_registry import ChartRegistry, chart_registry
from .events import CHART_EVENTS, EventDispatcher, Listener
from .exceptions import BadArgumentError, InvalidStateError
from .filter_handlers import any_accepts
from .filter_set import FilterSet

logger = logging.getLogger(__name__)

_chart_ids = itertools.count(1)
_renderlet_ids = itertools.count(1)

# Marks "no argument given" on accessors where None is a meaningful value.
_UNSET: Any = object()

SizeSpec = Union[None, int, float, Callable[[Any], float]]


class BaseChart(ABC):
    """
    Stateful core shared by every chart.

    Owns the chart's filters, configuration, lifecycle events and group
    membership. Concrete chart types only supply the drawing steps
    '_do_render' and '_do_redraw'.

    Accessors follow one convention: called without an argument they return the
    current value, called with one they set it and return the chart, so calls
    can be chained:

        chart.dimension(dim).group(grp).width(300).render()
    """

    # Options whose list/tuple value is expanded into positional arguments.
    VARIADIC_OPTIONS = frozenset({"anchor", "group", "title"})

    # Custom event channels of a chart type, on top of CHART_EVENTS.
    extra_events: Tuple[str, ...] = ()

    def __init__(
            self,
            parent: Any = None,
            chart_group: Union[None, str, ChartGroup] = None,
            *,
            registry: Optional[ChartRegistry] = None,
            **config: Any,
    ):
        self._chart_id = str(next(_chart_ids))
        self._registry = registry or chart_registry
        self._conf = ChartConfig().merge(**config)

        self._group: Any = None
        self._group_name: Optional[str] = None

        self._anchor: Any = None
        self._root: Optional[Component] = None
        self._svg: Optional[go.Figure] = None
        self._graph: Optional[dcc.Graph] = None
        self._is_child = False
        self._chart_group: Optional[ChartGroup] = None

        self._width_calc = self._default_width_calc
        self._height_calc = self._default_height_calc
        self._width: Optional[float] = None
        self._height: Optional[float] = None

        self._key_accessor: Callable[[Any], Any] = key_of
        self._value_accessor: Callable[[Any], Any] = value_of
        self._title: Callable[[Any], Any] = self._default_title

        self._mandatory_attributes: Tuple[str, ...] = ("dimension", "group")
        self._listeners = EventDispatcher(*CHART_EVENTS, *self.extra_events)
        self._legend: Any = None

        self._data: Callable[[Any], Any] = self._default_data
        self._filter_set = FilterSet(lambda: self._conf)

        if parent is not None:
            self.anchor(parent, chart_group)

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    @property
    def conf(self) -> ChartConfig:
        return self._conf

    def configure(self, **patch: Any) -> BaseChart:
        """
        Shallow-merge options into the configuration; later calls win per key.
        :raises TypeError: on an unknown configuration key
        """
        self._conf = self._conf.merge(**patch)
        return self

    def dimension(self, dimension: Any = _UNSET) -> Any:
        """
        **mandatory** by default. The data source dimension filters are applied to.
        """
        if dimension is _UNSET:
            return self._conf.dimension
        self.configure(dimension=dimension)
        self.expire_cache()
        return self

    def group(self, group: Any = _UNSET, name: Optional[str] = None) -> Any:
        """
        **mandatory** by default. The aggregated data group the chart draws.
        :param name: optional display name, used for legend labels
        """
        if group is _UNSET:
            return self._group
        self._group = group
        self._group_name = name
        self.expire_cache()
        return self

    def group_name(self) -> Optional[str]:
        return self._group_name

    def data(self, callback: Any = _UNSET) -> Any:
        """
        Get the chart's data, or set how it is derived from the group.
        By default the data is 'group.all()'. A non-callable is used as constant data.
        """
        if callback is _UNSET:
            return self._data(self._group)
        self._data = callback if callable(callback) else (lambda _group: callback)
        self.expire_cache()
        return self

    @staticmethod
    def _default_data(group: Any) -> Any:
        return group.all()

    def key_accessor(self, accessor: Any = _UNSET) -> Any:
        if accessor is _UNSET:
            return self._key_accessor
        self._key_accessor = accessor
        return self

    def value_accessor(self, accessor: Any = _UNSET) -> Any:
        if accessor is _UNSET:
            return self._value_accessor
        self._value_accessor = accessor
        return self

    def title(self, title_function: Any = _UNSET) -> Any:
        if title_function is _UNSET:
            return self._title
        self._title = title_function
        return self

    def _default_title(self, d: Any) -> str:
        return f"{self._key_accessor(d)}: {self._value_accessor(d)}"

    def compute_ordered_groups(self, data: Sequence[Any]) -> List[Any]:
        """Copy of the data sorted by the configured 'ordering'."""
        return sorted(data, key=self._conf.ordering)

    def expire_cache(self) -> BaseChart:
        """Hook for chart types that cache data between draws."""
        return self

    def chart_id(self) -> str:
        """Stable per-instance identifier."""
        return self._chart_id

    # ------------------------------------------------------------------
    # Options
    # ------------------------------------------------------------------
    def option_setters(self) -> Dict[str, Callable[..., Any]]:
        """
        Name -> setter table used by 'options'. Every configuration field is a
        valid option. Chart types extend this by overriding and updating the
        result of super().
        """
        setters: Dict[str, Callable[..., Any]] = {
            name: (lambda value, _name=name: self.configure(**{_name: value}))
            for name in ChartConfig.__dataclass_fields__
        }
        setters.update(
            {
                "anchor": self.anchor,
                "chart_group": self.chart_group,
                "dimension": self.dimension,
                "group": self.group,
                "data": self.data,
                "width": self.width,
                "height": self.height,
                "key_accessor": self.key_accessor,
                "value_accessor": self.value_accessor,
                "title": self.title,
                "legend": self.legend,
                "filter": self.filter,
                "mandatory_attributes": self.mandatory_attributes,
            }
        )
        return setters

    def options(self, opts: Dict[str, Any]) -> BaseChart:
        """
        Bulk setter, e.g. chart.options({"dimension": dim, "group": [grp, "Totals"]}).
        Unknown names are skipped.
        """
        setters = self.option_setters()
        for name, value in opts.items():
            setter = setters.get(name)
            if setter is None:
                logger.debug("Not a valid option setter name: %s", name, extra={"chart_id": self._chart_id})
                continue
            if name in self.VARIADIC_OPTIONS and isinstance(value, (list, tuple)):
                setter(*value)
            else:
                setter(value)
        return self

    # ------------------------------------------------------------------
    # Attachment
    # ------------------------------------------------------------------
    def anchor(self, parent: Any = _UNSET, chart_group: Union[None, str, ChartGroup] = None) -> Any:
        """
        Attach the chart to a root, or return the current anchor.

        - parent is another chart: become its child, share its root, and stay out
          of chart groups (the parent takes part in group fan-out instead)
        - parent is a Dash component: use it as the root
        - parent is a string: create a root html.Div with that id ('#id' also works)

        Top-level charts register with 'chart_group' (a name, a ChartGroup or None
        for the default group). Re-anchoring orphans the previous surface.
        :raises BadArgumentError: if parent is None
        """
        if parent is _UNSET:
            return self._anchor
        if parent is None or (isinstance(parent, str) and not parent):
            raise BadArgumentError(f"parent must be defined to anchor chart {self._chart_id}")

        previous_group = None if self._is_child else self._chart_group
        self._chart_group = self._get_chart_group(chart_group)
        if previous_group is not None and (
                isinstance(parent, BaseChart) or previous_group is not self._chart_group
        ):
            previous_group.deregister(self)

        if isinstance(parent, BaseChart):
            self._anchor = parent.anchor()
            if isinstance(self._anchor, Component):
                self._anchor = f"#{parent.anchor_name()}"
            self._root = parent.root()
            self._is_child = True
        else:
            if isinstance(parent, Component):
                self._anchor = parent
                self._root = parent
            else:
                self._anchor = str(parent)
                self._root = surface.make_root(self._anchor.lstrip("#"))
            surface.add_class(self._root, surface.CHART_CLASS)
            self._chart_group.register(self)
            self._is_child = False
        return self

    def _get_chart_group(self, chart_group: Union[None, str, ChartGroup]) -> ChartGroup:
        if isinstance(chart_group, ChartGroup):
            return chart_group
        return self._registry.chart_group(chart_group)

    def anchor_name(self) -> str:
        a = self._anchor
        if a is not None:
            if isinstance(a, str):
                return a.replace("#", "")
            anchor_id = getattr(a, "id", None)
            if anchor_id:
                return str(anchor_id)
        return f"dc-chart{self._chart_id}"

    def is_child(self) -> bool:
        return self._is_child

    def root(self, root_element: Any = _UNSET) -> Any:
        if root_element is _UNSET:
            return self._root
        self._root = root_element
        return self

    def svg(self, figure: Any = _UNSET) -> Any:
        """The plotly figure the chart draws into."""
        if figure is _UNSET:
            return self._svg
        self._svg = figure
        return self

    def graph(self) -> Optional[dcc.Graph]:
        return self._graph

    def generate_svg(self) -> go.Figure:
        self._graph, self._svg = surface.new_surface(f"{self.anchor_name()}-graph")
        if self._root is not None:
            surface.append_child(self._root, self._graph)
        self.size_svg()
        return self._svg

    def reset_svg(self) -> go.Figure:
        """Drop the existing surface from the root and create a fresh one."""
        if self._root is not None:
            surface.remove_children(self._root, "Graph")
        return self.generate_svg()

    def size_svg(self) -> None:
        if self._svg is not None:
            surface.size_surface(self._svg, self.width(), self.height(), self._conf.use_view_box_resizing)

    def select(self, selector: str) -> Optional[Component]:
        return surface.select(self._root, selector)

    def select_all(self, selector: str) -> List[Component]:
        return surface.select_all(self._root, selector) if self._root is not None else []

    # ------------------------------------------------------------------
    # Sizing
    # ------------------------------------------------------------------
    def _default_width_calc(self, element: Any) -> float:
        width, _ = surface.bounding_box(element)
        return width if (width and width > self._conf.min_width) else self._conf.min_width

    def _default_height_calc(self, element: Any) -> float:
        _, height = surface.bounding_box(element)
        return height if (height and height > self._conf.min_height) else self._conf.min_height

    @staticmethod
    def _size_calc(spec: SizeSpec, default: Callable[[Any], float]) -> Callable[[Any], float]:
        if not spec:
            return default
        if callable(spec):
            return spec
        return lambda _element: spec

    def width(self, width: SizeSpec = _UNSET) -> Any:
        """
        Get the (cached) width, or set it to a number, a function of the root, or
        a falsy value to go back to the automatic calculation.
        """
        if width is _UNSET:
            if self._width is None:
                self._width = self._width_calc(self._root)
            return self._width
        self._width_calc = self._size_calc(width, self._default_width_calc)
        self._width = None
        return self

    def height(self, height: SizeSpec = _UNSET) -> Any:
        """See 'width'."""
        if height is _UNSET:
            if self._height is None:
                self._height = self._height_calc(self._root)
            return self._height
        self._height_calc = self._size_calc(height, self._default_height_calc)
        self._height = None
        return self

    # ------------------------------------------------------------------
    # Controls
    # ------------------------------------------------------------------
    def _control_style(self) -> Tuple[str, str]:
        if self._conf.controls_use_visibility:
            return "visibility", "hidden"
        return "display", "none"

    def turn_on_controls(self) -> BaseChart:
        """Show '.reset' elements and print the active filters into '.filter' elements."""
        if self._root is not None:
            attribute, _ = self._control_style()
            for el in self.select_all(f".{surface.RESET_CLASS}"):
                surface.set_style(el, attribute, None)
            for el in self.select_all(f".{surface.FILTER_CLASS}"):
                surface.set_text(el, self._conf.filter_printer(self.filters()))
                surface.set_style(el, attribute, None)
        return self

    def turn_off_controls(self) -> BaseChart:
        if self._root is not None:
            attribute, value = self._control_style()
            for el in self.select_all(f".{surface.RESET_CLASS}"):
                surface.set_style(el, attribute, value)
            for el in self.select_all(f".{surface.FILTER_CLASS}"):
                surface.set_style(el, attribute, value)
                surface.set_text(el, self.filter())
        return self

    # ------------------------------------------------------------------
    # Mandatory attributes
    # ------------------------------------------------------------------
    def mandatory_attributes(self, attributes: Any = _UNSET) -> Any:
        if attributes is _UNSET:
            return self._mandatory_attributes
        self._mandatory_attributes = tuple(attributes or ())
        return self

    def check_for_mandatory_attributes(self, attribute: str) -> None:
        accessor = getattr(self, attribute, None)
        if not callable(accessor) or not accessor():
            raise InvalidStateError(
                f"Mandatory attribute chart.{attribute} is missing on chart[#{self.anchor_name()}]"
            )

    def check_all_mandatory_attributes(self) -> None:
        for attribute in self._mandatory_attributes:
            self.check_for_mandatory_attributes(attribute)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def render(self) -> Any:
        """
        Draw the chart from scratch.

        preRender -> mandatory attribute check -> _do_render -> legend ->
        pretransition -> (after the transition) renderlet -> postRender
        :raises InvalidStateError: if a mandatory attribute is missing
        """
        self._width = self._height = None
        self._listeners.call("preRender", self)

        self.check_all_mandatory_attributes()

        result = self._do_render()

        if self._legend is not None:
            self._legend.render()

        self._activate_renderlets("postRender")
        return result

    def redraw(self) -> Any:
        """
        Update the chart incrementally, reusing the cached size.

        preRedraw -> _do_redraw -> legend -> pretransition -> renderlet -> postRedraw
        """
        self.size_svg()
        self._listeners.call("preRedraw", self)

        result = self._do_redraw()

        if self._legend is not None:
            self._legend.render()

        self._activate_renderlets("postRedraw")
        return result

    def _activate_renderlets(self, event: Optional[str] = None) -> None:
        self._listeners.call("pretransition", self)

        def fire_remaining() -> None:
            self._listeners.call("renderlet", self)
            if event:
                self._listeners.call(event, self)

        duration = self._conf.transition_duration
        if duration > 0 and self._svg is not None:
            surface.start_transition(self._svg, duration)
            delay = (self._conf.transition_delay + duration) / 1000.0
            logger.debug(
                "Deferring lifecycle events until transition ends",
                extra={"chart_id": self._chart_id, "event": event, "delay_s": delay},
            )
            self._conf.scheduler.call_later(delay, fire_remaining)
        else:
            fire_remaining()

    @abstractmethod
    def _do_render(self) -> Any:
        """Draw everything from scratch. Called by 'render'."""
        raise NotImplementedError()

    @abstractmethod
    def _do_redraw(self) -> Any:
        """Bring the existing drawing up to date. Called by 'redraw'."""
        raise NotImplementedError()

    # ------------------------------------------------------------------
    # Chart group
    # ------------------------------------------------------------------
    def chart_group(self, chart_group: Union[None, str, ChartGroup] = _UNSET) -> Any:
        """
        Get the group, or move the chart into another one (a name, a ChartGroup,
        or None for the default group). Child charts are never registered.
        """
        if chart_group is _UNSET:
            return self._chart_group
        if not self._is_child and self._chart_group is not None:
            self._chart_group.deregister(self)
        self._chart_group = self._get_chart_group(chart_group)
        if not self._is_child:
            self._chart_group.register(self)
        return self

    def _group_or_default(self) -> ChartGroup:
        if self._chart_group is None:
            self._chart_group = self._registry.chart_group()
        return self._chart_group

    def redraw_group(self) -> BaseChart:
        """
        Redraw every chart of this chart's group, typically after a filter change.
        With a commit handler configured, the redraw waits for it to succeed.
        """
        return self._fan_out(render=False)

    def render_group(self) -> BaseChart:
        """Render every chart of this chart's group. See 'redraw_group'."""
        return self._fan_out(render=True)

    def _fan_out(self, render: bool) -> BaseChart:
        group = self._group_or_default()
        fan_out = group.render_all if render else group.redraw_all

        commit_handler = self._conf.commit_handler
        if commit_handler is None:
            fan_out()
            return self

        def on_commit(error: Any = None, result: Any = None) -> None:
            if error:
                logger.error(
                    "Commit handler failed; skipping group %s",
                    "render" if render else "redraw",
                    extra={
                        "chart_id": self._chart_id,
                        "chart_group": group.name,
                        "error": str(error),
                    },
                )
                return
            fan_out()

        commit_handler(render, on_commit)
        return self

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------
    def filter(self, value: Any = _UNSET) -> Any:
        """
        Without argument: the first active filter, or None.

        With an argument the filter is toggled:
        - a single value (or filter object such as RangedFilter) is added if
          absent and removed if present
        - '[[a, b, c]]' toggles each of a, b and c
        - None clears all filters

        The result is applied to the dimension once. Call 'redraw_group'
        afterwards to update the other charts.
        """
        if value is _UNSET:
            return self._filter_set.first()
        self._filter_set.toggle(value)
        self._after_filter_change(value)
        return self

    def replace_filter(self, value: Any) -> BaseChart:
        """Same result as filter(None) followed by filter(value), applied once."""
        self._filter_set.replace(value)
        self._after_filter_change(value)
        return self

    def filter_all(self) -> BaseChart:
        return self.filter(None)

    def filters(self) -> List[Any]:
        """
        All active filters. This is the chart's own list, not a copy: mutating it
        bypasses the filter handlers and the data source.
        """
        return self._filter_set.values

    def has_filter(self, value: Any = None) -> bool:
        """
        Without argument: whether any filter is active.
        With one: whether the value is one of the active filters, as decided by
        'has_filter_handler' (equality for plain values). See 'filter_accepts'.
        """
        return self._filter_set.has(value)

    def filter_accepts(self, value: Any) -> bool:
        """
        Whether the value is selected by an active filter. Unlike 'has_filter', a
        predicate filter such as RangedFilter selects every value it contains.
        """
        return any_accepts(self._filter_set.values, value)

    def apply_filters(self, filters: List[Any]) -> List[Any]:
        return self._filter_set.apply(filters)

    def _after_filter_change(self, value: Any) -> None:
        self._invoke_filtered_listener(value)
        if self._root is not None and self.has_filter():
            self.turn_on_controls()
        else:
            self.turn_off_controls()

    def _invoke_filtered_listener(self, value: Any) -> None:
        self._listeners.call("filtered", self, value)

    def _invoke_zoomed_listener(self) -> None:
        self._listeners.call("zoomed", self)

    def on_click(self, datum: Any) -> None:
        """Default interaction: toggle the clicked key and redraw the group."""
        self.filter(self._key_accessor(datum))
        self.redraw_group()

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def on(self, typename: str, listener: Optional[Listener] = None) -> BaseChart:
        """
        Register a listener on 'channel' or 'channel.key'; passing None removes
        the listener registered under that name.

        Listeners receive the chart; 'filtered' listeners also get the filter value.
        """
        if listener is None:
            self._listeners.on(typename, remove=True)
        else:
            self._listeners.on(typename, listener)
        return self

    def events(self) -> EventDispatcher:
        return self._listeners

    def renderlet(self, renderlet_function: Listener) -> BaseChart:
        """Deprecated: use chart.on("renderlet.<key>", fn)."""
        warnings.warn(
            'chart.renderlet has been deprecated. Please use chart.on("renderlet.<renderletKey>", renderletFunction)',
            DeprecationWarning,
            stacklevel=2,
        )
        return self.on(f"renderlet.{next(_renderlet_ids)}", renderlet_function)

    # ------------------------------------------------------------------
    # Legend
    # ------------------------------------------------------------------
    def legend(self, legend: Any = _UNSET) -> Any:
        if legend is _UNSET:
            return self._legend
        self._legend = legend
        self._legend.parent(self)
        return self

    def legendables(self) -> List[Dict[str, Any]]:
        return []

    def legend_highlight(self, item: Any = None) -> None:
        pass

    def legend_reset(self, item: Any = None) -> None:
        pass

    def legend_toggle(self, item: Any = None) -> None:
        pass

    def is_legendable_hidden(self, item: Any = None) -> bool:
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(chart_id={self._chart_id!r}, anchor={self.anchor_name()!r})"
