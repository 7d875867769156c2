import os
import socket

import pandas as pd
from dash import Dash, html

from linked_charts.charts import BarChart
from linked_charts.core import chart_registry
from linked_charts.data import CrossFrame
from linked_charts.logging_config import configure_logging
from linked_charts.settings import load_settings
from linked_charts.ui import chart_panel, register_group_callbacks

settings = load_settings(os.getenv("LINKED_CHARTS_SETTINGS"))
configure_logging(force_format=settings.log_format)


def build_demo_frame() -> pd.DataFrame:
    return pd.DataFrame(
        {
            "state": ["MA", "TX", "ND", "WA", "MA", "TX", "TX", "WA", "ND", "MA"],
            "weekday": ["Mon", "Tue", "Mon", "Wed", "Thu", "Fri", "Mon", "Tue", "Wed", "Fri"],
            "amount": [12, 30, 7, 18, 22, 9, 14, 25, 11, 16],
        }
    )


def create_dash_app() -> Dash:
    cf = CrossFrame(build_demo_frame())
    group_name = settings.default_group or "demo"

    state_dim = cf.dimension("state")
    state_chart = BarChart("state-chart", group_name, **settings.chart_defaults())
    state_chart.dimension(state_dim).group(state_dim.group().reduce_sum("amount"), "Amount by state")

    weekday_dim = cf.dimension("weekday")
    weekday_chart = BarChart("weekday-chart", group_name, color="#ff7f0e", **settings.chart_defaults())
    weekday_chart.dimension(weekday_dim).group(weekday_dim.group(), "Records by weekday")

    app = Dash(__name__)
    app.title = settings.ui_title
    app.layout = html.Div(
        [
            html.H2(settings.ui_title),
            chart_panel(state_chart, "Amount by state"),
            chart_panel(weekday_chart, "Records by weekday"),
        ]
    )
    register_group_callbacks(app, chart_registry.chart_group(group_name))
    return app


app = create_dash_app()
server = app.server


def find_free_port(start_port: int) -> int:
    """Finds an available port starting from start_port."""
    port = start_port
    while port < start_port + 100:  # Try up to 100 ports
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
            if s.connect_ex(('localhost', port)) != 0:
                return port
        port += 1
    return start_port


if __name__ == "__main__":
    preferred_port = int(os.getenv("PORT", "8051"))
    final_port = find_free_port(preferred_port)

    debug = os.getenv("DEBUG", "0") == "1"

    if final_port != preferred_port:
        print(f"Warning: Port {preferred_port} was taken. Starting on {final_port}")

    app.run(host="0.0.0.0", port=final_port, debug=debug)
