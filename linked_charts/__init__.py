"""
Top-level package for linked_charts.

Coordination core for dashboards where many charts view one filterable dataset.
Most code should import from submodules such as:
    linked_charts.core
    linked_charts.charts
    linked_charts.data
    linked_charts.ui
"""

__all__: list[str] = []
