"""
Dash adapters: chart panels and group-wide interaction callbacks
"""

from .dash_bridge import chart_panel, handle_click, handle_reset, panel_state, register_group_callbacks

__all__ = ["chart_panel", "handle_click", "handle_reset", "panel_state", "register_group_callbacks"]
