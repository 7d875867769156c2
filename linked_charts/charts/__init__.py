from .bar_chart import BarChart
from .composite_chart import CompositeChart

__all__ = ["BarChart", "CompositeChart"]
