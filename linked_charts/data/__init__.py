"""
Reference data source: a pandas-backed crossfilter-style index
"""

from .crossframe import CrossFrame, FrameDimension, FrameGroup

__all__ = ["CrossFrame", "FrameDimension", "FrameGroup"]
