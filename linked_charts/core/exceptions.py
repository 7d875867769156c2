class LinkedChartsError(Exception):
    """Base exception for all linked_charts errors"""
    pass

class ConfigurationError(LinkedChartsError):
    """A chart is wired up incorrectly (missing attribute, missing attach target, ...)"""
    pass

class InvalidStateError(ConfigurationError):
    """
    A mandatory attribute is missing when the chart is rendered.
    The message names both the attribute and the chart's anchor.
    """
    pass

class BadArgumentError(ConfigurationError):
    """An operation was called with an argument it cannot work with"""
    pass

class CommitError(LinkedChartsError):
    """
    A commit handler failed before a group-wide render/redraw.
    Commit handlers may pass this to their completion callback; it is logged, never raised.
    """
    pass
