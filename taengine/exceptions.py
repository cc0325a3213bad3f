"""
Exceptions raised by taengine that are specific to this package only
"""


class TAEngineError(Exception):
    """Base class for all taengine errors"""
    pass


class NumTypeMismatchError(TAEngineError, ValueError):
    """Raised when a bar's numeric backend differs from the series backend"""
    pass


class BarOrderError(TAEngineError, ValueError):
    """Raised when a bar does not end strictly after the series' last bar"""
    pass


class BarIndexError(TAEngineError, IndexError):
    """Raised when a bar index is negative or past the end of the series"""
    pass


class SeriesStateError(TAEngineError, RuntimeError):
    """Raised when a constrained (sub-series) view is asked to change its bounds"""
    pass


class PositionStateError(TAEngineError, RuntimeError):
    """Raised when a position or trading record is operated in the wrong state"""
    pass
