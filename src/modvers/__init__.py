"""Report the installed version of Python modules."""

__version__ = "0.1.0"
