"""buildfront: a thin front end for running an external build tool."""

from buildfront.__version__ import __version__

__all__ = ["__version__"]
