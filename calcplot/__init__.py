"""Scientific calculator with an f(x) plotter."""

__version__ = "1.0.0"
