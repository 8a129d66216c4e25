"""Check HTTP services, keep a rolling JSON status log and render an HTML status page."""

__version__ = "0.1.0"
__all__ = ["__version__"]