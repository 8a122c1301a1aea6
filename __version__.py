"""Version information for reinitkbd."""

__version__ = '0.3.0'
