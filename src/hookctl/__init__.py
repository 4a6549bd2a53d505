"""hookctl — Git hook installation and dispatch driven by plugin metadata."""

__version__ = "0.1.0"
