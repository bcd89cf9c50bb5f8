"""CWA Weather API - JSON proxy for the Central Weather Administration forecast."""

__version__ = "1.0.0"
