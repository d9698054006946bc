"""campusctl — campus spatial graph editor and route finder."""

__version__ = "0.1.0"
