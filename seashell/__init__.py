"""seashell - a small interactive command shell."""

__version__ = "1.0.0"
