"""cake: wiki schedule table reader."""

__version__ = "1.1.0"
