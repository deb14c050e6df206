"""Building blocks for a container-compose command line."""

__version__ = "0.1.0"