"""Health check clients, configuration sections and alert providers for a status monitor."""

__version__ = "0.1.0"