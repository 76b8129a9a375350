"""costctl - cost observability and session replay CLI"""

__version__ = "0.1.0"
