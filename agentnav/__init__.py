"""agentnav — a file-backed directory of AI agents with a local admin overlay."""

__version__ = "0.1.0"
