"""Terminal dashboard for container runtime volumes."""

__version__ = "0.1.0"
