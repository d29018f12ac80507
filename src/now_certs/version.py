"""Single source of truth for the now-certs version string."""

__version__ = "1.0.0"
