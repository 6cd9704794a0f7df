"""versioncheck — scheduled remote version-check client."""

__version__ = "0.1.0"
