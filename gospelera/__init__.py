"""Gospel Era safeguards: prayer-commitment spam scoring and password policy."""

__version__ = "0.1.0"
