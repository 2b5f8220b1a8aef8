"""MongoDB data-access layer for the PGC sign-up and email verification app."""

__version__ = "0.1.0"
