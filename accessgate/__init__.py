"""AccessGate - access control with immediate revocation."""

__version__ = "1.0.0"
