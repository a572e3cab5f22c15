"""Current account module."""
