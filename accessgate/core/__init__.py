"""Core primitives shared across the AccessGate service."""
