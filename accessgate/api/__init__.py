"""AccessGate API application package."""
