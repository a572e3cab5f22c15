"""
AccessGate API Tests

Request-level tests for authentication, role gating, and access administration.
"""
