"""RBAC API: role-based access control for an HTTP API."""

__version__ = "0.1.0"
