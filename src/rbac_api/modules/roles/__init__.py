"""Roles module: roles and the permission catalogue."""
