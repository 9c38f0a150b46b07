"""Operational scripts (migrations, development seed data)."""
