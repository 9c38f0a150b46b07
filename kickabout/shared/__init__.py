"""Persistence layer shared by the API and the maintenance scripts."""
