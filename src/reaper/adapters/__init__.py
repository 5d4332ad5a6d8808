"""Adapters implementing the domain ports against remote HTTP APIs."""
