"""Spacetime memories backend."""
