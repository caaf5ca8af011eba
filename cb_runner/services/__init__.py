"""Auxiliary runner services."""
