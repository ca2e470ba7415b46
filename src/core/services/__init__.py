"""Operaciones de ejemplo sobre el wrapper `JsonApi`."""
