"""Service booking platform backend."""
