"""Shared infrastructure: paths, configuration, logging, errors, validation."""
