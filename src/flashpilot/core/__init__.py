"""Core infrastructure: config, logging, errors."""
