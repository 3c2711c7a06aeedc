"""Service connectors."""
