"""Core domain: models, ports and the sampling loop."""
