"""Application layer: services that coordinate the core and the boundaries."""
