"""Infrastructure services (events, registry, settings, logging, geometry lookup)."""
