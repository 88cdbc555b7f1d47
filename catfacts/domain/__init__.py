"""Domain layer: value objects, events and the interfaces the core depends on."""
