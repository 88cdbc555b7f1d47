"""catfacts: fetches cat facts from an unreliable endpoint under a retry-then-fallback policy."""

__version__ = "1.0.0"
