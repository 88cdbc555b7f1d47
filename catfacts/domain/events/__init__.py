"""Domain Event definitions.

Represents significant occurrences in a resilient call (retries, fallbacks,
successful fetches) that observers log or enqueue.
"""
