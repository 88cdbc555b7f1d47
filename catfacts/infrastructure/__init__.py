"""Infrastructure Layer.

Contains concrete implementations of domain interfaces (resilience policies,
HTTP clients, failure sources, console display) plus configuration and logging.
"""
