"""Core Application Layer.

Contains the application services and the command handler that orchestrate
use cases by coordinating domain interfaces and infrastructure.
"""
