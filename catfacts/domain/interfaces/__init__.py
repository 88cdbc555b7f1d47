"""Domain Interfaces (Abstract Base Classes).

Contracts implemented by the infrastructure layer (policies, HTTP clients,
failure sources, user interface).
"""
