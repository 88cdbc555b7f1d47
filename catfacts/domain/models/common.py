"""Defines common Value Objects used across the application.

These objects represent simple values like request paths, payloads and
client names, keeping signatures readable.
"""

from typing import NewType

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are plain values at runtime.
RelativePath = NewType("RelativePath", str)    # Path relative to a client's base URL
Payload = NewType("Payload", str)              # Raw string body returned by the endpoint
FactText = NewType("FactText", str)            # The fact extracted from the payload
ClientName = NewType("ClientName", str)        # Key of a registered HTTP client

