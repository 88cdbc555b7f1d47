"""HTTP clients: named httpx clients with a transient-error retry policy."""
