"""Failure sources used to simulate a flaky endpoint."""
