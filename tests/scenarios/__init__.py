"""Scenario tests for encapsulated-e2e.

These tests drive a real encapsulated nx workspace end to end: fixture
files are written, the CLI is invoked through the ./nx wrapper, and the
output and resulting files are checked. They need network access to the
registry serving the published version under test.
"""
