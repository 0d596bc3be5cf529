"""
Burrow Test Suite

Unit tests for the client, retry policy and models, plus lifecycle tests that
run UserResource, the CLI and the Pulumi provider against an in-memory broker.
"""
