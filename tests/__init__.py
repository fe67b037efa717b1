"""Tests for docbridge.

Covers the canonical encoding rule, partial shapes, the serialization
bridge, model collections and the store adapters. No live MongoDB is
required; store interactions use the in-memory adapter or mocks.
"""
