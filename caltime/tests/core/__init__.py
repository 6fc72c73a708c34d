"""Unit tests for core domain logic.

These tests exercise the engine without the concrete adapters.
All ports are replaced with in-memory fakes from tests/fakes/.
"""
