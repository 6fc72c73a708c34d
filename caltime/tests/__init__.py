"""Test suite for caltime.

Organized into three categories:

1. core/: Unit tests for models and the TimeMachine engine
   - Uses in-memory fakes for ports

2. adapters/: Tests for adapter implementations
   - Reform calendar, zoneinfo resolver, CLI handler

3. fakes/: Port implementations for testing
"""
