"""Test helpers shared across unit tests."""
