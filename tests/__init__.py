"""Test suite for Port Monitor."""
