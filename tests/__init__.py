"""Test suite for mileview."""
