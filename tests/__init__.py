"""Test suite for jtok."""
