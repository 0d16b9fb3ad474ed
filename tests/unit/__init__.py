"""Unit tests for individual helper components."""
