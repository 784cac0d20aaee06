"""Tests for the metrics module."""
