"""Tests for node event dispatch and webhook delivery."""
