"""Configuration — settings models for webhooks and dispatch."""
