"""Instant Recipe - preference-aware recipe generation service."""
