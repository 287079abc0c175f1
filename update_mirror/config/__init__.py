"""Configuration loading for sync runs."""
