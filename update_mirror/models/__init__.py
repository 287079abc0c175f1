"""Data models for normalization reports and sync outcomes."""
