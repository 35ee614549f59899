"""Data models for DeepFlow."""
