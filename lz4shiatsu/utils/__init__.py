"""Configuration helpers for lz4shiatsu."""
