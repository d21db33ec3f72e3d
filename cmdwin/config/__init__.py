"""Configuration for cmdwin."""
