"""Textual host for the cmdwin palette."""
