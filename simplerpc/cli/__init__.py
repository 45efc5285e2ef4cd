"""CLI module for simplerpc."""
