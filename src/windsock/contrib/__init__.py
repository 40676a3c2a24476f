"""Plugins bundled with windsock."""
