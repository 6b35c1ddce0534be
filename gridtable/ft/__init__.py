"""Formatted text helpers used to lay out table cells."""
