"""Pluggable EONAC modules."""
