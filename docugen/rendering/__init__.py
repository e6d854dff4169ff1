"""Rendering of parsed templates and output of the result."""
