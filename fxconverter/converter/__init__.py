"""Bidirectional conversion state engine."""
