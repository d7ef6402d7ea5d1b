"""Frequency conversion and detection sessions."""
