"""Capture devices and spectrum analysis."""
