"""Utility modules for rrulekit."""
