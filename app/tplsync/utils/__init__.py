"""Utility helpers for tplsync."""
