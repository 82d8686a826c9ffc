"""Persistence for VisualMemory."""
