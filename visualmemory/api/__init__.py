"""HTTP feed for VisualMemory."""
