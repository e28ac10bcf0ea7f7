"""Merge engine: trackpoint streams, chronological merge and lap rebuild."""
