"""Core pipeline — Argument normalization, search execution and multi-engine orchestration."""
