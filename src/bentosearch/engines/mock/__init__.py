"""Mock engine for tests and development."""
