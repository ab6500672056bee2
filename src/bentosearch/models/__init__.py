"""Data models — Search requests, result sets and result items."""
