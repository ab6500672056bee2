"""Search engine layer — Pluggable connectors for external search sources.

Built-in engines:
  - mock: configurable fake engine for tests and development
  - http: ``HttpSearchEngine`` base class with a shared httpx client

Subclass ``SearchEngine`` (or ``HttpSearchEngine``) to connect your own source.
"""
