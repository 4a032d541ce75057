# Infrastructure layer - storage backends and session tracking
"""
Infrastructure layer contains:
- Catalog storage backends (flat JSON files, SQLite document store)
- Session registry for the HTTP API

This layer depends on the domain layer, not vice versa.
"""
