"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the application to external systems like:
- The REST API (requests session + error interceptors)
- Durable storage (JSON files, memory)
- The token cookie (http.cookiejar)
- Navigation (in-memory router)
- Caching (timestamped, persisted cache)
"""
