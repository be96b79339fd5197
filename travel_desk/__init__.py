"""Top-level package for the travel-desk client.

This package exposes the client-side layer of the corporate travel request
application: session handling on top of a bearer token, the HTTP client
and its error interceptors, the cached destination search and the travel
request list.
"""

from .app import create_app
from .container import Container

__all__ = ["create_app", "Container"]
