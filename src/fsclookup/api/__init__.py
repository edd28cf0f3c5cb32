"""HTTP API for fsclookup."""

from fsclookup.api.endpoints import create_api_router

__all__ = ["create_api_router"]
