"""API routers, mounted under ``/api/v1`` by ``vidtube.main``."""
