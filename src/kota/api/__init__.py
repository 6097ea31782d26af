"""HTTP API for kota."""

from kota.api.app import create_app

__all__ = ["create_app"]
