"""HTTP layer: routes, response formatting and the app factory."""

from gsa_api.api.app import create_app, create_app_from_env

__all__ = [
    "create_app",
    "create_app_from_env",
]
