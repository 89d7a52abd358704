"""Ready-made effect producers."""

from storeff.effects.http import http, http_request
from storeff.effects.time import after, delay

__all__ = [
    "after",
    "delay",
    "http",
    "http_request",
]
