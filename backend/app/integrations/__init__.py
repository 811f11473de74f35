"""External service integrations."""
from app.integrations.spotify import SpotifyCatalog, parse_release_date

__all__ = [
    "SpotifyCatalog",
    "parse_release_date",
]
