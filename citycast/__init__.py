"""cityCast backend: tour stop records, upstream API proxies and turn-by-turn navigation."""

__version__ = "1.0.0"
