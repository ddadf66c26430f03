"""Property Manager: GraphQL service for weather-enriched property records."""

__version__ = "0.1.0"
