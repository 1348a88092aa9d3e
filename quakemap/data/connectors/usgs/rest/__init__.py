"""USGS REST endpoints, schemas and fetcher."""
