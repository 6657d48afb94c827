"""Application wiring for the cloud storage client."""
