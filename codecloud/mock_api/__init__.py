"""Mock project-store API for local development and tests."""
