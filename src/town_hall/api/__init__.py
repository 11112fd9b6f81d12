"""HTTP API for the Town Hall application."""
