"""HTTP client for the n8n public API."""
