"""Application queries: read-only views over the session."""
