"""Document digitizer backend."""
