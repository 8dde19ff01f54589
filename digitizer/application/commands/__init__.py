"""Application commands: every write to the session goes through one of these handlers."""
