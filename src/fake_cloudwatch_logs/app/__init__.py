"""Core query engine: store, cursor tokens, pagination and event windowing."""
