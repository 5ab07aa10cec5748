"""Application use cases orchestrating the dispatch engine."""
