"""Core engine: configuration, errors, crypto and the upload pipeline."""
