"""AyurBot retrieval-augmented chat service."""
