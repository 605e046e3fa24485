"""Service layer: pipeline, storage, uploads and LLM access."""
