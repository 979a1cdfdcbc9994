"""Adapters — LLM backends and the HTTP surface."""
