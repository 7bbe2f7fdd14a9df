"""Latent topic feedback: topic-model driven query expansion for search."""
