"""Adapters delegating document work to external tools and libraries."""
