"""User interfaces built on top of the docweave API."""
