"""Funding-mask encoding, budget rules and the exhaustive funding search."""
