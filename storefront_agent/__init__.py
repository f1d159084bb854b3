"""Storefront agent: Commerce Layer stock & token coordinator."""
