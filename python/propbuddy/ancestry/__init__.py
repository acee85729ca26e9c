"""Suburb ancestry profiles: static dataset lookup and the ABS data API."""
