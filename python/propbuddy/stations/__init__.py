"""Nearest rail station lookup backed by the Overpass API."""
