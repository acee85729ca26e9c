"""Address resolution and autosuggest backed by Nominatim."""
