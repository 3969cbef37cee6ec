"""Remote snapshot access."""
