"""TCX document boundary: parsing and serialization."""
