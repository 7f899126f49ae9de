"""Blog content API backed by MongoDB."""
