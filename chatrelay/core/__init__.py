"""Core relay domain: identity, sessions, broadcast, expiration and translation."""
