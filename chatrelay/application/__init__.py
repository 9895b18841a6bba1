"""Application services orchestrating persistence for the relay."""
