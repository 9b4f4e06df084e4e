"""Core runtime services shared by all streams."""
