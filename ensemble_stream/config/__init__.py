"""Configuration constants for Ensemble Stream."""
