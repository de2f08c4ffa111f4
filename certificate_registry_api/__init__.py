"""Certificate registry service package."""
