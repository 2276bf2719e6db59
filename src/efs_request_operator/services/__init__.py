"""File system provider services."""
