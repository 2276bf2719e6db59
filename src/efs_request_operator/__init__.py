"""EFS Request Operator: provisions AWS EFS file systems for EfsRequest objects."""

__version__ = "0.1.0"
