"""Provider-neutral file system interface."""
