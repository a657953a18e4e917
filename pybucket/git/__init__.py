"""Git tooling: credentials, local working copies and directory cleanup."""
