"""PyBucket: a Bitbucket Cloud API client and its test repository tooling."""

__version__ = "0.3.0"
