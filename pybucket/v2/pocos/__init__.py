"""Data shapes mirroring Bitbucket Cloud API 2.0 resources."""

from pybucket.v2.pocos.links import Link, Links, NamedLink

__all__ = ["Link", "Links", "NamedLink"]
