#-
# #%L
# PyBucket
# %%
# Copyright (C) 2025 PyBucket contributors
# %%
# License: MIT
# See the LICENSE file distributed with this project for the full terms.
# #L%
#

"""Hypermedia links attached to Bitbucket resources (users, teams, repositories)."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Link(BaseModel):
    href: Optional[str] = None


class NamedLink(Link):
    """A link qualified by a name, e.g. the "https" or "ssh" clone link."""
    name: Optional[str] = None


class Links(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    self_link: Optional[Link] = Field(default=None, alias="self")
    repositories: Optional[Link] = None
    link: Optional[Link] = None
    followers: Optional[Link] = None
    avatar: Optional[Link] = None
    following: Optional[Link] = None
    clone: List[NamedLink] = Field(default_factory=list)

    def get_clone_url(self, protocol: str = "https") -> str:
        """
        Returns the clone URL for the given protocol.

        Raises:
            LookupError: If the resource exposes no clone link with that name
        """
        for named_link in self.clone:
            if named_link.name == protocol and named_link.href:
                return named_link.href
        available = [named_link.name for named_link in self.clone]
        raise LookupError(f"No '{protocol}' clone link available (found: {available})")
