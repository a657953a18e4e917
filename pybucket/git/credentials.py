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

"""Credentials supplied to git for network operations (clone, push)."""

import base64
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict

from pybucket.config import get_config


@dataclass(frozen=True)
class GitCredentials:
    username: str = ""
    password: str = ""

    @property
    def is_anonymous(self) -> bool:
        return not self.username and not self.password

    def to_git_env(self) -> Dict[str, str]:
        """
        Builds the environment that authenticates a single git invocation.

        The Authorization header is passed through git's GIT_CONFIG_* variables
        so that the secret never shows up in the process arguments.

        Returns:
            Dict[str, str]: Environment variables to merge into the git process environment
        """
        env = {'GIT_TERMINAL_PROMPT': '0'}
        if self.is_anonymous:
            return env

        token = base64.b64encode(f"{self.username}:{self.password}".encode('utf-8')).decode('ascii')
        env.update({
            'GIT_CONFIG_COUNT': '1',
            'GIT_CONFIG_KEY_0': 'http.extraHeader',
            'GIT_CONFIG_VALUE_0': f"Authorization: Basic {token}",
        })
        return env


class GitCredentialsProvider(ABC):
    """
    Capability handed to code that talks to a git remote.

    Implementations are asked again for every network operation, so they may
    rotate or refresh what they return.
    """

    @abstractmethod
    def get_credentials(self, url: str) -> GitCredentials:
        """
        Returns the credentials to use against the given remote URL.

        Args:
            url (str): The remote repository URL

        Returns:
            GitCredentials: Username/password pair, possibly anonymous
        """
        pass


class StaticCredentialsProvider(GitCredentialsProvider):
    """Always returns the same username and password (e.g. a Bitbucket app password)."""

    def __init__(self, username: str = "", password: str = ""):
        self._credentials = GitCredentials(username, password)

    def get_credentials(self, url: str) -> GitCredentials:
        return self._credentials


class EnvironmentCredentialsProvider(GitCredentialsProvider):
    """Reads BITBUCKET_USERNAME and BITBUCKET_APP_PASSWORD from the configuration on each request."""

    def get_credentials(self, url: str) -> GitCredentials:
        config = get_config()
        return GitCredentials(config.bitbucket_username, config.bitbucket_app_password)
