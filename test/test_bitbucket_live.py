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

"""
End-to-end check of the fixture builder against a real, empty Bitbucket repository.

Runs only when TEST_REPOSITORY_URL, BITBUCKET_USERNAME and BITBUCKET_APP_PASSWORD are set.
The target repository must be empty, as the test pushes the fixture history into it.
"""

import sys
import os
import unittest
from urllib.parse import urlparse

import requests

# Add project root to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from pybucket.config import get_config, reset_config  # noqa: E402
from pybucket.git.credentials import EnvironmentCredentialsProvider  # noqa: E402
from pybucket.testing.fixture_repository_builder import (  # noqa: E402
    FixtureRepositoryBuilder, BRANCH_TO_ACCEPT, BRANCH_TO_DECLINE
)

API_BASE_URL = "https://api.bitbucket.org/2.0"

LIVE_SETTINGS_PRESENT = all(
    os.environ.get(name) for name in ("TEST_REPOSITORY_URL", "BITBUCKET_USERNAME", "BITBUCKET_APP_PASSWORD")
)


@unittest.skipUnless(LIVE_SETTINGS_PRESENT, "live Bitbucket settings not configured")
class TestFixtureRepositoryOnBitbucket(unittest.TestCase):

    def setUp(self):
        reset_config()
        self.config = get_config()
        workspace, slug = urlparse(self.config.test_repository_url).path.strip("/").split("/")[:2]
        self.repository_api_url = f"{API_BASE_URL}/repositories/{workspace}/{slug.removesuffix('.git')}"
        self.auth = (self.config.bitbucket_username, self.config.bitbucket_app_password)

    def tearDown(self):
        reset_config()

    def _get(self, url):
        response = requests.get(url, auth=self.auth, headers={"User-Agent": self.config.USER_AGENT}, timeout=30)
        response.raise_for_status()
        return response.json()

    def test_fill_repository_sets_main_branch_and_pushes_all_branches(self):
        with FixtureRepositoryBuilder(self.config.test_repository_url, EnvironmentCredentialsProvider()) as builder:
            info = builder.fill_repository()

        self.assertRegex(info.first_commit, r"^[0-9a-f]{40}$")

        repository = self._get(self.repository_api_url)
        self.assertEqual(repository["mainbranch"]["name"], info.base_branch)

        branches = self._get(f"{self.repository_api_url}/refs/branches")
        names = sorted(branch["name"] for branch in branches["values"])
        self.assertEqual(names, sorted([info.base_branch, BRANCH_TO_DECLINE, BRANCH_TO_ACCEPT]))


if __name__ == '__main__':
    unittest.main()
