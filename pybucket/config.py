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

import os
from typing import Optional, Any
from pybucket.utils import debug_log, log


class PyBucketConfig:
    """
    Configuration manager for PyBucket.
    Handles loading, validating, and accessing configuration values.
    """

    # Preset values
    VERSION = "v0.3.0"
    USER_AGENT = f"pybucket {VERSION}"
    DEFAULT_TEST_REPOSITORIES_FOLDER = "PyBucketTestRepositories"

    def __init__(self, env_vars=None):
        """
        Initialize the configuration manager.

        Args:
            env_vars: Optional dictionary of environment variables (for testing)
        """
        self.env_vars = env_vars if env_vars is not None else os.environ
        self._load_config()

    def _get_env_var(self, var_name: str, required: bool = False, default: Optional[Any] = None) -> Optional[str]:
        """Gets an environment variable or raises if required and not found."""
        value = self.env_vars.get(var_name)
        if required and not value:
            log(f"Error: Required environment variable {var_name} is not set.", is_error=True)
            raise ValueError(f"Required environment variable {var_name} is not set.")
        return value if value else default

    def _load_config(self):
        """Loads all configuration from environment variables."""

        # --- Core Settings ---
        self.debug_mode = self._get_env_var("DEBUG_MODE", default="false").lower() == "true"
        self.git_executable = self._get_env_var("GIT_EXECUTABLE", default="git")

        # --- Fixture repositories ---
        self.test_repositories_folder = self._get_env_var(
            "TEST_REPOSITORIES_FOLDER", default=self.DEFAULT_TEST_REPOSITORIES_FOLDER
        )
        self.test_repository_url = self._get_env_var("TEST_REPOSITORY_URL")
        self.delete_max_attempts = self._get_delete_max_attempts()

        # --- Bitbucket Configuration ---
        self.bitbucket_username = self._get_env_var("BITBUCKET_USERNAME", default="")
        self.bitbucket_app_password = self._get_env_var("BITBUCKET_APP_PASSWORD", default="")

    def _get_delete_max_attempts(self) -> int:
        """Validates and normalizes the DELETE_MAX_ATTEMPTS setting."""
        default_max_attempts = 5
        hard_cap_attempts = 10
        try:
            max_attempts = int(self._get_env_var("DELETE_MAX_ATTEMPTS", default=str(default_max_attempts)))
            if max_attempts < 1:
                log(f"DELETE_MAX_ATTEMPTS ({max_attempts}) is too low. Using minimum value: 1", is_warning=True)
                return 1
            if max_attempts > hard_cap_attempts:
                log(f"DELETE_MAX_ATTEMPTS ({max_attempts}) exceeded hard cap ({hard_cap_attempts}). Using {hard_cap_attempts}.", is_warning=True)
                return hard_cap_attempts
            return max_attempts
        except (ValueError, TypeError):
            log(f"Invalid DELETE_MAX_ATTEMPTS value. Using default: {default_max_attempts}", is_warning=True)
            return default_max_attempts

    def log_summary(self):
        debug_log(f"Debug Mode: {self.debug_mode}")
        debug_log(f"Git Executable: {self.git_executable}")
        debug_log(f"Test Repositories Folder: {self.test_repositories_folder}")
        debug_log(f"Delete Max Attempts: {self.delete_max_attempts}")
        if self.bitbucket_username:
            debug_log(f"Bitbucket Username: {self.bitbucket_username}")


_config_instance: Optional[PyBucketConfig] = None


def get_config() -> PyBucketConfig:
    """Returns the process-wide configuration, loading it on first use."""
    global _config_instance
    if _config_instance is None:
        _config_instance = PyBucketConfig()
        _config_instance.log_summary()
    return _config_instance


def reset_config():
    """Drops the cached configuration so the next get_config() reloads the environment."""
    global _config_instance
    _config_instance = None
