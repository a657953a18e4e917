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
Forced deletion of git working copies.

Git marks object files read-only, and on some systems indexers, antivirus
scanners or shell extensions briefly hold handles on freshly written files.
Deletion therefore normalizes permissions first and retries transient
failures with an exponential backoff before giving up with a warning.
"""

import os
import shutil
import stat
import time
from enum import Enum

from pybucket.utils import debug_log, log

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_INITIAL_TIMEOUT_MS = 16
DEFAULT_TIMEOUT_FACTOR = 2


class DeletionErrorKind(Enum):
    TRANSIENT = "TRANSIENT"
    FATAL = "FATAL"


def classify_deletion_error(error: BaseException) -> DeletionErrorKind:
    """Tells whether a failed deletion is worth retrying."""
    # A file where a directory was expected will not go away by waiting
    if isinstance(error, NotADirectoryError):
        return DeletionErrorKind.FATAL
    # I/O errors and access denied (PermissionError) come from handles held by other processes
    if isinstance(error, OSError):
        return DeletionErrorKind.TRANSIENT
    return DeletionErrorKind.FATAL


def delete_git_directory(directory_path, max_attempts: int = DEFAULT_MAX_ATTEMPTS):
    """
    Deletes a git working copy, tolerating transient locks.

    Does nothing when the directory does not exist.
    """
    if not os.path.exists(directory_path):
        return
    try:
        normalize_attributes(directory_path)
    except Exception as e:
        if classify_deletion_error(e) is DeletionErrorKind.FATAL:
            raise
        # The deletion attempts below report the failure if the lock persists
        debug_log(f"Could not normalize attributes under {directory_path} ({type(e).__name__}: {e})")
    delete_directory(directory_path,
                     max_attempts=max_attempts,
                     initial_timeout=DEFAULT_INITIAL_TIMEOUT_MS,
                     timeout_factor=DEFAULT_TIMEOUT_FACTOR)


def normalize_attributes(directory_path):
    """Gives the owner full access to every file and directory in the tree."""
    _make_accessible(directory_path, is_dir=True)
    for root, dir_names, file_names in os.walk(directory_path):
        # Directories are fixed before os.walk descends into them
        for dir_name in dir_names:
            _make_accessible(os.path.join(root, dir_name), is_dir=True)
        for file_name in file_names:
            _make_accessible(os.path.join(root, file_name), is_dir=False)


def _make_accessible(path, is_dir: bool):
    if os.path.islink(path):
        return
    mode = os.stat(path).st_mode
    required = stat.S_IRWXU if is_dir else stat.S_IRUSR | stat.S_IWUSR
    if mode & required != required:
        os.chmod(path, mode | required)


def delete_directory(directory_path, max_attempts: int, initial_timeout: int, timeout_factor: int):
    """
    Recursively deletes ``directory_path`` with bounded retries.

    Args:
        directory_path: Directory to delete
        max_attempts: Total number of deletion attempts
        initial_timeout: Wait in milliseconds after the first failed attempt
        timeout_factor: Multiplier applied to the wait after each further failure

    Raises:
        Exception: Any error classified as FATAL, immediately and without retry
    """
    for attempt in range(1, max_attempts + 1):
        if not os.path.exists(directory_path):
            return
        try:
            shutil.rmtree(directory_path)
            return
        except Exception as e:
            if classify_deletion_error(e) is DeletionErrorKind.FATAL:
                raise

            if attempt < max_attempts:
                wait_ms = initial_timeout * timeout_factor ** (attempt - 1)
                debug_log(f"Attempt {attempt} to delete {directory_path} failed ({type(e).__name__}), retrying in {wait_ms}ms")
                time.sleep(wait_ms / 1000)
                continue

            log(_describe_undeletable_directory(directory_path, max_attempts, e), is_warning=True)


def _describe_undeletable_directory(directory_path, attempts: int, error: BaseException) -> str:
    return (
        f"The directory '{os.path.abspath(directory_path)}' could not be deleted ({attempts} attempts were made)\n"
        f"This is due to a {type(error).__name__}: {error}\n"
        "Most of the time, this is due to an external process accessing the files in the temporary repositories "
        "created during the test runs, and keeping a handle on the directory, thus preventing the deletion of those files.\n"
        "Known and common causes include:\n"
        "- Search indexers (exclude the test repositories folder of your temp directory from indexing)\n"
        "- Antivirus (exclude the test repositories folder of your temp directory from real-time scanning)\n"
        "- Git shell extensions such as TortoiseGit icon overlays (add the folder to their excluded paths)"
    )
