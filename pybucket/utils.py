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
import subprocess
import sys
import platform

# Unicode to ASCII fallback mappings for Windows
UNICODE_FALLBACKS = {
    '❌': 'X',  # ❌ -> X
    '✅': '',  # ✅ -> ''
    '✨': '*',  # ✨ -> *
    '⚠️': '!',  # ⚠️ -> !
}

# Environment variables whose values must never be echoed in debug output
SENSITIVE_ENV_VARS = ('GIT_CONFIG_VALUE_0', 'BITBUCKET_APP_PASSWORD')


def safe_print(message, file=None, flush=True):
    """Safely print message, handling encoding issues on Windows."""
    try:
        print(message, file=file, flush=flush)
    except UnicodeEncodeError:
        # On Windows, replace Unicode chars with ASCII equivalents
        for unicode_char, ascii_fallback in UNICODE_FALLBACKS.items():
            message = message.replace(unicode_char, ascii_fallback)

        # Replace any remaining problematic Unicode characters with '?'
        if platform.system() == 'Windows':
            message = ''.join([c if ord(c) < 128 else '?' for c in message])

        print(message, file=file, flush=flush)


def log(message: str, is_error: bool = False, is_warning: bool = False):
    """Prints a message to stdout, or stderr for errors."""
    if is_error:
        safe_print(message, file=sys.stderr, flush=True)
    elif is_warning:
        safe_print(f"WARNING: {message}", flush=True)
    else:
        safe_print(message, flush=True)


def debug_log(*args, **kwargs):
    """Prints only if DEBUG_MODE is enabled in the configuration."""
    # Lazy import to avoid circular dependency (config logs through this module)
    from pybucket.config import get_config

    if get_config().debug_mode:
        message = " ".join(map(str, args))
        safe_print(message, flush=True)


class CommandExecutionError(Exception):
    """Custom exception for errors during command execution."""
    def __init__(self, message, return_code, command, stdout=None, stderr=None):
        super().__init__(message)
        self.return_code = return_code
        self.command = command
        self.stdout = stdout
        self.stderr = stderr


def _log_stream(label, text, is_error=False):
    # Truncate very large output for readability
    if len(text) > 1000:
        body = f"  {label} (truncated):\n---\n{text[:500]}...\n...{text[-500:]}\n---"
    else:
        body = f"  {label}:\n---\n{text}\n---"
    if is_error:
        log(body, is_error=True)
    else:
        debug_log(body)


def run_command(command, env=None, check=True, cwd=None):
    """
    Runs a command and returns its stdout.
    Prints command, stdout/stderr based on DEBUG_MODE.

    Args:
        command: List of command and arguments to run
        env: Optional environment variables merged over the current environment
        check: Whether to raise on command failure
        cwd: Optional working directory for the command

    Returns:
        str: Command stdout output, stripped

    Raises:
        CommandExecutionError: If check=True and command fails
    """
    try:
        options_text = f"Options: check={check}"
        if cwd:
            options_text += f", cwd={cwd}"
        if env:
            for name in SENSITIVE_ENV_VARS:
                if env.get(name):
                    # Don't print credentials
                    options_text += f", {name}=***"

        debug_log(f"::group::Running command: {' '.join(command)}")
        debug_log(f"  {options_text}")

        # Merge with current environment to preserve essential variables like PATH
        full_env = os.environ.copy()
        if env:
            full_env.update(env)

        process = subprocess.run(
            command,
            capture_output=True,
            text=True,
            encoding='utf-8',
            errors='replace',
            check=False,  # We'll handle errors ourselves
            env=full_env,
            cwd=cwd
        )

        debug_log(f"  Return Code: {process.returncode}")
        if process.stdout:
            _log_stream("Command stdout", process.stdout.strip())

        if process.stderr:
            stderr_text = process.stderr.strip()
            if process.returncode != 0:
                _log_stream("Command stderr", stderr_text, is_error=True)
            elif stderr_text:
                # git reports progress on stderr even when it succeeds
                _log_stream("Command stderr", stderr_text)

        if check and process.returncode != 0:
            log(f"Error: Command failed with return code {process.returncode}: {' '.join(command)}", is_error=True)
            error_details = process.stderr.strip() if process.stderr else "No error output available"
            raise CommandExecutionError(
                message=f"Command '{' '.join(command)}' failed with return code {process.returncode}.",
                return_code=process.returncode,
                command=' '.join(command),
                stdout=process.stdout.strip() if process.stdout else None,
                stderr=error_details
            )

        return process.stdout.strip() if process.stdout else ""
    finally:
        debug_log("::endgroup::")
