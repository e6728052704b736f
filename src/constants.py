"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FAILURE = 1
    CONNECTION_ERROR = 2
    UNSUPPORTED = 3


class ActionInputs(Enum):
    """Inputs declared by the action.

    Args:
        Enum (string): Input names as written in the workflow file.
    """

    GITHUB_TOKEN = "github-token"
    VERSION = "shiroa-version"
    ALLOW_PRERELEASES = "allow-prereleases"


class ActionOutputs(Enum):
    """Outputs published by the action.

    Args:
        Enum (string): Output names as read by later workflow steps.
    """

    CACHE_HIT = "cache-hit"
    VERSION = "shiroa-version"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    TOOL_NAME = "shiroa"
    DISPLAY_NAME = "Shiroa"
    REPOSITORY = "Myriad-Dreamin/shiroa"
    TAG_PREFIX = "v"
    LATEST = "latest"
    MIN_VERSION = "0.2.0"

    GITHUB_API_BASE = "https://api.github.com"
    GITHUB_WEB_BASE = "https://github.com"
    REPO_API_PER_PAGE = 100
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    DOWNLOAD_CHUNK_SIZE = 64 * 1024
    USER_AGENT = "setup-shiroa"

    LOG_FORMAT = "[%(levelname)s] %(message)s"
    CONFIG_SECTION = "setup-shiroa"

    # Runner environment
    ENV_LOG_LEVEL = "SETUP_SHIROA_LOG_LEVEL"
    ENV_GITHUB_ACTIONS = "GITHUB_ACTIONS"
    ENV_RUNNER_DEBUG = "RUNNER_DEBUG"
    ENV_RUNNER_TEMP = "RUNNER_TEMP"
    ENV_RUNNER_TOOL_CACHE = "RUNNER_TOOL_CACHE"
    ENV_GITHUB_OUTPUT = "GITHUB_OUTPUT"
    ENV_GITHUB_PATH = "GITHUB_PATH"
