"""Constants used in the project."""

from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    REPOSITORY_ERROR = 1
    CONNECTION_ERROR = 2
    EXIT_WARNINGS = 3
    INCONSISTENT_HISTORY = 4
    USAGE_ERROR = 5


class RemoteSources(Enum):
    """Where the remote tag set is read from.

    Args:
        Enum (string): Remote tag sources supported by the program.
    """

    GIT = "git"
    GITHUB = "github"
    GITLAB = "gitlab"
    NONE = "none"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    Values may be overridden at start-up from the config file and CLI.
    """

    TAG_PREFIX = "v"
    REMOTE_NAME = "origin"
    REMOTE_SOURCE = RemoteSources.GIT.value
    SUPPORTED_REMOTE_SOURCES = [s.value for s in RemoteSources]
    BUMP_LEVELS = ["patch", "minor", "major"]
    RELEASE_BRANCHES = ["main", "master"]
    CONFIG_FILES = [".tagge.yml", ".tagge.yaml"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    ENV_LOG_LEVEL = "TAGGE_LOG_LEVEL"
    GIT_EXECUTABLE = "git"

    # Classifier patterns from config: {"major": [...], "minor": [...], "patch": [...]}
    CLASSIFIER_PATTERNS = {}

    # Repository API constants
    GITHUB_API_BASE = "https://api.github.com"
    GITLAB_API_BASE = "https://gitlab.com/api/v4"
    ENV_GITHUB_TOKEN = "GITHUB_TOKEN"
    ENV_GITLAB_TOKEN = "GITLAB_TOKEN"
    GITHUB_TOKEN = None
    GITLAB_TOKEN = None
    REPO_API_PER_PAGE = 100
    REQUEST_TIMEOUT = 30  # Timeout in seconds for all HTTP requests
    HTTP_RETRY_MAX = 3
    HTTP_RETRY_BASE_DELAY_SEC = 0.3
    HTTP_CACHE_TTL_SEC = 300
