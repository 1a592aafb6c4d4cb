"""Argument parsing functionality for tagge."""

import argparse
from constants import Constants


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    parser = argparse.ArgumentParser(
        prog="tagge",
        description=(
            "tagge - Semantic versioning and tagging tool for Git repositories"
        ),
        add_help=True,
    )

    parser.add_argument("bump",
                        help=("Force the bump instead of inferring it from commits: "
                              "patch (v1.0.0 -> v1.0.1), minor (v1.0.0 -> v1.1.0), "
                              "major (v1.0.0 -> v2.0.0)"),
                        nargs="?",
                        type=str.lower,
                        choices=Constants.BUMP_LEVELS)
    parser.add_argument("-t", "--tag",
                        dest="TAG",
                        help="Override the generated tag name",
                        action="store",
                        type=str)
    parser.add_argument("--suffix",
                        dest="SUFFIX",
                        help="Pre-release suffix for the new version (e.g. rc.1)",
                        action="store",
                        type=str)
    parser.add_argument("--prefix",
                        dest="TAG_PREFIX",
                        help="Prefix used when rendering tag names (default: v)",
                        action="store",
                        type=str)
    parser.add_argument("-d", "--dry-run",
                        dest="DRY_RUN",
                        help="Only print the tag command, do not create a tag",
                        action="store_true")
    parser.add_argument("-p", "--path",
                        dest="PATH",
                        help="Path to the Git repository (default: current directory)",
                        action="store",
                        default=".",
                        type=str)
    parser.add_argument("--no-fetch",
                        dest="NO_FETCH",
                        help="Skip fetching git tags from the remote",
                        action="store_true")
    parser.add_argument("--remote",
                        dest="REMOTE",
                        help="Git remote to fetch from, compare with and push to (default: origin)",
                        action="store",
                        type=str)
    parser.add_argument("--remote-source",
                        dest="REMOTE_SOURCE",
                        help="Where to read remote tags from (default: git)",
                        action="store",
                        type=str.lower,
                        choices=Constants.SUPPORTED_REMOTE_SOURCES)
    parser.add_argument("--gh-token",
                        dest="GH_TOKEN",
                        help="GitHub token for the GitHub remote source (default: $GITHUB_TOKEN)",
                        action="store",
                        type=str)
    parser.add_argument("--gitlab-token",
                        dest="GITLAB_TOKEN",
                        help="GitLab token for the GitLab remote source (default: $GITLAB_TOKEN)",
                        action="store",
                        type=str)
    parser.add_argument("--push",
                        dest="PUSH",
                        help="Push the new tag to the remote after creating it",
                        action="store_true")
    parser.add_argument("--sign",
                        dest="SIGN",
                        help="Create a GPG-signed tag (git tag -s)",
                        action="store_true")
    parser.add_argument("-y", "--yes",
                        dest="ASSUME_YES",
                        help="Do not ask for confirmation",
                        action="store_true")
    parser.add_argument("-o", "--output",
                        dest="OUTPUT",
                        help="Write the resolution result as JSON to this file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)
    parser.add_argument("--error-on-warnings",
                        dest="ERROR_ON_WARNINGS",
                        help="Exit with a non-zero status code if tag divergences are found.",
                        action="store_true")
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("--debug",
                        dest="DEBUG",
                        help="Add additional debug logging (same as --loglevel DEBUG)",
                        action="store_true")

    return parser.parse_args(argv)
