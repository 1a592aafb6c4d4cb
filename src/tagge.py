"""tagge - Semantic versioning and tagging CLI for Git repositories

    Computes the next version from existing tags and the commits since the
    latest one, compares local tags with the remote, and optionally creates
    and pushes the new tag after confirmation.

    Returns:
        int: Exit code
"""
import json
import logging
import os
import shlex
import sys

from constants import ExitCodes, Constants
from common.logging_utils import add_file_handler, configure_logging, extra_context, is_debug_enabled
from args import parse_args
from cli_config import apply_cli_overrides, apply_config, find_config, load_config
from repository.git import GitRepository
from repository.remote_tags import fetch_remote_tags
from versioning.bump import with_prerelease
from versioning.classifier import build_rules
from versioning.errors import ExternalSourceError, GitCommandError, InconsistentHistoryError, RemoteSourceError
from versioning.models import BumpCategory
from versioning.parser import format_tag
from versioning.service import TagResolutionService

logger = logging.getLogger(__name__)


def confirm_continue(question, input_fn=None):
    """Ask a y/N question on the terminal; empty input means no."""
    input_fn = input_fn or input
    while True:
        try:
            answer = input_fn(f"{question} (y/N): ").strip().lower()
        except EOFError:
            answer = ""
        if answer in ("", "n", "no"):
            print("Aborted!")
            return False
        if answer in ("y", "yes"):
            print()
            return True


def open_repository(path):
    """Open the repository at ``path`` or exit with a repository error."""
    if not os.path.exists(path):
        logging.error("Path %s doesn't exist!", os.path.abspath(path))
        sys.exit(ExitCodes.REPOSITORY_ERROR.value)
    try:
        return GitRepository.discover(path)
    except GitCommandError as e:
        logging.info("Failed to get repo %s: %s", path, e)
        logging.error("Repository not found in: %s. Please check the path.", os.path.abspath(path))
        sys.exit(ExitCodes.REPOSITORY_ERROR.value)


def tag_command(tag_name, sign=False):
    """Render the git command that creates ``tag_name``."""
    flag = "-s" if sign else "-a"
    return f"git tag {flag} {shlex.quote(tag_name)} -m {shlex.quote('Release ' + tag_name)}"


def tag_message(tag_name, commits):
    """Annotated tag message: release line followed by the commit subjects."""
    lines = [f"Release {tag_name}"]
    if commits:
        lines.append("")
        lines.extend(f"- {c.short_hash} {c.subject}" for c in commits)
    return "\n".join(lines)


def print_report(result, tag_name, on_release_branch, sign=False):
    """Print the resolution result for a terminal user."""
    if result.current_tag is not None:
        print(f"Latest tag: {result.current_tag.raw_name}")
        print(f"  SHA: {result.current_tag.commit_hash}")
        print(f"  Version: {format_tag(result.current, Constants.TAG_PREFIX)}")
        if result.current.is_prerelease:
            print(f"  Pre-release of {format_tag(result.current.release(), Constants.TAG_PREFIX)}")
        print()
    else:
        print("No version tags found, starting from the initial version.\n")

    print("Commits:" if result.commits else "Commits: none")
    for commit in result.commits:
        print(f"  {commit.short_hash} {commit.subject}")
    print()

    if not result.has_new_version:
        print("No version bump warranted by the commits since the latest tag.")
        return

    print(f"Bump: {result.bump.name.lower()}")
    print(f"New version: {tag_name}\n")
    if on_release_branch:
        print(f"Command:\n{tag_command(tag_name, sign)}\n")


def export_json(result, tag_name, path):
    """Exports the resolution result to a JSON file.

    Args:
        result (ResolutionResult): Result to export.
        tag_name (str): Tag name proposed for the candidate.
        path (str): File path to export the JSON.
    """
    data = result.to_dict()
    data["tag"] = tag_name if result.has_new_version else None
    try:
        with open(path, 'w', encoding='utf-8') as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.REPOSITORY_ERROR.value)


def _setup_logging(args):
    level = "DEBUG" if getattr(args, "DEBUG", False) else str(args.LOG_LEVEL).upper()
    os.environ[Constants.ENV_LOG_LEVEL] = level
    configure_logging(level)
    if getattr(args, "LOG_FILE", None):
        add_file_handler(args.LOG_FILE)
    if level == "DEBUG":
        logging.info("Running in debug mode!")


def main(argv=None):
    """Main function of the program."""
    # pylint: disable=too-many-branches, too-many-statements, too-many-locals
    args = parse_args(argv)
    _setup_logging(args)

    repo = open_repository(args.PATH)

    config_path = args.CONFIG or find_config(repo.path)
    apply_config(load_config(config_path))
    apply_cli_overrides(args)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action="main", target=repo.path)
        )

    # Check branch
    branch = repo.current_branch()
    on_release_branch = branch is None or branch in Constants.RELEASE_BRANCHES
    if not on_release_branch:
        print(f"Note: You are on branch '{branch}', not {' or '.join(repr(b) for b in Constants.RELEASE_BRANCHES)}!\n")

    if not args.NO_FETCH:
        try:
            repo.fetch(Constants.REMOTE_NAME)
        except GitCommandError as e:
            logging.warning("git fetch from %s failed, continuing with local tags: %s", Constants.REMOTE_NAME, e)

    bump_override = BumpCategory.from_name(args.bump) if args.bump else None
    service = TagResolutionService(build_rules(Constants.CLASSIFIER_PATTERNS))
    try:
        local_tags = repo.local_tags()
        remote_tags = fetch_remote_tags(repo)
        result = service.resolve(local_tags, repo, remote_tags=remote_tags, bump_override=bump_override)
    except InconsistentHistoryError as e:
        if e.tag_name:
            logging.error("Inconsistent history at tag %s: %s", e.tag_name, e)
        else:
            logging.error("Inconsistent history: %s", e)
        sys.exit(ExitCodes.INCONSISTENT_HISTORY.value)
    except RemoteSourceError as e:
        logging.error("Could not read remote tags: %s", e)
        sys.exit(ExitCodes.CONNECTION_ERROR.value)
    except ExternalSourceError as e:
        logging.error("%s", e)
        sys.exit(ExitCodes.REPOSITORY_ERROR.value)

    candidate = result.candidate
    if args.SUFFIX and result.has_new_version:
        try:
            candidate = with_prerelease(candidate, args.SUFFIX)
        except ValueError as e:
            logging.error("Invalid --suffix %r: %s", args.SUFFIX, e)
            sys.exit(ExitCodes.USAGE_ERROR.value)
    tag_name = args.TAG or format_tag(candidate, Constants.TAG_PREFIX)

    for tag in result.skipped_tags:
        logging.debug("Ignored non-semver tag: %s", tag.raw_name)
    for divergence in result.divergences:
        logging.warning("Tag divergence: %s", divergence.describe())

    print_report(result, tag_name, on_release_branch, sign=args.SIGN)

    if getattr(args, "OUTPUT", None):
        export_json(result, tag_name, args.OUTPUT)

    warnings_exit = bool(result.divergences) and args.ERROR_ON_WARNINGS

    if result.has_new_version and not args.DRY_RUN:
        if any(t.raw_name == tag_name for t in local_tags):
            logging.error("Tag %s already exists.", tag_name)
            sys.exit(ExitCodes.REPOSITORY_ERROR.value)
        question = f"Create tag {tag_name}?"
        if not on_release_branch:
            question = f"Are you sure you want to create tag {tag_name} on branch '{branch}'?"
        if not (args.ASSUME_YES or confirm_continue(question)):
            sys.exit(ExitCodes.SUCCESS.value)
        try:
            repo.create_tag(tag_name, tag_message(tag_name, result.commits), sign=args.SIGN)
            logging.info("Created tag %s", tag_name)
            if args.PUSH:
                if args.ASSUME_YES or confirm_continue(f"Push tag {tag_name} to {Constants.REMOTE_NAME}?"):
                    repo.push_tag(Constants.REMOTE_NAME, tag_name)
                    logging.info("Pushed tag %s to %s", tag_name, Constants.REMOTE_NAME)
        except GitCommandError as e:
            logging.error("%s", e)
            sys.exit(ExitCodes.REPOSITORY_ERROR.value)

    if warnings_exit:
        logging.error("Tag divergences present, exiting with non-zero status code.")
        sys.exit(ExitCodes.EXIT_WARNINGS.value)

    sys.exit(ExitCodes.SUCCESS.value)


if __name__ == "__main__":
    main()
