"""Argument parsing functionality for setup-shiroa."""

import argparse

from constants import ActionInputs


def parse_args(argv=None):
    """Parses the arguments passed to the program.

    Every option is optional; anything left unset falls back to the action
    inputs provided by the runner.
    """
    parser = argparse.ArgumentParser(
        prog="setup-shiroa",
        description=(
            "setup-shiroa - install a prebuilt Shiroa release and add it to PATH"
        ),
        add_help=True,
    )

    parser.add_argument("-v", "--version-spec",
                        dest="VERSION",
                        help=f"Version to install: 'latest', a semver range or an exact version "
                             f"(default: the '{ActionInputs.VERSION.value}' input, else latest)",
                        action="store",
                        type=str)
    parser.add_argument("--allow-prereleases",
                        dest="ALLOW_PRERELEASES",
                        help="Consider pre-release versions when resolving a range",
                        action=argparse.BooleanOptionalAction,
                        default=None)
    parser.add_argument("--github-token",
                        dest="GITHUB_TOKEN",
                        help="Token used to list releases through the authenticated API",
                        action="store",
                        type=str)
    parser.add_argument("--tool-cache",
                        dest="TOOL_CACHE",
                        help="Tool cache root (default: $RUNNER_TOOL_CACHE)",
                        action="store",
                        type=str)

    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML or YML)",
                        action="store",
                        type=str)
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)

    return parser.parse_args(argv)
