"""setup-shiroa - install a prebuilt Shiroa release on a CI runner.

    Resolves the requested version against the published releases, installs
    the matching archive into the tool cache (or reuses a cached copy) and
    adds it to PATH for later workflow steps.

    Returns:
        int: Exit code
"""
import logging
import sys

from args import parse_args
from common import actions
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from config import SetupConfig, build_config
from constants import ActionOutputs, Constants, ExitCodes
from errors import SetupError
from installer import ArtifactInstaller, InstallResult
from repository.github import create_release_lister
from toolcache import ToolCache
from versioning.resolver import resolve_version

logger = logging.getLogger(__name__)


def _setup_logging(args) -> None:
    """Configure logging based on CLI arguments."""
    configure_logging()
    level_name = getattr(args, "LOG_LEVEL", None)
    if level_name:
        logging.getLogger().setLevel(getattr(logging, level_name, logging.INFO))

    log_file = getattr(args, "LOG_FILE", None)
    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(Constants.LOG_FORMAT))
        logging.getLogger().addHandler(file_handler)


def run(config: SetupConfig) -> InstallResult:
    """Resolve, install and publish one version of the tool."""
    if is_debug_enabled(logger):
        logger.debug(
            "Run configuration: %r",
            config,
            extra=extra_context(event="function_entry", component="cli", action="run")
        )

    lister = create_release_lister(config.github_token, config.repository, config.api_base)
    version = resolve_version(config.version, config.allow_prereleases, lister)
    if version != config.version:
        logger.info("Resolved %s version: %s", Constants.DISPLAY_NAME, version)

    installer = ArtifactInstaller(
        ToolCache(config.tool_cache),
        web_base=config.web_base,
        repository=config.repository,
        temp_dir=config.temp_dir,
    )
    result = installer.install(version)
    if result.cache_hit:
        actions.set_output(ActionOutputs.CACHE_HIT.value, str(result.path))

    actions.add_path(str(result.path))
    actions.set_output(ActionOutputs.VERSION.value, result.version)
    logger.info("✅ %s v%s installed!", Constants.DISPLAY_NAME, result.version)
    return result


def main(argv=None) -> int:
    """Main function of the program."""
    args = parse_args(argv)
    _setup_logging(args)
    try:
        run(build_config(args))
    except SetupError as exc:
        actions.set_failed(exc.message)
        return exc.exit_code.value
    return ExitCodes.SUCCESS.value


if __name__ == "__main__":
    sys.exit(main())
