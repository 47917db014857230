"""
jiranch CLI - Command routing and handlers
"""

import logging
import sys
from pathlib import Path
from typing import Optional

import click

from jiranch import __version__
from jiranch.branch import derive_branch_name
from jiranch.config import (
    ConfigError,
    ConfigNotFoundError,
    get_config_path,
    init_config,
    load_config,
)
from jiranch.jira import JiraClient, JiraClientError, JiraRequestError
from jiranch.utils import (
    expand_path,
    get_default_config_dir,
    print_error,
    print_info,
    print_success,
    print_warning,
    setup_logging,
)

logger = logging.getLogger("jiranch.cli")

USAGE = "Usage: jiranch [config|gen ISSUE_ID]"


class JiranchGroup(click.Group):
    """Command group that reports usage errors with exit status 1."""

    def main(self, args=None, prog_name=None, complete_var=None, standalone_mode=True, **extra):
        try:
            return super().main(
                args=args,
                prog_name=prog_name,
                complete_var=complete_var,
                standalone_mode=False,
                **extra,
            )
        except click.UsageError as e:
            e.show()
            sys.exit(1)
        except click.ClickException as e:
            e.show()
            sys.exit(e.exit_code)
        except click.Abort as e:
            if isinstance(e.__cause__, KeyboardInterrupt):
                print_info("\n\nInterrupted by user")
                sys.exit(130)
            print_error("Aborted")
            sys.exit(1)


@click.group(cls=JiranchGroup, invoke_without_command=True)
@click.version_option(version=__version__, prog_name="jiranch")
@click.option(
    "--config-dir",
    envvar="JIRANCH_CONFIG_DIR",
    type=click.Path(file_okay=False),
    help="Directory holding config.yml (default: ~/.local/share/jiranch)",
)
@click.option("--verbose", "-v", is_flag=True, help="Print debug logs to stderr")
@click.pass_context
def cli(ctx, config_dir: Optional[str], verbose: bool):
    """
    jiranch - Generate git branch names from Jira tickets.

    \b
    Examples:
        jiranch config
        jiranch gen ABC-42
    """
    resolved_dir = expand_path(config_dir) if config_dir else get_default_config_dir()
    ctx.obj = {"config_dir": resolved_dir}

    setup_logging(resolved_dir, verbose)
    logger.debug(f"Using config directory {resolved_dir}")

    if ctx.invoked_subcommand is None:
        click.echo(USAGE, err=True)
        sys.exit(1)


@cli.command()
@click.pass_context
def config(ctx):
    """
    Interactively record the Jira URL, credentials and short name.

    Existing values are offered as defaults.
    """
    config_dir: Path = ctx.obj["config_dir"]

    existing = None
    try:
        existing = load_config(config_dir)
    except ConfigNotFoundError:
        pass
    except ConfigError as e:
        print_warning(f"Ignoring unreadable config: {e}")

    try:
        init_config(config_dir, existing)
    except ConfigError as e:
        logger.error(f"Failed to save config: {e}")
        print_error(f"Failed to save config: {e}")
        sys.exit(1)

    print_success(f"Configuration saved to {get_config_path(config_dir)}")


@cli.command()
@click.argument("issue_id", required=False)
@click.pass_context
def gen(ctx, issue_id: Optional[str]):
    """
    Print a branch name for a Jira issue.

    ISSUE_ID: Jira issue key (e.g., "ABC-42")

    \b
    Examples:
        jiranch gen ABC-42
        git checkout -b "$(jiranch gen ABC-42)"
    """
    if not issue_id:
        print_error("Please provide an issue ID, for example `jiranch gen XXX-512`")
        sys.exit(1)

    config_dir: Path = ctx.obj["config_dir"]

    try:
        cfg = load_config(config_dir)
    except ConfigNotFoundError:
        print_error("Please run `jiranch config` first to generate the config file.")
        sys.exit(1)
    except ConfigError as e:
        logger.error(f"Failed to read config: {e}")
        print_error(f"Failed to read config: {e}")
        sys.exit(1)

    missing = cfg.missing_fields()
    if missing:
        print_warning(f"Config has empty fields: {', '.join(missing)}")
        print_info("Run `jiranch config` to fill them in")

    try:
        client = JiraClient.from_config(cfg)
    except JiraClientError as e:
        logger.error(f"Failed to create a jira client: {e}")
        print_error(f"Failed to create a jira client: {e}")
        sys.exit(1)

    with client:
        try:
            issue = client.get_issue(issue_id)
        except JiraRequestError as e:
            print_error(f"Failed to get issue: {e}")
            sys.exit(1)

    click.echo(derive_branch_name(cfg.short_name, issue_id, issue.summary))


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    main()
