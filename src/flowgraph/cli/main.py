"""
flowgraph CLI - Main entry point.

This module registers all CLI commands. Each command is implemented
in its own module under cli/commands/.
"""

from typing import Optional

import click

from ..config import load_config, resolve_config_path
from ..core.exceptions import ConfigError
from .commands import groups, layout, lineage, slice, stats
from .utils import configure_logging, echo_error


@click.group()
@click.version_option(package_name="flowgraph")
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging")
@click.option("-c", "--config", "config_path", type=click.Path(), default=None,
              help="Config file (default: .flowgraph/config.yaml)")
@click.pass_context
def main(ctx: click.Context, verbose: bool, config_path: Optional[str]):
    """flowgraph: Layout, lineage and slicing for data pipelines.

    \b
    Quick Start:
      flowgraph layout pipeline.json --strategy force -o laid_out.json
      flowgraph lineage pipeline.json train_model --mode impact
      flowgraph slice pipeline.json --select train_model --mode to
    """
    configure_logging(verbose)
    try:
        ctx.obj = load_config(resolve_config_path(config_path))
    except ConfigError as e:
        echo_error(str(e))
        ctx.exit(1)


# Register commands
main.add_command(layout.layout)
main.add_command(lineage.lineage)
main.add_command(lineage.related)
main.add_command(slice.slice_, name="slice")
main.add_command(stats.stats)
main.add_command(groups.groups)

if __name__ == "__main__":
    main()
