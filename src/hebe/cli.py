"""
Hebe command line entry point.
"""

import click

from hebe import __version__
from hebe.config import get_config
from hebe.es.cli import es
from hebe.http.cli import http
from hebe.logging_config import configure_logging


@click.group()
@click.version_option(__version__, prog_name="hebe")
@click.option("--debug", is_flag=True, help="Log request/response dumps and debug output to stderr")
@click.option("--log-file", type=click.Path(dir_okay=False), help="Also write logs to this file")
@click.pass_context
def main(ctx, debug: bool, log_file: str | None):
    """Hebe - cluster operator utilities."""
    debug = debug or get_config().debug
    configure_logging(debug=debug, log_file=log_file)
    ctx.ensure_object(dict)
    ctx.obj["debug"] = debug


main.add_command(es)
main.add_command(http)


if __name__ == "__main__":
    main()
