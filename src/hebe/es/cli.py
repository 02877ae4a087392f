"""
Elasticsearch CLI commands.
"""

import click
from rich.console import Console

from hebe.config import DEFAULT_CLUSTER, get_config
from hebe.es.cat import NODE_COLUMNS, CatRequestError, call_cat_request
from hebe.http.cli import make_agent, print_errors


def cluster_option(f):
    return click.option(
        "-c", "--cluster",
        default=lambda: get_config().cluster,
        show_default=DEFAULT_CLUSTER,
        help="es cluster host:port",
    )(f)


def handle_cat_command(ctx: click.Context, cluster: str, api: str, *options: str) -> None:
    """Print a `_cat` endpoint's body, exiting 1 on any error."""
    agent = make_agent(debug=ctx.obj.get("debug") if ctx.obj else None)
    try:
        body = call_cat_request(cluster, api, *options, agent=agent)
    except CatRequestError as e:
        print_errors(e.errors)
        raise SystemExit(1)
    finally:
        agent.client.close()

    Console().print(body, markup=False, highlight=False, soft_wrap=True)


@click.group()
def es():
    """Elasticsearch cluster status."""
    pass


@es.command()
@cluster_option
@click.pass_context
def master(ctx, cluster: str):
    """Display the master's node ID, bound IP address, and node name.

    Examples:
        hebe es master
        hebe es master -c es01.internal:9200
    """
    handle_cat_command(ctx, cluster, "master")


@es.command()
@cluster_option
@click.option("-a", "--attrs", is_flag=True, help="Display node attributes")
@click.pass_context
def nodes(ctx, cluster: str, attrs: bool):
    """Display nodes of the cluster.

    Examples:
        hebe es nodes
        hebe es nodes --attrs
    """
    if attrs:
        handle_cat_command(ctx, cluster, "nodeattrs")
        return
    handle_cat_command(ctx, cluster, "nodes", NODE_COLUMNS)


@es.command()
@cluster_option
@click.pass_context
def plugins(ctx, cluster: str):
    """Provide a view per node of running plugins."""
    handle_cat_command(ctx, cluster, "plugins")


@es.command()
@cluster_option
@click.pass_context
def segments(ctx, cluster: str):
    """Display low level segments in shards."""
    handle_cat_command(ctx, cluster, "segments")
