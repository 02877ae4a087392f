"""
Elasticsearch `_cat` API requests.
"""

from hebe.http.agent import Agent
from hebe.logging_config import get_logger

logger = get_logger(__name__)

# Columns shown by `es nodes`
NODE_COLUMNS = "h=ip,heap.percent,ram.percent,load,node.role,master,name"


class CatRequestError(Exception):
    """A `_cat` request came back with errors."""

    def __init__(self, errors: list[Exception]):
        self.errors = errors
        super().__init__("; ".join(str(e) for e in errors))


def cat_url(cluster: str, api: str, *options: str) -> str:
    """Build the URL for a `_cat` endpoint with column headers enabled."""
    uri = f"http://{cluster}/_cat/{api}?v"
    if options:
        uri += "&" + "&".join(options)
    return uri


def call_cat_request(cluster: str, api: str, *options: str, agent: Agent | None = None) -> str:
    """GET a `_cat` endpoint and return the raw body.

    Raises:
        CatRequestError: the agent returned any error
    """
    agent = agent or Agent()
    url = cat_url(cluster, api, *options)
    logger.debug("GET %s", url, extra={"cluster": cluster, "api": api})

    _, body, errs = agent.get(url).end()
    if errs:
        raise CatRequestError(errs)
    return body
