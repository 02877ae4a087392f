"""
Elasticsearch `_cat` shortcuts.

Each command GETs one `_cat` endpoint with verbose column headers and
prints the body as returned by the cluster.
"""

from hebe.es.cat import CatRequestError, call_cat_request, cat_url

__all__ = [
    "CatRequestError",
    "call_cat_request",
    "cat_url",
]
