"""Tests for turning a pending request into an httpx.Request."""

from dataclasses import dataclass

import httpx
import pytest

from hebe.http import Agent, ContentType, Cookie
from hebe.http.errors import ContentTypeError, NoMethodError, QueryError
from hebe.http.materialize import make_request, merge_query, resolve_content_type


@dataclass
class Search:
    Query: str
    Size: str


class TestQuery:
    def test_mapping_and_query_string_accumulate(self) -> None:
        agent = Agent().get("http://example.com/search")
        agent.query({"q": "bicycle"}).query("size=50x50")

        request = make_request(agent.pending)

        assert request.url.params["q"] == "bicycle"
        assert request.url.params["size"] == "50x50"

    def test_json_object_string(self) -> None:
        agent = Agent().get("http://example.com/search")
        agent.query('{"query": "bicycle", "weight": "20kg"}')

        assert agent.pending.query == [("query", "bicycle"), ("weight", "20kg")]

    def test_record_keys_are_lower_cased(self) -> None:
        agent = Agent().get("http://example.com/search").query(Search(Query="sushi", Size="l"))

        assert agent.pending.query == [("query", "sushi"), ("size", "l")]

    def test_non_string_record_value_records_error(self) -> None:
        agent = Agent().get("http://example.com/search").query({"q": "x", "page": 2})

        assert agent.pending.query == [("q", "x")]
        assert len(agent.pending.errors) == 1
        assert isinstance(agent.pending.errors[0], QueryError)

    def test_query_string_keeps_first_value_per_key(self) -> None:
        agent = Agent().get("http://example.com/").query("a=1&a=2&b=3")

        assert agent.pending.query == [("a", "1"), ("b", "3")]

    def test_semicolon_is_rejected_but_param_accepts_it(self) -> None:
        agent = Agent().get("http://example.com/").query("fields=f1;f2")

        assert isinstance(agent.pending.errors[0], QueryError)

        agent = Agent().get("http://example.com/").param("fields", "f1;f2;f3")
        request = make_request(agent.pending)

        assert request.url.params["fields"] == "f1;f2;f3"

    def test_merges_with_query_already_in_url(self) -> None:
        agent = Agent().get("http://example.com/_cat/nodes?v=&h=ip").query("format=json")

        request = make_request(agent.pending)

        assert request.url.params.multi_items() == [("v", ""), ("h", "ip"), ("format", "json")]

    def test_same_key_is_added_not_replaced(self) -> None:
        url = merge_query(httpx.URL("http://example.com/?tag=a"), [("tag", "b")])

        assert url.params.get_list("tag") == ["a", "b"]

    def test_url_untouched_without_query(self) -> None:
        url = httpx.URL("http://example.com/_cat/master?v")

        assert merge_query(url, []) is url

    def test_unsupported_query_type_records_error(self) -> None:
        agent = Agent().get("http://example.com/").query(12)

        assert isinstance(agent.pending.errors[0], QueryError)


class TestContentType:
    def test_forced_type_wins(self) -> None:
        agent = Agent().post("http://example.com/").header("Content-Type", "text/plain").set_type("xml")

        assert resolve_content_type(agent.pending) is ContentType.XML

    def test_header_selects_type(self) -> None:
        agent = Agent().post("http://example.com/").header("content-type", "text/plain; charset=utf-8")

        assert resolve_content_type(agent.pending) is ContentType.TEXT

    def test_unknown_header_keeps_target_type(self) -> None:
        agent = Agent().post("http://example.com/").header("Content-Type", "application/vnd.api+json")

        request = make_request(agent.pending)

        assert resolve_content_type(agent.pending) is ContentType.JSON
        assert request.headers["Content-Type"] == "application/vnd.api+json"

    @pytest.mark.parametrize("alias, expected", [
        ("html", ContentType.HTML),
        ("json", ContentType.JSON),
        ("xml", ContentType.XML),
        ("text", ContentType.TEXT),
        ("urlencoded", ContentType.FORM),
        ("form", ContentType.FORM),
        ("form-data", ContentType.FORM),
    ])
    def test_aliases(self, alias: str, expected: ContentType) -> None:
        agent = Agent().post("http://example.com/").set_type(alias)

        assert agent.pending.forced_type is expected

    def test_unknown_alias_records_error_and_keeps_prior(self) -> None:
        agent = Agent().post("http://example.com/").set_type("xml").set_type("yaml")

        assert agent.pending.forced_type is ContentType.XML
        assert isinstance(agent.pending.errors[0], ContentTypeError)
        assert str(agent.pending.errors[0]) == 'incorrect type "yaml"'

    def test_html_sends_raw_body(self) -> None:
        agent = Agent().post("http://example.com/").set_type("html").send("<p>hi</p>")

        request = make_request(agent.pending)

        assert request.headers["Content-Type"] == "text/html"
        assert request.content == b"<p>hi</p>"


class TestRequestShape:
    def test_get_has_no_body(self) -> None:
        request = make_request(Agent().get("http://example.com/").pending)

        assert request.content == b""
        assert "Content-Type" not in request.headers

    def test_delete_with_content_carries_body(self) -> None:
        agent = Agent().delete("http://example.com/docs").send('{"ids": [1, 2]}')

        request = make_request(agent.pending)

        assert request.content == b'{"ids":[1,2]}'
        assert request.headers["Content-Type"] == "application/json"

    def test_post_without_content_is_json_typed(self) -> None:
        request = make_request(Agent().post("http://example.com/").pending)

        assert request.headers["Content-Type"] == "application/json"
        assert request.content == b""

    def test_custom_method_is_upper_cased(self) -> None:
        request = make_request(Agent().custom_method("purge", "http://example.com/").pending)

        assert request.method == "PURGE"

    def test_header_last_write_wins(self) -> None:
        agent = Agent().get("http://example.com/").header("X-Id", "1").header("X-Id", "2")

        assert make_request(agent.pending).headers.get_list("X-Id") == ["2"]

    def test_basic_auth(self) -> None:
        agent = Agent().get("http://example.com/").basic_auth("old", "creds").basic_auth("user", "pass")

        request = make_request(agent.pending)

        assert request.headers["Authorization"] == "Basic dXNlcjpwYXNz"

    def test_cookies_attach_in_order(self) -> None:
        agent = Agent().get("http://example.com/")
        agent.add_cookie(Cookie("a", "1")).add_cookies([Cookie("b", "2"), Cookie("a", "3")])

        request = make_request(agent.pending)

        assert request.headers["Cookie"] == "a=1; b=2; a=3"

    def test_cookies_append_to_explicit_header(self) -> None:
        agent = Agent().get("http://example.com/").header("Cookie", "z=0").add_cookie(Cookie("a", "1"))

        assert make_request(agent.pending).headers["Cookie"] == "z=0; a=1"

    def test_no_method(self) -> None:
        with pytest.raises(NoMethodError):
            make_request(Agent().pending)
