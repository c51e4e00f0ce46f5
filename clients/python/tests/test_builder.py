"""Tests for RequestBuilder query accumulation and dispatch."""

import json
from datetime import date

import pytest

from yawp import CardinalityError, HttpMethod, MissingIdentifierError, Resource


class TestQuery:
    """Test chained query clauses."""

    @pytest.mark.asyncio
    async def test_where_order_limit_list(self, api, transport):
        """The documented list example issues one GET with q."""
        transport.respond([{"id": "/items/1", "name": "a"}])

        items = await api("/items").where({"active": True}).order("name").limit(10).list()

        assert len(transport.calls) == 1
        assert transport.last_url == "/api/items"
        options = transport.last_options
        assert options["method"] == "GET"
        assert json.loads(options["query"]["q"]) == {
            "where": {"active": True},
            "order": "name",
            "limit": 10,
        }
        assert options["query"]["q"] == '{"where":{"active":true},"order":"name","limit":10}'
        assert items[0].name == "a"

    @pytest.mark.asyncio
    async def test_where_with_several_arguments_stores_list(self, api, transport):
        transport.respond([])

        await api("/items").where("age", ">", 18, "name", "=", "x").list()

        q = json.loads(transport.last_options["query"]["q"])
        assert q == {"where": ["age", ">", 18, "name", "=", "x"]}

    @pytest.mark.asyncio
    async def test_sort_is_serialized(self, api, transport):
        transport.respond([])

        await api("/items").sort([{"p": "name", "d": "desc"}]).list()

        q = json.loads(transport.last_options["query"]["q"])
        assert q == {"sort": [{"p": "name", "d": "desc"}]}

    @pytest.mark.asyncio
    async def test_list_without_clause_sends_no_query(self, api, transport):
        transport.respond([])

        await api("/items").list()

        assert "query" not in transport.last_options

    @pytest.mark.asyncio
    async def test_transform_and_params(self, api, transport):
        transport.respond([])

        await api("/items").transform("simple").params({"page": 2}).list()

        assert transport.last_options["query"] == {"t": "simple", "page": 2}

    @pytest.mark.asyncio
    async def test_from_prefixes_parent_path(self, api, transport):
        transport.respond([])

        await api("/children").from_("/parents/1").list()

        assert transport.last_url == "/api/parents/1/children"

    @pytest.mark.asyncio
    async def test_from_accepts_object_with_id(self, api, transport):
        transport.respond([])

        await api("/children").from_({"id": "/parents/2"}).list()

        assert transport.last_url == "/api/parents/2/children"

    def test_from_object_without_id_raises(self, api):
        with pytest.raises(MissingIdentifierError):
            api("/children").from_({"name": "x"})


class TestStateReset:
    """Test that terminal operations reset the builder."""

    @pytest.mark.asyncio
    async def test_second_chain_starts_from_base(self, api, transport):
        transport.respond([], [])
        items = api("/items")

        await items.from_("/parents/1").where({"a": 1}).transform("t").list()
        await items.list()

        url, options = transport.calls[1]
        assert url == "/api/items"
        assert "query" not in options
        assert "body" not in options

    @pytest.mark.asyncio
    async def test_body_is_not_carried_over(self, api, transport):
        items = api("/items")

        await items.create({"name": "x"})
        await items.destroy()

        assert "body" not in transport.last_options

    @pytest.mark.asyncio
    async def test_state_is_reset_before_awaiting(self, api, transport):
        transport.respond({"id": "/items/3"})
        items = api("/items")

        request = items.where({"a": 1}).param("x", 1).fetch(3)

        assert items.pending.path == "/items"
        assert items.clause.is_empty()
        assert items.pending.query == {}
        await request
        assert transport.last_url == "/api/items/3"

    @pytest.mark.asyncio
    async def test_each_chain_snapshots_its_own_state(self, api, transport):
        transport.respond([], [])
        items = api("/items")

        first = items.where({"a": 1}).list()
        second = items.where({"b": 2}).list()
        await second
        await first

        assert json.loads(transport.calls[0][1]["query"]["q"]) == {"where": {"b": 2}}
        assert json.loads(transport.calls[1][1]["query"]["q"]) == {"where": {"a": 1}}


class TestFailedComposeResets:
    """Test that a terminal call failing before dispatch leaves no state behind."""

    @pytest.mark.asyncio
    async def test_unknown_verb_does_not_leak_clause(self, api, transport):
        items = api("/items")

        with pytest.raises(ValueError):
            items.where({"a": 1}).param("x", 1).action("TRACE", "x")

        transport.respond([])
        await items.list()
        assert transport.last_url == "/api/items"
        assert "query" not in transport.last_options

    @pytest.mark.asyncio
    async def test_unserializable_where_does_not_leak(self, api, transport):
        items = api("/items")

        with pytest.raises(TypeError):
            items.from_("/groups/1").where({"since": date(2024, 1, 1)}).list()

        transport.respond([])
        await items.list()
        assert transport.last_url == "/api/items"
        assert "query" not in transport.last_options

    @pytest.mark.asyncio
    @pytest.mark.parametrize("operation", ["create", "update", "patch"])
    async def test_unserializable_body_does_not_leak(self, api, transport, operation):
        items = api("/items")

        with pytest.raises(TypeError):
            getattr(items.at("/items/7").where({"a": 1}), operation)({"when": date(2024, 1, 1)})

        transport.respond([])
        await items.list()
        assert transport.last_url == "/api/items"
        assert "query" not in transport.last_options

    @pytest.mark.asyncio
    async def test_chained_json_failure_resets(self, api, transport):
        items = api("/items")

        with pytest.raises(TypeError):
            items.param("x", 1).json(object())

        await items.destroy()
        assert transport.last_url == "/api/items"
        assert "query" not in transport.last_options
        assert "body" not in transport.last_options


class TestFetch:
    """Test single object retrieval."""

    @pytest.mark.asyncio
    async def test_fetch_appends_id(self, api, transport):
        transport.respond({"id": "/items/42", "name": "answer"})

        item = await api.for_resource("/items").fetch(42)

        assert transport.last_url == "/api/items/42"
        assert transport.last_options["method"] == "GET"
        assert isinstance(item, Resource)
        assert item.name == "answer"

    @pytest.mark.asyncio
    async def test_fetch_without_id_uses_base_path(self, api, transport):
        transport.respond({"id": "/items/1"})

        await api("/items/1").fetch()

        assert transport.last_url == "/api/items/1"

    @pytest.mark.asyncio
    async def test_fetch_with_callback(self, api, transport):
        transport.respond({"id": "/items/1", "name": "x"})

        name = await api("/items/1").fetch(lambda item: item.name)

        assert name == "x"
        assert transport.last_url == "/api/items/1"

    @pytest.mark.asyncio
    async def test_fetch_with_async_callback(self, api, transport):
        transport.respond({"id": "/items/1", "name": "x"})

        async def upper(item):
            return item.name.upper()

        assert await api("/items/1").fetch(upper) == "X"


class TestFirstAndOnly:
    """Test single-result list helpers."""

    @pytest.mark.asyncio
    async def test_first_forces_limit_one(self, api, transport):
        transport.respond([{"id": "/items/1"}])

        item = await api("/items").where({"a": 1}).first()

        assert json.loads(transport.last_options["query"]["q"]) == {"where": {"a": 1}, "limit": 1}
        assert item.id == "/items/1"

    @pytest.mark.asyncio
    async def test_first_on_empty_is_none(self, api, transport):
        transport.respond([])

        assert await api("/items").first() is None

    @pytest.mark.asyncio
    async def test_list_on_empty_body_is_empty(self, api, transport):
        transport.respond(None)

        assert await api("/items").list() == []

    @pytest.mark.asyncio
    async def test_first_callback_receives_none(self, api, transport):
        transport.respond([])
        seen = []

        await api("/items").first(seen.append)

        assert seen == [None]

    @pytest.mark.asyncio
    async def test_only_single_result(self, api, transport):
        transport.respond([{"id": "/items/1"}])

        item = await api("/items").only()

        assert item.id == "/items/1"
        assert "query" not in transport.last_options

    @pytest.mark.asyncio
    @pytest.mark.parametrize("objects", [[], [{"id": "/items/1"}, {"id": "/items/2"}]])
    async def test_only_rejects_other_cardinalities(self, api, transport, objects):
        transport.respond(objects)

        with pytest.raises(CardinalityError) as exc_info:
            await api("/items").only()

        assert exc_info.value.count == len(objects)

    @pytest.mark.asyncio
    async def test_only_callback_not_called_on_error(self, api, transport):
        transport.respond([])
        seen = []

        with pytest.raises(CardinalityError):
            await api("/items").only(seen.append)

        assert seen == []


class TestRepository:
    """Test create/update/patch/destroy dispatch."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "operation,method",
        [("create", "POST"), ("update", "PUT"), ("patch", "PATCH")],
    )
    async def test_body_operations(self, api, transport, operation, method):
        transport.respond({"ok": True})

        result = await getattr(api("/items"), operation)({"name": "x"})

        assert result == {"ok": True}
        assert transport.last_options["method"] == method
        assert json.loads(transport.last_options["body"]) == {"name": "x"}
        assert transport.last_options["json"] is True

    @pytest.mark.asyncio
    async def test_create_serializes_resource(self, api, transport):
        await api("/items").create(Resource(name="x", tags=["a"]))

        assert json.loads(transport.last_options["body"]) == {"name": "x", "tags": ["a"]}

    @pytest.mark.asyncio
    async def test_destroy(self, api, transport):
        await api("/items/7").destroy()

        assert transport.last_url == "/api/items/7"
        assert transport.last_options["method"] == "DELETE"


class TestActions:
    """Test custom verb actions."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "helper,method",
        [
            ("get", "GET"),
            ("put", "PUT"),
            ("post", "POST"),
            ("patch_action", "PATCH"),
            ("delete_action", "DELETE"),
        ],
    )
    async def test_action_helpers(self, api, transport, helper, method):
        transport.respond({"done": 1})

        result = await getattr(api("/items"), helper)("rebuild")

        assert result == {"done": 1}
        assert transport.last_url == "/api/items/rebuild"
        assert transport.last_options["method"] == method

    @pytest.mark.asyncio
    async def test_action_accepts_lowercase_verb(self, api, transport):
        await api("/items").action("post", "sync")

        assert transport.last_options["method"] == HttpMethod.POST.value

    @pytest.mark.asyncio
    async def test_action_with_json_body(self, api, transport):
        await api("/items/1").json({"reason": "spam"}).post("flag")

        assert transport.last_url == "/api/items/1/flag"
        assert json.loads(transport.last_options["body"]) == {"reason": "spam"}

    @pytest.mark.asyncio
    async def test_consecutive_actions_do_not_compose(self, api, transport):
        items = api("/items")

        await items.get("first")
        await items.get("second")

        assert [url for url, _ in transport.calls] == ["/api/items/first", "/api/items/second"]

    def test_unknown_verb_raises(self, api):
        with pytest.raises(ValueError):
            api("/items").action("TRACE", "x")


class TestSettings:
    """Test base URL and default options at dispatch."""

    @pytest.mark.asyncio
    async def test_default_fetch_options_merged(self, api, transport, settings):
        settings.default_fetch_options = {"headers": {"X-Tenant": "acme"}, "method": "IGNORED"}
        transport.respond([])

        await api("/items").list()

        assert transport.last_options["headers"] == {"X-Tenant": "acme"}
        assert transport.last_options["method"] == "GET"

    @pytest.mark.asyncio
    async def test_settings_read_at_dispatch(self, api, transport, settings):
        items = api("/items")
        settings.base_url = "https://example.com/v2"
        transport.respond([])

        await items.list()

        assert transport.last_url == "https://example.com/v2/items"
