"""Tests for response shape mapping."""

import pytest

from cosmos_tools.client.exceptions import AzureServiceError, InvalidResponsePayloadError
from cosmos_tools.client.models import Database, Document, DocumentCollection, Offer, PartitionKeyRange
from cosmos_tools.client.responses import (
    LISTING_SHAPES,
    ResourceList,
    map_header_only,
    map_listing,
    map_resource,
    map_single_payload,
    parse_listing,
)
from cosmos_tools.client.transport import TransportResponse


def response(status_code, body=None, headers=None):
    return TransportResponse(status_code=status_code, body=body if body is not None else {}, headers=headers or {})


class TestSinglePayload:
    """Tests for map_single_payload."""

    @pytest.mark.parametrize("status", [200, 201])
    def test_success_returns_body(self, status):
        """200 and 201 return the body unchanged."""
        body = {"id": "db1", "_rid": "abc=="}
        assert map_single_payload(response(status, body)) == body

    def test_error_carries_message_and_status(self):
        """Non-success raises AzureServiceError with the service message."""
        with pytest.raises(AzureServiceError) as exc_info:
            map_single_payload(response(409, {"code": "Conflict", "message": "Resource exists"}))
        assert exc_info.value.status_code == 409
        assert exc_info.value.message == "Resource exists"

    def test_map_resource_returns_typed_record(self):
        """map_resource validates the body into the given model."""
        db = map_resource(response(201, {"id": "db1", "_rid": "abc=="}), Database)
        assert isinstance(db, Database)
        assert db.rid == "abc=="

    def test_map_resource_rejects_malformed_body(self):
        """A body that is not a record raises InvalidResponsePayloadError."""
        with pytest.raises(InvalidResponsePayloadError, match="Database"):
            map_resource(response(200, ["db1"]), Database)


class TestHeaderOnly:
    """Tests for map_header_only."""

    @pytest.mark.parametrize("status", [200, 204])
    def test_success(self, status):
        """200 and 204 succeed with no payload."""
        assert map_header_only(response(status)) is None

    def test_error_with_message(self):
        """The body's message is used when present."""
        with pytest.raises(AzureServiceError, match="Entity with the specified id does not exist") as exc_info:
            map_header_only(response(404, {"message": "Entity with the specified id does not exist"}))
        assert exc_info.value.status_code == 404

    def test_error_without_message(self):
        """A generic message is used when the body has none."""
        with pytest.raises(AzureServiceError) as exc_info:
            map_header_only(response(500, {}))
        assert exc_info.value.message == "REST invocation failed"
        assert str(exc_info.value) == "HTTP 500: REST invocation failed"

    def test_201_is_not_header_only_success(self):
        """Only 200 and 204 count as success."""
        with pytest.raises(AzureServiceError):
            map_header_only(response(201))

    def test_activity_id_attached(self):
        """The service activity id travels with the error."""
        with pytest.raises(AzureServiceError) as exc_info:
            map_header_only(response(403, {"message": "Forbidden"}, {"x-ms-activity-id": "act-1"}))
        assert exc_info.value.activity_id == "act-1"


class TestListing:
    """Tests for map_listing and parse_listing."""

    def test_databases(self):
        """A Databases envelope becomes a list of Database records."""
        body = {"_rid": "", "Databases": [{"id": "a"}, {"id": "b"}], "_count": 2}
        result = map_listing(response(200, body))

        assert isinstance(result, ResourceList)
        assert result.resource_key == "Databases"
        assert [d.id for d in result] == ["a", "b"]
        assert all(isinstance(d, Database) for d in result)
        assert result.count == 2

    def test_length_and_order_preserved(self):
        """k elements in, k typed records out, in order."""
        ids = [f"doc-{i}" for i in range(7)]
        result = parse_listing({"Documents": [{"id": i} for i in ids]})

        assert len(result) == 7
        assert [d.id for d in result] == ids
        assert result[0].id == "doc-0"
        assert result[-1].id == "doc-6"

    @pytest.mark.parametrize("key,model", LISTING_SHAPES)
    def test_every_shape_maps_to_its_model(self, key, model):
        """Each known listing key maps to its record type."""
        result = parse_listing({key: [{"id": "x"}]})
        assert result.resource_key == key
        assert isinstance(result[0], model)

    def test_empty_listing(self):
        """An empty array yields an empty sequence."""
        result = parse_listing({"DocumentCollections": [], "_count": 0})
        assert len(result) == 0
        assert list(result) == []

    def test_no_known_key(self):
        """An envelope without a listing key is rejected."""
        with pytest.raises(InvalidResponsePayloadError):
            parse_listing({"_rid": "", "Attachments": []})

    def test_not_an_object(self):
        """A non-object body is rejected."""
        with pytest.raises(InvalidResponsePayloadError):
            parse_listing([{"id": "x"}])

    @pytest.mark.parametrize(
        "body",
        [{"Databases": None}, {"Documents": [1]}, {"Users": "x"}, {"Offers": [{"id": "o1"}, "o2"]}],
    )
    def test_malformed_items(self, body):
        """A known key holding anything but a list of objects is a payload error."""
        with pytest.raises(InvalidResponsePayloadError):
            parse_listing(body)

    def test_first_key_in_order_wins(self):
        """With several listing keys present, the earliest in LISTING_SHAPES wins."""
        body = {"Offers": [{"id": "o1"}], "Databases": [{"id": "d1"}], "Documents": [{"id": "x"}]}
        result = parse_listing(body)

        assert result.resource_key == "Databases"
        assert isinstance(result[0], Database)

    def test_collections_before_documents(self):
        """Order is fixed: DocumentCollections is checked before Documents."""
        body = {"Documents": [{"id": "x"}], "DocumentCollections": [{"id": "c"}]}
        result = parse_listing(body)
        assert isinstance(result[0], DocumentCollection)

    def test_error_status_checked_before_shape(self):
        """A failed listing raises AzureServiceError, not a payload error."""
        with pytest.raises(AzureServiceError) as exc_info:
            map_listing(response(429, {"message": "Request rate is large"}))
        assert exc_info.value.status_code == 429

    def test_offers_and_pkranges(self):
        """Offers and partition key ranges map to their records."""
        offers = parse_listing({"Offers": [{"id": "AbC", "offerVersion": "V2", "content": {"offerThroughput": 400}}]})
        ranges = parse_listing({"PartitionKeyRanges": [{"id": "0", "minInclusive": "", "maxExclusive": "FF"}]})

        assert isinstance(offers[0], Offer)
        assert offers[0].content.offer_throughput == 400
        assert isinstance(ranges[0], PartitionKeyRange)
        assert ranges[0].max_exclusive == "FF"


class TestResourceList:
    """Tests for ResourceList semantics."""

    @pytest.fixture
    def items(self):
        return ResourceList([Document(id="a"), Document(id="b")], "Documents")

    def test_restartable_iteration(self, items):
        """Each iteration starts over from the first item."""
        assert [d.id for d in items] == ["a", "b"]
        assert [d.id for d in items] == ["a", "b"]

    def test_independent_iterators(self, items):
        """Concurrent iterators do not share position."""
        first = iter(items)
        second = iter(items)
        assert next(first).id == "a"
        assert next(first).id == "b"
        assert next(second).id == "a"

    def test_immutable(self, items):
        """Items cannot be reassigned."""
        with pytest.raises(TypeError):
            items[0] = Document(id="z")

    def test_count_defaults_to_length(self, items):
        """Without _count the count is the number of items."""
        assert items.count == 2

    def test_sequence_protocol(self, items):
        """ResourceList supports index, slicing and containment."""
        assert items.index(items[1]) == 1
        assert len(items[0:1]) == 1
        assert items[0] in items

    def test_equality(self, items):
        """Lists with the same key and items are equal."""
        assert items == ResourceList([Document(id="a"), Document(id="b")], "Documents")
        assert items != ResourceList([Document(id="a")], "Documents")
