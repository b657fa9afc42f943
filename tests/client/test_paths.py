"""Tests for resource path parsing."""

import pytest

from cosmos_tools.client.paths import ResourcePath, parse_resource_path, resource_link


class TestParseResourcePath:
    """Tests for parse_resource_path."""

    def test_account_level_listing(self):
        """Listing databases addresses the account root: empty resource id."""
        assert parse_resource_path("/dbs") == ResourcePath("dbs", "")

    def test_single_database(self):
        """A path ending in an id keeps the whole link minus the leading slash."""
        assert parse_resource_path("/dbs/db1") == ResourcePath("dbs", "dbs/db1")

    def test_collection_listing(self):
        """A path ending in a type drops the leading slash and the type segment."""
        assert parse_resource_path("/dbs/db1/colls") == ResourcePath("colls", "dbs/db1")

    def test_single_collection(self):
        """Test path addressing one collection."""
        assert parse_resource_path("/dbs/db1/colls/c1") == ResourcePath("colls", "dbs/db1/colls/c1")

    def test_document_listing(self):
        """Test nested listing path."""
        assert parse_resource_path("/dbs/db1/colls/c1/docs") == ResourcePath("docs", "dbs/db1/colls/c1")

    def test_single_document(self):
        """Test deepest instance path."""
        result = parse_resource_path("/dbs/db1/colls/c1/docs/doc-1")
        assert result.resource_type == "docs"
        assert result.resource_id == "dbs/db1/colls/c1/docs/doc-1"

    def test_resource_id_keeps_case(self):
        """Resource ids other than offers are case-sensitive."""
        assert parse_resource_path("/dbs/MyDb/colls").resource_id == "dbs/MyDb"
        assert parse_resource_path("/dbs/MyDb").resource_id == "dbs/MyDb"

    def test_partition_key_ranges(self):
        """Test pkranges listing path."""
        assert parse_resource_path("/dbs/db1/colls/c1/pkranges") == ResourcePath("pkranges", "dbs/db1/colls/c1")

    @pytest.mark.parametrize(
        "path,expected_id",
        [
            ("/dbs/a/colls", "dbs/a"),
            ("/dbs/a/colls/b/sprocs", "dbs/a/colls/b"),
            ("/dbs/a/users/u/permissions", "dbs/a/users/u"),
        ],
    )
    def test_listing_paths_exclude_type_segment(self, path, expected_id):
        """For odd final index above 1 the id excludes the leading slash and trailing type."""
        assert parse_resource_path(path).resource_id == expected_id

    @pytest.mark.parametrize("path", ["", "/", "/dbs/db1/"])
    def test_path_without_type_segment(self, path):
        """Paths naming no resource type are rejected."""
        with pytest.raises(ValueError, match="names no resource type"):
            parse_resource_path(path)


class TestOffersPath:
    """Tests for the offers special case."""

    def test_offers_listing_has_empty_id(self):
        """Listing offers has no resource id."""
        assert parse_resource_path("/offers") == ResourcePath("offers", "")

    def test_offer_id_is_lowercased(self):
        """Offer ids are case-insensitive and signed lowercased."""
        assert parse_resource_path("/offers/AbCd") == ResourcePath("offers", "abcd")

    def test_offer_id_is_only_trailing_segment(self):
        """Offer resource id is the trailing segment, not the full link."""
        assert parse_resource_path("/offers/XyZ1").resource_id == "xyz1"


class TestResourceLink:
    """Tests for resource_link."""

    def test_builds_path(self):
        """Test joining segments."""
        assert resource_link("dbs", "db1", "colls") == "/dbs/db1/colls"

    def test_single_segment(self):
        """Test account-level path."""
        assert resource_link("offers") == "/offers"

    def test_round_trip_with_parser(self):
        """Built links parse back to the expected type and id."""
        path = resource_link("dbs", "db1", "colls", "c1", "docs", "d1")
        assert parse_resource_path(path) == ResourcePath("docs", "dbs/db1/colls/c1/docs/d1")
