"""Resource addressing for Cosmos DB request paths.

Request paths alternate resource types and resource ids::

    /dbs/{db}/colls/{coll}/docs/{doc}

A path ending in a type segment addresses the collection of that type (a
listing or a create), a path ending in an id addresses one resource. The
signature covers the resource type and the resource link, both derived here.
"""

from typing import NamedTuple

OFFERS = "offers"


class ResourcePath(NamedTuple):
    """Resource type and resource link extracted from a request path."""

    resource_type: str
    resource_id: str


def parse_resource_path(path: str) -> ResourcePath:
    """Extract the resource type and resource id from a request path.

    Args:
        path: Request path with a leading slash (e.g. "/dbs/db1/colls")

    Returns:
        ResourcePath. For "/dbs/db1/colls" this is ("colls", "dbs/db1"), for
        "/dbs/db1" it is ("dbs", "dbs/db1"). Account-level paths such as
        "/dbs" have an empty resource id.

    Offer ids are case-insensitive and are lowercased; every other resource
    id keeps its case.

    Raises:
        ValueError: If the path has no resource type segment (e.g. "" or "/")
    """
    segments = path.split("/")
    last = len(segments) - 1
    addresses_type = last % 2 == 1

    resource_type = segments[last] if addresses_type else segments[last - 1]
    if last < 1 or not resource_type:
        raise ValueError(f"Request path {path!r} names no resource type")

    if resource_type == OFFERS:
        if addresses_type:
            resource_id = ""
        else:
            resource_id = path[path.rfind("/") + 1:].lower()
    elif addresses_type:
        resource_id = path[1:path.rfind("/")] if last > 1 else ""
    else:
        resource_id = path[1:]

    return ResourcePath(resource_type, resource_id)


def resource_link(*parts: str) -> str:
    """Join type/id pairs into a request path.

    Example:
        resource_link("dbs", "db1", "colls") -> "/dbs/db1/colls"
    """
    return "/" + "/".join(part.strip("/") for part in parts)
