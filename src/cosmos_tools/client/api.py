"""High-level API for Cosmos DB operations.

This module provides the main client interface. Every call composes signed
headers, hands the request to the transport and maps the response onto typed
records.
"""

from dataclasses import replace
from functools import partial
from typing import Any, Callable, TypeVar

from .config import CosmosConfig
from .headers import (
    IS_QUERY,
    JSON_HEADERS,
    QUERY_HEADERS,
    IndexingDirective,
    PartitionKeyValue,
    RequestOptions,
    compose_headers,
)
from .http import HTTPTransport
from .models import (
    AutopilotSettings,
    Database,
    Document,
    DocumentCollection,
    IndexingPolicy,
    Offer,
    PartitionKeyDefinition,
    PartitionKeyVersion,
    PartitionKind,
    Permission,
    PermissionMode,
    StoredProcedure,
    Trigger,
    TriggerOperation,
    TriggerType,
    User,
    UserDefinedFunction,
)
from .paths import resource_link
from .responses import ResourceList, map_header_only, map_listing, map_resource, map_single_payload
from .retry import get_retry_decorator, is_retryable, is_retryable_write
from .transport import CosmosTransport, TransportResponse

R = TypeVar("R")

_retry_request = get_retry_decorator(is_retryable)
_retry_write = get_retry_decorator(is_retryable_write)

IDEMPOTENT_VERBS = frozenset({"GET", "HEAD", "PUT", "DELETE"})


def _is_idempotent(
    verb: str,
    options: RequestOptions | None,
    content_headers: dict[str, str] | None,
) -> bool:
    """Whether a request can be repeated after an unknown outcome.

    Queries and upserts are POSTs that are safe to repeat; other POSTs create
    resources or run stored procedures.
    """
    if verb.upper() in IDEMPOTENT_VERBS:
        return True
    if options is not None and options.upsert:
        return True
    return bool(content_headers and content_headers.get(IS_QUERY) == "true")


def _query_body(query: str, parameters: dict[str, Any] | None) -> dict[str, Any]:
    """Build a SQL query body; parameter names keep their leading '@'."""
    return {
        "query": query,
        "parameters": [{"name": name, "value": value} for name, value in (parameters or {}).items()],
    }


class CosmosAPI:
    """High-level API for Cosmos DB operations.

    Usage:
        # Auto-configure from environment
        api = CosmosAPI()
        for db in api.list_databases():
            print(db.id)

        # Explicit configuration
        config = CosmosConfig(endpoint="https://myaccount.documents.azure.com", key="...")
        api = CosmosAPI(config)

        # Inject custom transport (for testing)
        api = CosmosAPI(config, transport=mock_transport)
    """

    def __init__(
        self,
        config: CosmosConfig | None = None,
        transport: CosmosTransport | None = None,
    ):
        """Initialize API client.

        Args:
            config: Configuration (loads from environment if None)
            transport: Optional pre-configured transport (for testing/advanced use).

        Raises:
            ValueError: If no key is configured.
        """
        self.config = config or CosmosConfig()
        self.config.validate_config()
        self._client = transport or HTTPTransport(self.config)
        self._last_response: TransportResponse | None = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
        return False

    def close(self) -> None:
        """Close API client and release resources."""
        self._client.close()

    @property
    def last_activity_id(self) -> str | None:
        """Activity id of the last response (for debugging)."""
        return self._last_response.activity_id if self._last_response else None

    @property
    def last_session_token(self) -> str | None:
        """Session token of the last response."""
        return self._last_response.session_token if self._last_response else None

    @property
    def last_request_charge(self) -> float | None:
        """Request units charged for the last call."""
        return self._last_response.request_charge if self._last_response else None

    def _with_defaults(self, options: RequestOptions | None) -> RequestOptions | None:
        """Apply the configured default consistency level."""
        if self.config.consistency_level is None:
            return options
        options = options or RequestOptions()
        if options.consistency_level is None:
            options = replace(options, consistency_level=self.config.consistency_level)
        return options

    def _execute(
        self,
        verb: str,
        path: str,
        mapper: Callable[[TransportResponse], R],
        body: Any = None,
        options: RequestOptions | None = None,
        content_headers: dict[str, str] | None = None,
    ) -> R:
        """Run a request under the retry policy that is safe for it."""
        args = (verb, path, mapper, body, options, content_headers)
        if _is_idempotent(verb, options, content_headers):
            return self._attempt_with_retry(*args)
        return self._attempt_write(*args)

    def _attempt(
        self,
        verb: str,
        path: str,
        mapper: Callable[[TransportResponse], R],
        body: Any = None,
        options: RequestOptions | None = None,
        content_headers: dict[str, str] | None = None,
    ) -> R:
        """Sign, send and map one request attempt.

        Retried as a whole so every attempt carries a fresh date and signature.
        """
        headers = compose_headers(
            self.config.host,
            self.config.key,
            verb,
            path,
            self._with_defaults(options),
            token_type=self.config.resolved_token_type,
        )
        if content_headers:
            headers.update(content_headers)
        elif body is not None:
            headers.update(JSON_HEADERS)

        response = self._client.send(verb, path, headers, body)
        self._last_response = response
        return mapper(response)

    _attempt_with_retry = _retry_request(_attempt)
    _attempt_write = _retry_write(_attempt)

    # Databases

    def list_databases(self, options: RequestOptions | None = None) -> ResourceList[Database]:
        """List all databases in the account."""
        return self._execute("GET", resource_link("dbs"), map_listing, options=options)

    def create_database(
        self,
        id: str,
        offer_throughput: int | None = None,
        autopilot_settings: AutopilotSettings | None = None,
    ) -> Database:
        """Create a database, optionally with shared throughput.

        Raises:
            ThroughputTooLowError: If offer_throughput is below the minimum
        """
        options = RequestOptions(offer_throughput=offer_throughput, autopilot_settings=autopilot_settings)
        return self._execute(
            "POST", resource_link("dbs"), partial(map_resource, model=Database), {"id": id}, options
        )

    def get_database(self, db: str) -> Database:
        """Get a database by id."""
        return self._execute("GET", resource_link("dbs", db), partial(map_resource, model=Database))

    def delete_database(self, db: str) -> None:
        """Delete a database and everything in it."""
        self._execute("DELETE", resource_link("dbs", db), map_header_only)

    # Collections

    def list_collections(self, db: str) -> ResourceList[DocumentCollection]:
        """List collections in a database."""
        return self._execute("GET", resource_link("dbs", db, "colls"), map_listing)

    def create_collection(
        self,
        db: str,
        id: str,
        partition_key_paths: list[str],
        indexing_policy: IndexingPolicy | None = None,
        offer_throughput: int | None = None,
        autopilot_settings: AutopilotSettings | None = None,
    ) -> DocumentCollection:
        """Create a collection partitioned on the given paths.

        Args:
            db: Database id
            id: Collection id
            partition_key_paths: Partition key paths (e.g. ["/tenantId"])
            indexing_policy: Optional indexing policy (service default if None)
            offer_throughput: Dedicated manual throughput in RU/s
            autopilot_settings: Dedicated autoscale throughput
        """
        collection = DocumentCollection(
            id=id,
            partition_key=PartitionKeyDefinition(
                paths=partition_key_paths,
                kind=PartitionKind.HASH,
                version=PartitionKeyVersion.V2,
            ),
        )
        if indexing_policy is not None:
            collection.indexing_policy = indexing_policy
        options = RequestOptions(offer_throughput=offer_throughput, autopilot_settings=autopilot_settings)
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls"),
            partial(map_resource, model=DocumentCollection),
            collection.to_body(),
            options,
        )

    def get_collection(self, db: str, coll: str) -> DocumentCollection:
        """Get a collection by id."""
        return self._execute(
            "GET", resource_link("dbs", db, "colls", coll), partial(map_resource, model=DocumentCollection)
        )

    def replace_collection(self, db: str, collection: DocumentCollection) -> DocumentCollection:
        """Replace a collection definition (e.g. its indexing policy)."""
        return self._execute(
            "PUT",
            resource_link("dbs", db, "colls", collection.id),
            partial(map_resource, model=DocumentCollection),
            collection.to_body(),
        )

    def delete_collection(self, db: str, coll: str) -> None:
        """Delete a collection and all its documents."""
        self._execute("DELETE", resource_link("dbs", db, "colls", coll), map_header_only)

    def list_partition_key_ranges(self, db: str, coll: str) -> ResourceList:
        """List the physical partition key ranges of a collection."""
        return self._execute("GET", resource_link("dbs", db, "colls", coll, "pkranges"), map_listing)

    # Documents

    def list_documents(
        self,
        db: str,
        coll: str,
        options: RequestOptions | None = None,
    ) -> ResourceList[Document]:
        """List documents in a collection.

        Pass RequestOptions(change_feed=True, partition_key_range_id=...) to
        read the change feed of one partition key range.
        """
        return self._execute("GET", resource_link("dbs", db, "colls", coll, "docs"), map_listing, options=options)

    def create_document(
        self,
        db: str,
        coll: str,
        body: dict[str, Any],
        partition_key: PartitionKeyValue,
        upsert: bool = False,
        indexing_directive: IndexingDirective | None = None,
    ) -> Document:
        """Create (or upsert) a document.

        Args:
            db: Database id
            coll: Collection id
            body: Document body; must contain "id"
            partition_key: Value of the document's partition key
            upsert: Replace the document if it already exists
            indexing_directive: Include or exclude the document from the index
        """
        options = RequestOptions(
            partition_key=partition_key,
            upsert=upsert,
            indexing_directive=indexing_directive,
        )
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "docs"),
            partial(map_resource, model=Document),
            body,
            options,
        )

    def get_document(
        self,
        db: str,
        coll: str,
        doc_id: str,
        partition_key: PartitionKeyValue,
        session_token: str | None = None,
    ) -> Document:
        """Get a document by id and partition key."""
        options = RequestOptions(partition_key=partition_key, session_token=session_token)
        return self._execute(
            "GET",
            resource_link("dbs", db, "colls", coll, "docs", doc_id),
            partial(map_resource, model=Document),
            options=options,
        )

    def replace_document(
        self,
        db: str,
        coll: str,
        doc_id: str,
        body: dict[str, Any],
        partition_key: PartitionKeyValue,
        if_match: str | None = None,
    ) -> Document:
        """Replace a document. Pass the current etag as if_match for optimistic concurrency."""
        options = RequestOptions(partition_key=partition_key, if_match=if_match)
        return self._execute(
            "PUT",
            resource_link("dbs", db, "colls", coll, "docs", doc_id),
            partial(map_resource, model=Document),
            body,
            options,
        )

    def delete_document(
        self,
        db: str,
        coll: str,
        doc_id: str,
        partition_key: PartitionKeyValue,
        if_match: str | None = None,
    ) -> None:
        """Delete a document."""
        options = RequestOptions(partition_key=partition_key, if_match=if_match)
        self._execute(
            "DELETE",
            resource_link("dbs", db, "colls", coll, "docs", doc_id),
            map_header_only,
            options=options,
        )

    def query_documents(
        self,
        db: str,
        coll: str,
        query: str,
        parameters: dict[str, Any] | None = None,
        partition_key: PartitionKeyValue | None = None,
        max_item_count: int | None = None,
    ) -> ResourceList[Document]:
        """Run a SQL query against a collection.

        Without a partition key the query fans out across partitions.

        Example:
            api.query_documents("db", "orders", "SELECT * FROM c WHERE c.total > @min", {"@min": 10})
        """
        options = RequestOptions(
            partition_key=partition_key,
            enable_cross_partition_query=partition_key is None,
            max_item_count=max_item_count,
        )
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "docs"),
            map_listing,
            _query_body(query, parameters),
            options,
            QUERY_HEADERS,
        )

    # Stored procedures, user-defined functions, triggers

    def list_stored_procedures(self, db: str, coll: str) -> ResourceList[StoredProcedure]:
        """List stored procedures of a collection."""
        return self._execute("GET", resource_link("dbs", db, "colls", coll, "sprocs"), map_listing)

    def create_stored_procedure(self, db: str, coll: str, id: str, body: str) -> StoredProcedure:
        """Register a JavaScript stored procedure."""
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "sprocs"),
            partial(map_resource, model=StoredProcedure),
            StoredProcedure(id=id, body=body).to_body(),
        )

    def replace_stored_procedure(self, db: str, coll: str, id: str, body: str) -> StoredProcedure:
        """Replace the body of a stored procedure."""
        return self._execute(
            "PUT",
            resource_link("dbs", db, "colls", coll, "sprocs", id),
            partial(map_resource, model=StoredProcedure),
            StoredProcedure(id=id, body=body).to_body(),
        )

    def delete_stored_procedure(self, db: str, coll: str, id: str) -> None:
        """Delete a stored procedure."""
        self._execute("DELETE", resource_link("dbs", db, "colls", coll, "sprocs", id), map_header_only)

    def execute_stored_procedure(
        self,
        db: str,
        coll: str,
        id: str,
        params: list[Any] | None = None,
        partition_key: PartitionKeyValue | None = None,
    ) -> Any:
        """Execute a stored procedure and return whatever it returns."""
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "sprocs", id),
            map_single_payload,
            params or [],
            RequestOptions(partition_key=partition_key),
        )

    def list_user_defined_functions(self, db: str, coll: str) -> ResourceList[UserDefinedFunction]:
        """List user-defined functions of a collection."""
        return self._execute("GET", resource_link("dbs", db, "colls", coll, "udfs"), map_listing)

    def create_user_defined_function(self, db: str, coll: str, id: str, body: str) -> UserDefinedFunction:
        """Register a JavaScript user-defined function."""
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "udfs"),
            partial(map_resource, model=UserDefinedFunction),
            UserDefinedFunction(id=id, body=body).to_body(),
        )

    def replace_user_defined_function(self, db: str, coll: str, id: str, body: str) -> UserDefinedFunction:
        """Replace the body of a user-defined function."""
        return self._execute(
            "PUT",
            resource_link("dbs", db, "colls", coll, "udfs", id),
            partial(map_resource, model=UserDefinedFunction),
            UserDefinedFunction(id=id, body=body).to_body(),
        )

    def delete_user_defined_function(self, db: str, coll: str, id: str) -> None:
        """Delete a user-defined function."""
        self._execute("DELETE", resource_link("dbs", db, "colls", coll, "udfs", id), map_header_only)

    def list_triggers(self, db: str, coll: str) -> ResourceList[Trigger]:
        """List triggers of a collection."""
        return self._execute("GET", resource_link("dbs", db, "colls", coll, "triggers"), map_listing)

    def create_trigger(
        self,
        db: str,
        coll: str,
        id: str,
        body: str,
        trigger_operation: TriggerOperation = TriggerOperation.ALL,
        trigger_type: TriggerType = TriggerType.PRE,
    ) -> Trigger:
        """Register a pre- or post-trigger."""
        trigger = Trigger(id=id, body=body, trigger_operation=trigger_operation, trigger_type=trigger_type)
        return self._execute(
            "POST",
            resource_link("dbs", db, "colls", coll, "triggers"),
            partial(map_resource, model=Trigger),
            trigger.to_body(),
        )

    def replace_trigger(self, db: str, coll: str, trigger: Trigger) -> Trigger:
        """Replace a trigger definition."""
        return self._execute(
            "PUT",
            resource_link("dbs", db, "colls", coll, "triggers", trigger.id),
            partial(map_resource, model=Trigger),
            trigger.to_body(),
        )

    def delete_trigger(self, db: str, coll: str, id: str) -> None:
        """Delete a trigger."""
        self._execute("DELETE", resource_link("dbs", db, "colls", coll, "triggers", id), map_header_only)

    # Users and permissions

    def list_users(self, db: str) -> ResourceList[User]:
        """List users of a database."""
        return self._execute("GET", resource_link("dbs", db, "users"), map_listing)

    def create_user(self, db: str, id: str) -> User:
        """Create a database user."""
        return self._execute(
            "POST", resource_link("dbs", db, "users"), partial(map_resource, model=User), {"id": id}
        )

    def get_user(self, db: str, user: str) -> User:
        """Get a user by id."""
        return self._execute("GET", resource_link("dbs", db, "users", user), partial(map_resource, model=User))

    def delete_user(self, db: str, user: str) -> None:
        """Delete a user and its permissions."""
        self._execute("DELETE", resource_link("dbs", db, "users", user), map_header_only)

    def list_permissions(
        self,
        db: str,
        user: str,
        resource_token_expiry_seconds: int | None = None,
    ) -> ResourceList[Permission]:
        """List a user's permissions, with resource tokens valid for the given period."""
        options = RequestOptions(resource_token_expiry_seconds=resource_token_expiry_seconds)
        return self._execute(
            "GET", resource_link("dbs", db, "users", user, "permissions"), map_listing, options=options
        )

    def create_permission(
        self,
        db: str,
        user: str,
        id: str,
        resource: str,
        permission_mode: PermissionMode = PermissionMode.READ,
        resource_partition_key: PartitionKeyValue | None = None,
        resource_token_expiry_seconds: int | None = None,
    ) -> Permission:
        """Grant a user access to a resource and return the permission with its token.

        Args:
            db: Database id
            user: User id
            id: Permission id
            resource: Self link of the resource (e.g. "dbs/db1/colls/c1")
            permission_mode: Read or All
            resource_partition_key: Scope the grant to one partition key value
            resource_token_expiry_seconds: Validity of the issued resource token

        Raises:
            InvalidValidityPeriodError: If the expiry is out of range
        """
        permission = Permission(id=id, resource=resource, permission_mode=permission_mode)
        if resource_partition_key is not None:
            permission.resource_partition_key = [resource_partition_key]
        options = RequestOptions(resource_token_expiry_seconds=resource_token_expiry_seconds)
        return self._execute(
            "POST",
            resource_link("dbs", db, "users", user, "permissions"),
            partial(map_resource, model=Permission),
            permission.to_body(),
            options,
        )

    def get_permission(
        self,
        db: str,
        user: str,
        permission: str,
        resource_token_expiry_seconds: int | None = None,
    ) -> Permission:
        """Get a permission, issuing a fresh resource token."""
        options = RequestOptions(resource_token_expiry_seconds=resource_token_expiry_seconds)
        return self._execute(
            "GET",
            resource_link("dbs", db, "users", user, "permissions", permission),
            partial(map_resource, model=Permission),
            options=options,
        )

    def delete_permission(self, db: str, user: str, permission: str) -> None:
        """Revoke a permission."""
        self._execute("DELETE", resource_link("dbs", db, "users", user, "permissions", permission), map_header_only)

    # Offers

    def list_offers(self) -> ResourceList[Offer]:
        """List throughput offers of the account."""
        return self._execute("GET", resource_link("offers"), map_listing)

    def get_offer(self, offer_id: str) -> Offer:
        """Get an offer by id (offer ids are case-insensitive)."""
        return self._execute("GET", resource_link("offers", offer_id), partial(map_resource, model=Offer))

    def replace_offer(self, offer: Offer) -> Offer:
        """Replace an offer, e.g. to change its throughput."""
        return self._execute(
            "PUT",
            resource_link("offers", offer.rid or offer.id),
            partial(map_resource, model=Offer),
            offer.to_body(),
        )

    def query_offers(self, query: str, parameters: dict[str, Any] | None = None) -> ResourceList[Offer]:
        """Query offers, e.g. to find the offer of a collection by its resource id."""
        return self._execute(
            "POST",
            resource_link("offers"),
            map_listing,
            _query_body(query, parameters),
            content_headers=QUERY_HEADERS,
        )
