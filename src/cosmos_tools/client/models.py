"""Typed records for Cosmos DB resources.

Each record mirrors the JSON the service returns for that resource type.
System properties (``_rid``, ``_ts``, ``_self``, ``_etag``) are exposed under
readable names and serialized back under their wire names.

Enumerated values are mapped through small lookup tables. A value the table
does not know maps to a fixed default variant instead of failing validation,
so newer service versions adding variants do not break deserialization.
"""

from enum import Enum, IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class IndexKind(str, Enum):
    HASH = "Hash"
    RANGE = "Range"
    SPATIAL = "Spatial"


class IndexingMode(str, Enum):
    CONSISTENT = "consistent"
    LAZY = "lazy"
    NONE = "none"


class DataType(str, Enum):
    STRING = "String"
    NUMBER = "Number"
    POINT = "Point"
    POLYGON = "Polygon"
    LINE_STRING = "LineString"
    MULTI_POLYGON = "MultiPolygon"


class TriggerOperation(str, Enum):
    ALL = "All"
    CREATE = "Create"
    REPLACE = "Replace"
    DELETE = "Delete"


class TriggerType(str, Enum):
    PRE = "Pre"
    POST = "Post"


class PermissionMode(str, Enum):
    READ = "Read"
    ALL = "All"


class OfferVersion(str, Enum):
    V1 = "V1"
    V2 = "V2"


class OfferType(str, Enum):
    S1 = "S1"
    S2 = "S2"
    S3 = "S3"
    INVALID = "Invalid"


class PartitionKind(str, Enum):
    HASH = "Hash"
    RANGE = "Range"


class PartitionKeyVersion(IntEnum):
    V1 = 1
    V2 = 2


def _lookup(enum_cls, value: Any, default):
    """Match value against the enum's wire values, else return default."""
    if isinstance(value, enum_cls):
        return value
    for member in enum_cls:
        if member.value == value:
            return member
    return default


def get_index_kind(value: Any) -> IndexKind:
    """Unknown kinds map to Range."""
    return _lookup(IndexKind, value, IndexKind.RANGE)


def get_indexing_mode(value: Any) -> IndexingMode:
    """Unknown modes map to consistent."""
    return _lookup(IndexingMode, value, IndexingMode.CONSISTENT)


def get_data_type(value: Any) -> DataType:
    """Unknown data types map to String."""
    return _lookup(DataType, value, DataType.STRING)


def get_trigger_operation(value: Any) -> TriggerOperation:
    """Unknown operations map to All."""
    return _lookup(TriggerOperation, value, TriggerOperation.ALL)


def get_trigger_type(value: Any) -> TriggerType:
    """Unknown trigger types map to Pre."""
    return _lookup(TriggerType, value, TriggerType.PRE)


def get_permission_mode(value: Any) -> PermissionMode:
    """Unknown permission modes map to Read, the narrower grant."""
    return _lookup(PermissionMode, value, PermissionMode.READ)


def get_offer_version(value: Any) -> OfferVersion:
    """Unknown offer versions map to V2."""
    return _lookup(OfferVersion, value, OfferVersion.V2)


def get_offer_type(value: Any) -> OfferType:
    """Unknown offer types map to Invalid (V2 offers carry no type)."""
    return _lookup(OfferType, value, OfferType.INVALID)


def get_partition_kind(value: Any) -> PartitionKind:
    """Unknown partitioning kinds map to Hash."""
    return _lookup(PartitionKind, value, PartitionKind.HASH)


def get_partition_key_version(value: Any) -> PartitionKeyVersion:
    """Unknown partition key versions map to V1."""
    return _lookup(PartitionKeyVersion, value, PartitionKeyVersion.V1)


class CosmosModel(BaseModel):
    """Base for every record: accepts wire names and keeps unknown fields."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    def to_body(self) -> dict[str, Any]:
        """Serialize to the JSON body the service expects.

        Only fields that were given (or read from the service) are included.
        """
        return self.model_dump(by_alias=True, exclude_unset=True, exclude_none=True, mode="json")


class CosmosResource(CosmosModel):
    """Fields common to every addressable resource."""

    id: str = ""
    rid: str | None = Field(default=None, alias="_rid")
    ts: int | None = Field(default=None, alias="_ts")
    self_link: str | None = Field(default=None, alias="_self")
    etag: str | None = Field(default=None, alias="_etag")


class Index(CosmosModel):
    kind: IndexKind = IndexKind.RANGE
    data_type: DataType = Field(default=DataType.STRING, alias="dataType")
    precision: int | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _map_kind(cls, v: Any) -> IndexKind:
        return get_index_kind(v)

    @field_validator("data_type", mode="before")
    @classmethod
    def _map_data_type(cls, v: Any) -> DataType:
        return get_data_type(v)


class IncludedPath(CosmosModel):
    path: str
    indexes: list[Index] | None = None


class ExcludedPath(CosmosModel):
    path: str


class IndexingPolicy(CosmosModel):
    automatic: bool = True
    indexing_mode: IndexingMode = Field(default=IndexingMode.CONSISTENT, alias="indexingMode")
    included_paths: list[IncludedPath] = Field(default_factory=list, alias="includedPaths")
    excluded_paths: list[ExcludedPath] = Field(default_factory=list, alias="excludedPaths")

    @field_validator("indexing_mode", mode="before")
    @classmethod
    def _map_mode(cls, v: Any) -> IndexingMode:
        return get_indexing_mode(v)


class PartitionKeyDefinition(CosmosModel):
    paths: list[str]
    kind: PartitionKind = PartitionKind.HASH
    version: PartitionKeyVersion | None = None

    @field_validator("kind", mode="before")
    @classmethod
    def _map_kind(cls, v: Any) -> PartitionKind:
        return get_partition_kind(v)

    @field_validator("version", mode="before")
    @classmethod
    def _map_version(cls, v: Any) -> PartitionKeyVersion | None:
        if v is None:
            return None
        return get_partition_key_version(v)


class Database(CosmosResource):
    colls: str | None = Field(default=None, alias="_colls")
    users: str | None = Field(default=None, alias="_users")


class DocumentCollection(CosmosResource):
    indexing_policy: IndexingPolicy | None = Field(default=None, alias="indexingPolicy")
    partition_key: PartitionKeyDefinition | None = Field(default=None, alias="partitionKey")
    default_ttl: int | None = Field(default=None, alias="defaultTtl")
    docs: str | None = Field(default=None, alias="_docs")
    sprocs: str | None = Field(default=None, alias="_sprocs")
    triggers: str | None = Field(default=None, alias="_triggers")
    udfs: str | None = Field(default=None, alias="_udfs")
    conflicts: str | None = Field(default=None, alias="_conflicts")


Container = DocumentCollection


class Document(CosmosResource):
    """A JSON document. User properties are kept as extra fields."""

    attachments: str | None = Field(default=None, alias="_attachments")

    @property
    def properties(self) -> dict[str, Any]:
        """User-defined properties, without system fields."""
        return dict(self.model_extra or {})


class StoredProcedure(CosmosResource):
    body: str = ""


class UserDefinedFunction(CosmosResource):
    body: str = ""


class Trigger(CosmosResource):
    body: str = ""
    trigger_operation: TriggerOperation = Field(default=TriggerOperation.ALL, alias="triggerOperation")
    trigger_type: TriggerType = Field(default=TriggerType.PRE, alias="triggerType")

    @field_validator("trigger_operation", mode="before")
    @classmethod
    def _map_operation(cls, v: Any) -> TriggerOperation:
        return get_trigger_operation(v)

    @field_validator("trigger_type", mode="before")
    @classmethod
    def _map_type(cls, v: Any) -> TriggerType:
        return get_trigger_type(v)


class User(CosmosResource):
    permissions: str | None = Field(default=None, alias="_permissions")


class Permission(CosmosResource):
    permission_mode: PermissionMode = Field(default=PermissionMode.READ, alias="permissionMode")
    resource: str = ""
    token: str | None = Field(default=None, alias="_token")
    resource_partition_key: list[Any] | None = Field(default=None, alias="resourcePartitionKey")

    @field_validator("permission_mode", mode="before")
    @classmethod
    def _map_mode(cls, v: Any) -> PermissionMode:
        return get_permission_mode(v)


class PartitionKeyRange(CosmosResource):
    min_inclusive: str = Field(default="", alias="minInclusive")
    max_exclusive: str = Field(default="", alias="maxExclusive")
    rid_prefix: int | None = Field(default=None, alias="ridPrefix")
    throughput_fraction: float | None = Field(default=None, alias="throughputFraction")
    status: str | None = None
    parents: list[str] = Field(default_factory=list)


class AutopilotSettings(CosmosModel):
    """Autoscale throughput settings, sent as a JSON header value."""

    max_throughput: int = Field(alias="maxThroughput")


class OfferContent(CosmosModel):
    offer_throughput: int | None = Field(default=None, alias="offerThroughput")
    offer_is_ru_per_minute_throughput_enabled: bool | None = Field(
        default=None, alias="offerIsRUPerMinuteThroughputEnabled"
    )
    autopilot_settings: AutopilotSettings | None = Field(default=None, alias="offerAutopilotSettings")


class Offer(CosmosResource):
    offer_version: OfferVersion = Field(default=OfferVersion.V2, alias="offerVersion")
    offer_type: OfferType = Field(default=OfferType.INVALID, alias="offerType")
    content: OfferContent | None = None
    resource: str = ""
    offer_resource_id: str = Field(default="", alias="offerResourceId")

    @field_validator("offer_version", mode="before")
    @classmethod
    def _map_version(cls, v: Any) -> OfferVersion:
        return get_offer_version(v)

    @field_validator("offer_type", mode="before")
    @classmethod
    def _map_type(cls, v: Any) -> OfferType:
        return get_offer_type(v)
