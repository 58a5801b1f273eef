"""Record schema descriptors consumed by the dialects."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class PrimitiveType(Enum):
    """Primitive types a record field can carry."""

    BOOLEAN = "BOOLEAN"
    INT8 = "INT8"
    INT16 = "INT16"
    INT32 = "INT32"
    INT64 = "INT64"
    FLOAT32 = "FLOAT32"
    FLOAT64 = "FLOAT64"
    STRING = "STRING"
    BYTES = "BYTES"
    STRUCT = "STRUCT"
    ARRAY = "ARRAY"
    MAP = "MAP"

    @property
    def is_primitive(self) -> bool:
        """Whether the type is a scalar (not STRUCT, ARRAY or MAP)."""
        return self not in (PrimitiveType.STRUCT, PrimitiveType.ARRAY, PrimitiveType.MAP)


class LogicalType(Enum):
    """Logical refinements of primitive types that get special SQL handling.

    Values are the logical names carried by record schemas.
    """

    DECIMAL = "org.apache.kafka.connect.data.Decimal"
    DATE = "org.apache.kafka.connect.data.Date"
    TIME = "org.apache.kafka.connect.data.Time"
    TIMESTAMP = "org.apache.kafka.connect.data.Timestamp"

    @classmethod
    def parse(cls, name: Optional[str]) -> Optional["LogicalType"]:
        """Look up a logical type by schema name or short name.

        Args:
            name: Logical name, e.g. "org.apache.kafka.connect.data.Date" or "DATE"

        Returns:
            The matching LogicalType, or None when the name is absent or unknown
        """
        if not name:
            return None
        for member in cls:
            if name == member.value or name == member.name:
                return member
        return None


@dataclass(frozen=True)
class SchemaFieldDescriptor:
    """One record field to be persisted.

    Attributes:
        name: Column name the field is written to
        primitive_type: Underlying primitive schema type
        logical_type: Logical schema name, if any; takes precedence over
            the primitive type when it is recognized
        is_primary_key: Whether the field is part of the table key
        optional: Whether the column accepts NULL
        default_value: Default used in column definitions, if any
        scale: Scale of a DECIMAL field, when the schema declares one
    """

    name: str
    primitive_type: PrimitiveType
    logical_type: Optional[str] = None
    is_primary_key: bool = False
    optional: bool = False
    default_value: Any = None
    scale: Optional[int] = None

    @property
    def logical(self) -> Optional[LogicalType]:
        """Get the recognized logical type, or None."""
        return LogicalType.parse(self.logical_type)

    @classmethod
    def of(
        cls,
        name: str,
        logical: LogicalType,
        primitive_type: Optional[PrimitiveType] = None,
        **kwargs: Any,
    ) -> "SchemaFieldDescriptor":
        """Build a descriptor for a logical type with its usual primitive.

        Examples:
            >>> SchemaFieldDescriptor.of("created", LogicalType.DATE).primitive_type
            <PrimitiveType.INT32: 'INT32'>
        """
        if primitive_type is None:
            primitive_type = _LOGICAL_PRIMITIVES[logical]
        return cls(name, primitive_type, logical.value, **kwargs)


_LOGICAL_PRIMITIVES = {
    LogicalType.DECIMAL: PrimitiveType.BYTES,
    LogicalType.DATE: PrimitiveType.INT32,
    LogicalType.TIME: PrimitiveType.INT32,
    LogicalType.TIMESTAMP: PrimitiveType.INT64,
}


__all__ = ["PrimitiveType", "LogicalType", "SchemaFieldDescriptor"]
