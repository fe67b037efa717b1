"""Error kinds raised by the serialization bridge.

Store failures are deliberately absent here: whatever the store adapter
raises (``pymongo.errors.PyMongoError`` for MongoDB) reaches the caller
unchanged. Absence of a record is not an error either; see
``SerializationBridge.decode_optional``.
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError


class BridgeError(Exception):
    """Base exception for bridge operations."""
    pass


class MalformedRecord(BridgeError):
    """A record does not structurally match the target shape.

    Attributes
    - shape: Name of the partial model the record was matched against
    - errors: Per-field error dicts as reported by pydantic (may be empty)
    """

    def __init__(
        self,
        message: str,
        shape: Optional[str] = None,
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(message)
        self.shape = shape
        self.errors = errors or []

    @classmethod
    def from_validation_error(cls, shape: type, error: ValidationError) -> "MalformedRecord":
        """Build from a pydantic ``ValidationError`` raised for ``shape``."""
        details = error.errors(include_url=False)
        fields = sorted({".".join(str(part) for part in item["loc"]) for item in details})
        return cls(
            f"Record does not match {shape.__name__}: {', '.join(fields) or 'invalid'}",
            shape=shape.__name__,
            errors=details,
        )
