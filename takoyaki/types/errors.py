# takoyaki/types/errors.py

from typing import Optional, Dict, Any, Literal
import hashlib
import msgspec
from msgspec import Struct

from .new import ErrorId


class ProcessingError(Struct):
    stage: str  # "archive", "transform", "request"
    error_type: str  # "address_not_found", "dangling_reference", "numeric_parse", ...
    message: str
    status: Literal["unresolved", "resolved"] = "unresolved"
    error_id: Optional[ErrorId] = None
    context: Optional[Dict[str, Any]] = None  # tx_index, account, block_slot, url, etc.

    def __post_init__(self) -> None:
        if not self.error_id:
            self.error_id = self.generate_error_id()

    def generate_error_id(self) -> ErrorId:
        content_struct = {
            "stage": self.stage,
            "error_type": self.error_type,
            "message": self.message,
            "context": self.context or {},
        }
        content_bytes = msgspec.msgpack.encode(content_struct)
        hash_hex = hashlib.sha256(content_bytes).hexdigest()

        return ErrorId(hash_hex[:12])


class TakoyakiError(Exception):
    """Base for all errors raised by the service"""

    stage = "service"
    error_type = "error"

    def __init__(self, message: str, **context: Any):
        super().__init__(message)
        self.message = message
        self.context = {k: v for k, v in context.items() if v is not None}

    def to_processing_error(self) -> ProcessingError:
        return ProcessingError(
            stage=self.stage,
            error_type=self.error_type,
            message=self.message,
            context=self.context if self.context else None,
        )


class TransformError(TakoyakiError):
    """Raised when an archive block cannot be reconstructed. Aborts the whole block."""

    stage = "transform"
    error_type = "transform_failed"


class AddressNotFoundError(TransformError):
    error_type = "address_not_found"

    def __init__(self, address: str, tx_index: Optional[int] = None):
        super().__init__(
            f"Unable to find account key {address} in transaction {tx_index}",
            tx_index=tx_index,
            account=address,
        )
        self.address = address
        self.tx_index = tx_index


class DanglingReferenceError(TransformError):
    error_type = "dangling_reference"

    def __init__(self, message: str, tx_index: Optional[int] = None, **context: Any):
        super().__init__(message, tx_index=tx_index, **context)
        self.tx_index = tx_index


class NumericParseError(TransformError):
    error_type = "numeric_parse"

    def __init__(self, field: str, value: Any, **context: Any):
        super().__init__(f"Unable to parse {field}: {value!r}", field=field, value=value, **context)
        self.field = field
        self.value = value


class MissingFieldError(TransformError):
    error_type = "missing_field"

    def __init__(self, field: str, **context: Any):
        super().__init__(f"Archive record is missing {field}", field=field, **context)
        self.field = field


class ArchiveError(TakoyakiError):
    """Archive or registry request failed"""

    stage = "archive"
    error_type = "archive_request_failed"


def with_context(error: TakoyakiError, **context: Any) -> TakoyakiError:
    """Attach extra context to an error as it propagates"""
    for key, value in context.items():
        if value is not None:
            error.context.setdefault(key, value)
    return error
