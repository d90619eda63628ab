"""Data Transfer Objects for API and feed contracts.

These Pydantic models define the external contracts: the JSON served to
query callers and the JSON received from the upstream tip stream.

Internal domain logic should use entities from the entities package.
"""

from .feed import TipRecordMessage
from .responses import Annotations, ErrorResponse, TipResponse

__all__ = [
    "Annotations",
    "ErrorResponse",
    "TipRecordMessage",
    "TipResponse",
]
