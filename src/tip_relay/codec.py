"""Conversions between upstream JSON, cached bytes and TipRecord entities.

Parsing goes through the json module first so floats are read with
Python's correctly-rounded parser; pydantic then validates the shape.
The non-standard NaN and Infinity tokens are refused.
"""

import json
from dataclasses import asdict

from pydantic import TypeAdapter, ValidationError

from tip_relay.dto import TipRecordMessage
from tip_relay.entities import TipRecord
from tip_relay.exceptions import CorruptEntryError, FeedDecodeError

_batch_adapter = TypeAdapter(list[TipRecordMessage])


def _reject_constant(token: str) -> float:
    raise ValueError(f"{token} is not valid JSON")


def _loads(raw: str | bytes):
    return json.loads(raw, parse_constant=_reject_constant)


def _to_entity(message: TipRecordMessage) -> TipRecord:
    return TipRecord(
        time=message.time,
        landed_tips_25th_percentile=message.landed_tips_25th_percentile,
        landed_tips_50th_percentile=message.landed_tips_50th_percentile,
        landed_tips_75th_percentile=message.landed_tips_75th_percentile,
        landed_tips_95th_percentile=message.landed_tips_95th_percentile,
        landed_tips_99th_percentile=message.landed_tips_99th_percentile,
    )


def decode_batch(raw: str | bytes) -> list[TipRecord]:
    """Decode one upstream message into its ordered list of records.

    Args:
        raw: The message body, a JSON array of tip records

    Returns:
        Records in the order the upstream sent them

    Raises:
        FeedDecodeError: If the message is not a JSON array of valid records
    """
    try:
        messages = _batch_adapter.validate_python(_loads(raw))
    except (ValueError, ValidationError) as e:
        raise FeedDecodeError(f"Invalid tip stream message: {e}") from e
    return [_to_entity(m) for m in messages]


def encode_record(record: TipRecord) -> bytes:
    """Serialize a record for the cache.

    json writes floats with repr(), so every value decodes to the same double.
    """
    return json.dumps(asdict(record)).encode()


def decode_record(payload: bytes) -> TipRecord:
    """Decode cached bytes back into a record.

    Raises:
        CorruptEntryError: If the bytes are not a valid encoded record
    """
    try:
        message = TipRecordMessage.model_validate(_loads(payload))
    except (ValueError, ValidationError) as e:
        raise CorruptEntryError(f"Invalid cached tip record: {e}") from e
    return _to_entity(message)
