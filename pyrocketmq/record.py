# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Stored Message Record Decoding.

A response whose remark is ``FOUND`` carries one message exactly as the
broker stores it in its commit log.

Binary Format Conventions:
- All multi-byte integers are big-endian and unsigned
- Hosts are 4 raw octets followed by a 4-byte port
- Body is length-prefixed: [4 bytes len][N bytes]
- Topic is length-prefixed: [1 byte len][N bytes]
- Properties are length-prefixed: [2 bytes len][N bytes], holding
  ``key\\x01value`` pairs separated by ``\\x02``

Record Layout:
    [4B totalSize][4B magicCode][4B bodyCRC][4B queueId][4B flag]
    [8B queueOffset][8B physicOffset][4B sysFlag][8B bornTimestamp]
    [4B bornHost][4B bornPort][8B storeTimestamp][4B storeHost][4B storePort]
    [4B reconsumeTimes][8B preparedTransactionOffset]
    [4B bodyLen][body][1B topicLen][topic][2B propertiesLen][properties]
"""

from __future__ import annotations

import logging
import re
import struct

from .exceptions import RecordEncodeError, TruncatedFrameError
from .models import MessageRecord

logger = logging.getLogger(__name__)

NAME_VALUE_SEPARATOR: bytes = b"\x01"
PROPERTY_SEPARATOR: bytes = b"\x02"

_PROPERTY = re.compile(rb"([A-Za-z0-9]+)\x01([A-Za-z0-9]+)")


class RecordReader:
    """Bounded cursor over a message-record body."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.position = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.position

    def read_bytes(self, size: int, field: str) -> bytes:
        """Read ``size`` raw bytes, failing before any out-of-range access."""
        if size > self.remaining:
            raise TruncatedFrameError(field, size, self.remaining)
        chunk = self.data[self.position:self.position + size]
        self.position += size
        return chunk

    def read_uint8(self, field: str) -> int:
        return self.read_bytes(1, field)[0]

    def read_uint16(self, field: str) -> int:
        return struct.unpack(">H", self.read_bytes(2, field))[0]

    def read_uint32(self, field: str) -> int:
        return struct.unpack(">I", self.read_bytes(4, field))[0]

    def read_uint64(self, field: str) -> int:
        return struct.unpack(">Q", self.read_bytes(8, field))[0]

    def read_ipv4(self, field: str) -> str:
        return ".".join(str(octet) for octet in self.read_bytes(4, field))


def parse_properties(blob: bytes) -> tuple[list[tuple[str, str]], int]:
    """
    Tokenize a properties blob into ``(key, value)`` pairs.

    Only alphanumeric keys and values are recognized; anything between
    matches is skipped.

    Returns:
        Tuple of the pairs in order and the number of skipped bytes, not
        counting the ``\\x02`` separators between pairs.
    """
    pairs: list[tuple[str, str]] = []
    skipped = 0
    pos = 0
    for match in _PROPERTY.finditer(blob):
        gap = blob[pos:match.start()]
        skipped += len(gap) - gap.count(PROPERTY_SEPARATOR)
        pairs.append((match.group(1).decode("ascii"), match.group(2).decode("ascii")))
        pos = match.end()
    tail = blob[pos:]
    skipped += len(tail) - tail.count(PROPERTY_SEPARATOR)
    return pairs, skipped


def decode_message_record(body: bytes) -> MessageRecord:
    """
    Decode a body holding one serialized stored message.

    Args:
        body: Body bytes of a ``FOUND`` response.

    Returns:
        The decoded MessageRecord.

    Raises:
        TruncatedFrameError: If any field extends past the end of the body.
    """
    reader = RecordReader(body)

    total_size = reader.read_uint32("totalSize")
    magic_code = reader.read_uint32("magicCode")
    body_crc = reader.read_uint32("bodyCRC")
    queue_id = reader.read_uint32("queueId")
    flag = reader.read_uint32("flag")
    queue_offset = reader.read_uint64("queueOffset")
    physical_offset = reader.read_uint64("physicOffset")
    sys_flag = reader.read_uint32("sysFlag")
    born_timestamp = reader.read_uint64("bornTimeStamp")
    born_host = reader.read_ipv4("bornHost")
    born_port = reader.read_uint32("bornPort")
    store_timestamp = reader.read_uint64("storeTimestamp")
    store_host = reader.read_ipv4("storeHost")
    store_port = reader.read_uint32("storePort")
    reconsume_times = reader.read_uint32("reconsumeTimes")
    prepared_transaction_offset = reader.read_uint64("preparedTransactionOffset")

    body_length = reader.read_uint32("body length")
    message_body = reader.read_bytes(body_length, "body")

    topic_length = reader.read_uint8("topic length")
    topic = reader.read_bytes(topic_length, "topic").decode("utf-8", errors="replace")

    properties_length = reader.read_uint16("properties length")
    properties: list[tuple[str, str]] = []
    skipped = 0
    if properties_length > 0:
        blob = reader.read_bytes(properties_length, "properties")
        properties, skipped = parse_properties(blob)
        if skipped:
            logger.debug(
                "Skipped %d unrecognized bytes in %d-byte properties of topic %s",
                skipped,
                properties_length,
                topic,
            )

    return MessageRecord(
        total_size=total_size,
        magic_code=magic_code,
        body_crc=body_crc,
        queue_id=queue_id,
        flag=flag,
        queue_offset=queue_offset,
        physical_offset=physical_offset,
        sys_flag=sys_flag,
        born_timestamp=born_timestamp,
        born_host=born_host,
        born_port=born_port,
        store_timestamp=store_timestamp,
        store_host=store_host,
        store_port=store_port,
        reconsume_times=reconsume_times,
        prepared_transaction_offset=prepared_transaction_offset,
        body=message_body,
        topic=topic,
        properties_length=properties_length,
        properties=properties,
        skipped_property_bytes=skipped,
    )


_UINT32_FIELDS = (
    ("total_size", "totalSize"),
    ("magic_code", "magicCode"),
    ("body_crc", "bodyCRC"),
    ("queue_id", "queueId"),
    ("flag", "flag"),
    ("sys_flag", "sysFlag"),
    ("born_port", "bornPort"),
    ("store_port", "storePort"),
    ("reconsume_times", "reconsumeTimes"),
)
_UINT64_FIELDS = (
    ("queue_offset", "queueOffset"),
    ("physical_offset", "physicOffset"),
    ("born_timestamp", "bornTimeStamp"),
    ("store_timestamp", "storeTimestamp"),
    ("prepared_transaction_offset", "preparedTransactionOffset"),
)


def _pack_ipv4(field: str, host: str) -> bytes:
    octets = host.split(".")
    if len(octets) != 4 or not all(
        o.isascii() and o.isdigit() and int(o) <= 255 for o in octets
    ):
        raise RecordEncodeError(field, f"{host!r} is not a dotted-quad IPv4 address")
    return bytes(int(octet) for octet in octets)


def encode_message_record(record: MessageRecord) -> bytes:
    """
    Encode a record in the stored layout.

    Properties are written as ``key\\x01value`` pairs joined by ``\\x02``;
    ``properties_length`` is recomputed.

    Raises:
        RecordEncodeError: If a field does not fit its slot in the layout.
    """
    for name, label in _UINT32_FIELDS:
        if not 0 <= getattr(record, name) <= 0xFFFFFFFF:
            raise RecordEncodeError(label, "value does not fit in 4 unsigned bytes")
    for name, label in _UINT64_FIELDS:
        if not 0 <= getattr(record, name) <= 0xFFFFFFFFFFFFFFFF:
            raise RecordEncodeError(label, "value does not fit in 8 unsigned bytes")
    if len(record.body) > 0xFFFFFFFF:
        raise RecordEncodeError("body", f"{len(record.body)} bytes exceed the 4-byte length")

    born_host = _pack_ipv4("bornHost", record.born_host)
    store_host = _pack_ipv4("storeHost", record.store_host)
    topic_bytes = record.topic.encode("utf-8")
    if len(topic_bytes) > 0xFF:
        raise RecordEncodeError("topic", f"{len(topic_bytes)} bytes exceed the 1-byte length")
    properties = PROPERTY_SEPARATOR.join(
        k.encode("utf-8") + NAME_VALUE_SEPARATOR + v.encode("utf-8")
        for k, v in record.properties
    )
    if len(properties) > 0xFFFF:
        raise RecordEncodeError(
            "properties", f"{len(properties)} bytes exceed the 2-byte length"
        )

    parts = [
        struct.pack(
            ">IIIIIQQIQ",
            record.total_size,
            record.magic_code,
            record.body_crc,
            record.queue_id,
            record.flag,
            record.queue_offset,
            record.physical_offset,
            record.sys_flag,
            record.born_timestamp,
        ),
        born_host,
        struct.pack(">IQ", record.born_port, record.store_timestamp),
        store_host,
        struct.pack(
            ">IIQ",
            record.store_port,
            record.reconsume_times,
            record.prepared_transaction_offset,
        ),
        struct.pack(">I", len(record.body)),
        record.body,
        struct.pack("B", len(topic_bytes)),
        topic_bytes,
        struct.pack(">H", len(properties)),
        properties,
    ]
    return b"".join(parts)
