# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
RocketMQ frame decoder.

Runs the full pipeline for one exchange:

    split_frame -> decode_header -> classify_header
        -> decode_message_record   (response remark is FOUND)
        -> decode_generic_body     (everything else)

A decoder holds only its immutable configuration, so one instance can decode
any number of exchanges, from any number of threads.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .body import decode_generic_body
from .exceptions import FrameTooLargeError
from .header import classify_header, decode_header, direction_for_port
from .models import BodyKind, DecoderConfig, Direction, FieldNode, HeaderInfo, MessageRecord
from .protocol import LENGTH_FIELD_SIZE, split_frame
from .record import decode_message_record
from .tree import flatten_value, header_tree, record_tree
from .value import JsonObject, Value

logger = logging.getLogger(__name__)

FOUND_MARKER: str = ">>>>#FOUND#"


@dataclass(frozen=True)
class DecodedFrame:
    """Structured result of decoding one exchange."""

    length: int
    header_length: int
    header: JsonObject
    header_info: HeaderInfo
    summary: str
    body_kind: BodyKind = BodyKind.NONE
    body_value: Value | None = None
    record: MessageRecord | None = None
    raw_body: bytes | None = None
    length_mismatch: bool = False

    @property
    def direction(self) -> Direction:
        return self.header_info.direction

    def tree(self) -> FieldNode:
        """Labelled field tree of the whole frame."""
        children = [
            FieldNode(label="Length", text=str(self.length)),
            header_tree(self.header),
        ]
        if self.body_kind is BodyKind.JSON and self.body_value is not None:
            children.append(flatten_value("Body", self.body_value))
        elif self.body_kind is BodyKind.MESSAGE_RECORD and self.record is not None:
            children.append(record_tree(self.record))
        elif self.body_kind is BodyKind.OPAQUE and self.raw_body is not None:
            children.append(FieldNode(
                label="Body",
                text=self.raw_body.decode("utf-8", errors="replace"),
            ))
        return FieldNode(label="RocketMQ", text=self.summary, children=children)


class RocketMQDecoder:
    """
    Decoder for RocketMQ remoting exchanges.

    Example:
        >>> decoder = RocketMQDecoder()
        >>> frame = decoder.decode(data, src_port=53412, dst_port=10911)
        >>> print(frame.summary)
        [REQUEST]↑↑↑ code=10(SEND_MESSAGE) topic:TopicTest
    """

    def __init__(self, config: DecoderConfig | None = None) -> None:
        """
        Initialize decoder.

        Args:
            config: Decoder configuration (default: DecoderConfig()).
        """
        self._config = config or DecoderConfig()
        self._ports = frozenset(self._config.ports)

    @property
    def config(self) -> DecoderConfig:
        return self._config

    @property
    def registered_ports(self) -> tuple[int, ...]:
        """Transport ports a host should route to this decoder, both directions."""
        return self._config.ports

    def is_request(self, dst_port: int) -> bool:
        return dst_port in self._ports

    def direction(self, dst_port: int) -> Direction:
        return direction_for_port(dst_port, self._ports)

    def decode(self, data: bytes, src_port: int, dst_port: int) -> DecodedFrame:
        """
        Decode one complete exchange.

        Args:
            data: Bytes of exactly one reassembled exchange.
            src_port: Source transport port.
            dst_port: Destination transport port.

        Returns:
            The decoded frame.

        Raises:
            TruncatedFrameError: If a declared length runs past the buffer.
            MalformedJsonError: If the header or a JSON body does not parse.
            FrameTooLargeError: If the bytes after the length field exceed the
                configured maximum.
        """
        size = len(data) - LENGTH_FIELD_SIZE
        if size > self._config.max_frame_size:
            raise FrameTooLargeError(size, self._config.max_frame_size)

        frame = split_frame(data)
        header = decode_header(frame.header, max_depth=self._config.max_json_depth)
        info = classify_header(
            header,
            self.direction(dst_port),
            found_remark=self._config.found_remark,
        )
        logger.debug(
            "Decoded %s header %d -> %d: %s",
            info.direction.value,
            src_port,
            dst_port,
            info.summary,
        )

        result = dict(
            length=frame.total_length,
            header_length=frame.header_length,
            header=header,
            header_info=info,
            length_mismatch=frame.length_mismatch,
        )

        if not frame.has_body:
            return DecodedFrame(summary=info.summary, **result)

        if info.remark_is_found:
            record = decode_message_record(frame.body)
            return DecodedFrame(
                summary=f"{info.summary}{FOUND_MARKER} topic:{record.topic}",
                body_kind=BodyKind.MESSAGE_RECORD,
                record=record,
                **result,
            )

        body = decode_generic_body(frame.body, max_depth=self._config.max_json_depth)
        logger.debug("Body of %d bytes decoded as %s", len(frame.body), body.kind.value)
        return DecodedFrame(
            summary=info.summary,
            body_kind=body.kind,
            body_value=body.value,
            raw_body=body.raw,
            **result,
        )


def decode_frame(
    data: bytes,
    src_port: int,
    dst_port: int,
    config: DecoderConfig | None = None,
) -> DecodedFrame:
    """
    Decode one exchange with a one-off decoder.

    Args:
        data: Bytes of exactly one reassembled exchange.
        src_port: Source transport port.
        dst_port: Destination transport port.
        config: Decoder configuration (default: DecoderConfig()).

    Returns:
        The decoded frame.
    """
    return RocketMQDecoder(config).decode(data, src_port, dst_port)
