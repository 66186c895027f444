# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
PyRocketMQ - Wire Protocol Decoder for RocketMQ Remoting Traffic.

Turns captured request/response exchanges between RocketMQ clients, name
servers and brokers into structured, inspectable data:
- Length-delimited frame splitting and stream extraction
- Lenient JSON decoding of frame headers and bodies
- Request/response code annotation
- Stored message records from query-by-id responses
- Reactive decoding of whole captures

Quick Start:
    >>> from pyrocketmq import RocketMQDecoder
    >>>
    >>> decoder = RocketMQDecoder()
    >>> frame = decoder.decode(data, src_port=53412, dst_port=10911)
    >>> print(frame.summary)
    [REQUEST]↑↑↑ code=10(SEND_MESSAGE) topic:TopicTest
    >>> frame.header.get("code")
    JsonNumber(value=10.0)

Custom Ports:
    >>> from pyrocketmq import DecoderConfig, RocketMQDecoder
    >>>
    >>> decoder = RocketMQDecoder(DecoderConfig(ports=(9876, 10911, 10909)))

Whole Captures:
    >>> from pyrocketmq import Exchange, decode_all
    >>>
    >>> for result in decode_all(exchanges):
    ...     print(result.frame.summary if result.ok else result.error)
"""

from .body import DecodedBody, decode_generic_body
from .codes import (
    BROKER_PORT,
    DEFAULT_PORTS,
    FILTER_SERVER_PORT,
    NAMESRV_PORT,
    RequestCode,
    ResponseCode,
    request_code_name,
    response_code_name,
)
from .decoder import DecodedFrame, RocketMQDecoder, decode_frame
from .exceptions import (
    DecodeError,
    FrameTooLargeError,
    JsonEncodeError,
    MalformedJsonError,
    RecordEncodeError,
    RocketMQError,
    TruncatedFrameError,
)
from .header import classify_header, decode_header
from .jsonparser import loads, parse
from .models import (
    BodyKind,
    DecoderConfig,
    Direction,
    Exchange,
    FieldNode,
    HeaderInfo,
    MessageRecord,
)
from .protocol import Frame, encode_frame, iter_frames, read_frame, split_frame, write_frame
from .reactive import DecodeResult, ReactiveDecoder, decode_all, from_exchanges
from .record import decode_message_record, encode_message_record, parse_properties
from .value import (
    JsonArray,
    JsonBool,
    JsonNull,
    JsonNumber,
    JsonObject,
    JsonString,
    Value,
    ValueKind,
    from_python,
    stringify,
)

__version__ = "0.1.0"
__author__ = "Firefly Software Solutions Inc."
__license__ = "Apache-2.0"

__all__ = [
    # Decoder
    "RocketMQDecoder",
    "DecodedFrame",
    "decode_frame",
    # Reactive
    "ReactiveDecoder",
    "DecodeResult",
    "decode_all",
    "from_exchanges",
    # Frames
    "Frame",
    "split_frame",
    "read_frame",
    "iter_frames",
    "encode_frame",
    "write_frame",
    # Header and body
    "decode_header",
    "classify_header",
    "DecodedBody",
    "decode_generic_body",
    "decode_message_record",
    "encode_message_record",
    "parse_properties",
    # Codes
    "RequestCode",
    "ResponseCode",
    "request_code_name",
    "response_code_name",
    "DEFAULT_PORTS",
    "NAMESRV_PORT",
    "BROKER_PORT",
    "FILTER_SERVER_PORT",
    # JSON values
    "parse",
    "loads",
    "stringify",
    "from_python",
    "Value",
    "ValueKind",
    "JsonNull",
    "JsonBool",
    "JsonNumber",
    "JsonString",
    "JsonArray",
    "JsonObject",
    # Models (Pydantic)
    "DecoderConfig",
    "Exchange",
    "FieldNode",
    "HeaderInfo",
    "MessageRecord",
    "Direction",
    "BodyKind",
    # Exceptions
    "RocketMQError",
    "DecodeError",
    "MalformedJsonError",
    "TruncatedFrameError",
    "FrameTooLargeError",
    "JsonEncodeError",
    "RecordEncodeError",
]
