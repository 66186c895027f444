# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Frame header decoding and classification.

The header is a JSON object. Well-known keys:

    code       operation (request) or outcome (response) code
    remark     diagnostic text; ``FOUND`` marks a stored-message body
    extFields  nested object, may carry ``topic``

Any other keys are passed through untouched. None of the keys is required.
"""

from __future__ import annotations

from collections.abc import Collection

from .codes import request_code_name, response_code_name
from .exceptions import MalformedJsonError
from .jsonparser import DEFAULT_MAX_DEPTH, EXCERPT_SIZE, parse
from .models import Direction, HeaderInfo
from .value import JsonNull, JsonNumber, JsonObject, JsonString, Value, stringify

FOUND_REMARK: str = "FOUND"


def decode_header(header: bytes, *, max_depth: int = DEFAULT_MAX_DEPTH) -> JsonObject:
    """
    Decode header bytes into a JSON object.

    Raises:
        MalformedJsonError: If the header is not a JSON object.
    """
    text = header.decode("utf-8", errors="replace")
    if not text.strip():
        return JsonObject()
    value, _ = parse(text, 0, "}", max_depth=max_depth)
    if value is None:
        return JsonObject()
    if not isinstance(value, JsonObject):
        raise MalformedJsonError(
            f"Header is a JSON {value.kind.value}, expected an object",
            0,
            text[:EXCERPT_SIZE],
        )
    return value


def direction_for_port(dst_port: int, ports: Collection[int]) -> Direction:
    """Traffic sent to one of the server ports is a request."""
    return Direction.REQUEST if dst_port in ports else Direction.RESPONSE


def _text(value: Value) -> str:
    if isinstance(value, JsonString):
        return value.value
    return stringify(value)


def classify_header(
    header: JsonObject,
    direction: Direction,
    *,
    found_remark: str = FOUND_REMARK,
) -> HeaderInfo:
    """
    Recognize the code, topic and remark of a header and build its summary.

    The summary reads ``[REQUEST]↑↑↑ code=10(SEND_MESSAGE) topic:T1`` for a
    request and ``[RESPONSE]↓↓↓ code=0(SUCCESS)`` for a response. Codes
    missing from the tables and absent keys just leave their part out.

    Args:
        header: Decoded header object.
        direction: Direction of the exchange.
        found_remark: Remark that routes a response body to the
            message-record decoder.

    Returns:
        HeaderInfo with the recognized values.
    """
    parts = [direction.tag + direction.arrow]

    code_value = header.get("code")
    code = code_value.as_int() if isinstance(code_value, JsonNumber) else None
    topic = None
    remark = None
    remark_is_found = False

    if direction is Direction.REQUEST:
        code_name = request_code_name(code_value)
        if code_name is not None:
            parts.append(f" code={code}({code_name})")
        ext_fields = header.get("extFields")
        if isinstance(ext_fields, JsonObject):
            topic_value = ext_fields.get("topic")
            if topic_value is not None and not isinstance(topic_value, JsonNull):
                topic = _text(topic_value)
                parts.append(f" topic:{topic}")
    else:
        code_name = response_code_name(code_value)
        if code_name is not None:
            parts.append(f" code={code}({code_name})")
        remark_value = header.get("remark")
        if isinstance(remark_value, JsonString):
            remark = remark_value.value
            remark_is_found = remark == found_remark

    return HeaderInfo(
        direction=direction,
        code=code,
        code_name=code_name,
        topic=topic,
        remark=remark,
        remark_is_found=remark_is_found,
        summary="".join(parts),
    )
