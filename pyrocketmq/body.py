# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Decoding of bodies that are not stored message records."""

from __future__ import annotations

from dataclasses import dataclass

from .jsonparser import DEFAULT_MAX_DEPTH, parse
from .models import BodyKind
from .value import Value


@dataclass(frozen=True)
class DecodedBody:
    """A body decoded as JSON, or kept as opaque bytes."""

    kind: BodyKind
    value: Value | None = None
    raw: bytes | None = None


def decode_generic_body(body: bytes, *, max_depth: int = DEFAULT_MAX_DEPTH) -> DecodedBody:
    """
    Decode a body as JSON when it starts with ``{`` or ``[``.

    Anything else is returned untouched as an opaque body; that is not an
    error.

    Raises:
        MalformedJsonError: If a JSON-looking body does not parse.
    """
    if not body:
        return DecodedBody(kind=BodyKind.NONE)
    if body[:1] not in (b"{", b"["):
        return DecodedBody(kind=BodyKind.OPAQUE, raw=body)
    text = body.decode("utf-8", errors="replace")
    value, _ = parse(text, 0, "}", max_depth=max_depth)
    return DecodedBody(kind=BodyKind.JSON, value=value)
