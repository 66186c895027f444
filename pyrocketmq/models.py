# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Pydantic models for pyrocketmq.

Provides validated configuration and the structured results handed to a
presentation layer.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .codes import DEFAULT_PORTS
from .jsonparser import DEFAULT_MAX_DEPTH
from .protocol import MAX_FRAME_SIZE, PREFIX_SIZE


class Direction(str, Enum):
    """Which way an exchange travels relative to the listening server."""
    REQUEST = "request"
    RESPONSE = "response"

    @property
    def tag(self) -> str:
        return "[REQUEST]" if self is Direction.REQUEST else "[RESPONSE]"

    @property
    def arrow(self) -> str:
        return "↑↑↑" if self is Direction.REQUEST else "↓↓↓"


class BodyKind(str, Enum):
    """How the body of a frame was interpreted."""
    NONE = "none"
    JSON = "json"
    MESSAGE_RECORD = "message_record"
    OPAQUE = "opaque"


# ============================================================================
# Configuration Models
# ============================================================================


class DecoderConfig(BaseModel):
    """Configuration for the frame decoder."""

    model_config = ConfigDict(frozen=True)

    ports: tuple[int, ...] = Field(
        default=DEFAULT_PORTS,
        description="Server listening ports; traffic sent to them is a request",
    )
    found_remark: str = Field(
        default="FOUND",
        description="Response remark that marks a body as a stored message record",
    )
    max_json_depth: int = Field(default=DEFAULT_MAX_DEPTH, ge=1, le=400)
    max_frame_size: int = Field(default=MAX_FRAME_SIZE, ge=PREFIX_SIZE)

    @field_validator("ports")
    @classmethod
    def validate_ports(cls, v: tuple[int, ...]) -> tuple[int, ...]:
        if not v:
            raise ValueError("At least one port is required")
        for port in v:
            if not 1 <= port <= 65535:
                raise ValueError(f"Invalid port: {port}")
        return tuple(dict.fromkeys(v))


# ============================================================================
# Result Models
# ============================================================================


class FieldNode(BaseModel):
    """One labelled node of a decoded field tree."""

    model_config = ConfigDict(frozen=True)

    label: str
    text: str = ""
    children: list[FieldNode] = Field(default_factory=list)

    def find(self, label: str) -> FieldNode | None:
        """Return the first direct child with the given label."""
        for child in self.children:
            if child.label == label:
                return child
        return None


class HeaderInfo(BaseModel):
    """What the header classifier recognized in a frame header."""

    model_config = ConfigDict(frozen=True)

    direction: Direction
    code: int | None = None
    code_name: str | None = None
    topic: str | None = None
    remark: str | None = None
    remark_is_found: bool = False
    summary: str


class MessageRecord(BaseModel):
    """A stored message as returned by a query-by-id response."""

    model_config = ConfigDict(frozen=True)

    total_size: int
    magic_code: int
    body_crc: int
    queue_id: int
    flag: int
    queue_offset: int
    physical_offset: int
    sys_flag: int
    born_timestamp: int
    born_host: str
    born_port: int
    store_timestamp: int
    store_host: str
    store_port: int
    reconsume_times: int
    prepared_transaction_offset: int
    body: bytes
    topic: str
    properties_length: int = 0
    properties: list[tuple[str, str]] = Field(default_factory=list)
    skipped_property_bytes: int = 0

    @property
    def magic_code_hex(self) -> str:
        return f"0X{self.magic_code:08X}"

    @property
    def born_address(self) -> str:
        return f"{self.born_host}:{self.born_port}"

    @property
    def store_address(self) -> str:
        return f"{self.store_host}:{self.store_port}"

    @property
    def body_text(self) -> str:
        """Body decoded as UTF-8, undecodable bytes replaced."""
        return self.body.decode("utf-8", errors="replace")

    def get_property(self, key: str, default: str | None = None) -> str | None:
        """Look up a property; the last pair with that key wins."""
        for k, v in reversed(self.properties):
            if k == key:
                return v
        return default


class Exchange(BaseModel):
    """One reassembled exchange handed over by the transport layer."""

    model_config = ConfigDict(frozen=True)

    data: bytes
    src_port: int = Field(ge=0, le=65535)
    dst_port: int = Field(ge=0, le=65535)
