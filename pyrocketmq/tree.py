# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""Labelled field trees for displaying decoded frames."""

from __future__ import annotations

from .models import FieldNode, MessageRecord
from .value import JsonArray, JsonObject, Value, stringify


def flatten_value(label: str, value: Value) -> FieldNode:
    """
    Turn a decoded value into a labelled sub-tree.

    Containers become nodes whose children are their items (arrays are
    labelled by index, and non-empty ones carry a ``size: n`` text); every
    other value is a leaf holding its JSON text.
    """
    if isinstance(value, JsonArray):
        return FieldNode(
            label=label,
            text=f"size: {len(value)}" if len(value) else "",
            children=[flatten_value(str(i), item) for i, item in enumerate(value)],
        )
    if isinstance(value, JsonObject):
        return FieldNode(
            label=label,
            children=[flatten_value(k, v) for k, v in value.items()],
        )
    return FieldNode(label=label, text=stringify(value))


def header_tree(header: JsonObject) -> FieldNode:
    return FieldNode(
        label="Header",
        children=[flatten_value(k, v) for k, v in header.items()],
    )


def record_tree(record: MessageRecord) -> FieldNode:
    """Display tree of a message record, in wire order."""
    children = [
        FieldNode(label="totalSize", text=str(record.total_size)),
        FieldNode(label="magicCode", text=record.magic_code_hex),
        FieldNode(label="bodyCRC", text=str(record.body_crc)),
        FieldNode(label="queueId", text=str(record.queue_id)),
        FieldNode(label="flag", text=str(record.flag)),
        FieldNode(label="queueOffset", text=str(record.queue_offset)),
        FieldNode(label="physicOffset", text=str(record.physical_offset)),
        FieldNode(label="sysFlag", text=str(record.sys_flag)),
        FieldNode(label="bornTimeStamp", text=str(record.born_timestamp)),
        FieldNode(label="bornHost", text=record.born_host),
        FieldNode(label="port", text=str(record.born_port)),
        FieldNode(label="storeTimestamp", text=str(record.store_timestamp)),
        FieldNode(label="storeHost", text=record.store_host),
        FieldNode(label="storePort", text=str(record.store_port)),
        FieldNode(label="reconsumeTimes", text=str(record.reconsume_times)),
        FieldNode(
            label="preparedTransactionOffset",
            text=str(record.prepared_transaction_offset),
        ),
        FieldNode(label="body", text=record.body_text),
        FieldNode(label="topic", text=record.topic),
        FieldNode(label="propertiesLength", text=str(record.properties_length)),
    ]
    if record.properties_length > 0:
        children.append(FieldNode(
            label="propertiesStr",
            text=f"size: {record.properties_length}",
            children=[FieldNode(label=k, text=v) for k, v in record.properties],
        ))
    return FieldNode(label="Body", children=children)
