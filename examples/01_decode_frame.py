#!/usr/bin/env python3
"""
01_decode_frame.py - Decoding Single Exchanges

This example demonstrates:
- Building request and response frames
- Decoding a frame and reading its summary
- Walking the labelled field tree
- Decoding a stored message returned by a FOUND response

Prerequisites:
    - pyrocketmq installed

Run with:
    python 01_decode_frame.py
"""

from pyrocketmq import (
    MessageRecord,
    RocketMQDecoder,
    encode_frame,
    encode_message_record,
)


def print_tree(node, indent=0):
    """Print a field tree, one node per line"""
    text = f": {node.text}" if node.text else ""
    print(f"{'  ' * indent}{node.label}{text}")
    for child in node.children:
        print_tree(child, indent + 1)


def request_example(decoder):
    """Send request from a producer to a broker"""
    print("Send Request")
    print("-" * 50)

    data = encode_frame(
        {"code": 10, "language": "JAVA", "extFields": {"topic": "TopicTest"}},
        b"Hello RocketMQ",
    )
    frame = decoder.decode(data, src_port=53412, dst_port=10911)

    print(f"  {frame.summary}")
    print_tree(frame.tree(), 1)


def found_example(decoder):
    """Query-by-id response carrying a stored message"""
    print("\nFOUND Response")
    print("-" * 50)

    record = MessageRecord(
        total_size=0,
        magic_code=0xDAA320A7,
        body_crc=0,
        queue_id=0,
        flag=0,
        queue_offset=7,
        physical_offset=4096,
        sys_flag=0,
        born_timestamp=1700000000000,
        born_host="192.168.0.10",
        born_port=51234,
        store_timestamp=1700000000123,
        store_host="10.0.0.1",
        store_port=10911,
        reconsume_times=0,
        prepared_transaction_offset=0,
        body=b"order created",
        topic="TopicTest",
        properties=[("KEYS", "order1"), ("TAGS", "TagA")],
    )
    data = encode_frame({"code": 0, "remark": "FOUND"}, encode_message_record(record))
    frame = decoder.decode(data, src_port=10911, dst_port=53412)

    print(f"  {frame.summary}")
    print(f"  Born at {frame.record.born_address}, tags={frame.record.get_property('TAGS')}")
    print_tree(frame.tree(), 1)


def main():
    print("=" * 50)
    print("pyrocketmq Frame Decoding Example")
    print("=" * 50)

    decoder = RocketMQDecoder()
    request_example(decoder)
    found_example(decoder)

    print("\n" + "=" * 50)
    print("✓ Decoding examples completed!")


if __name__ == "__main__":
    main()
