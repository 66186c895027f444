#!/usr/bin/env python3
"""
02_reactive_decode.py - Decoding a Capture with Reactive Streams

This example demonstrates:
- Splitting a captured stream into frames
- Decoding every exchange as an Observable stream
- Keeping going past frames that fail to decode
- Filtering and counting results with operators

Prerequisites:
    - pyrocketmq installed

Run with:
    python 02_reactive_decode.py
"""

import logging

import reactivex as rx
from reactivex import operators as ops

from pyrocketmq import (
    Exchange,
    ReactiveDecoder,
    decode_all,
    encode_frame,
    from_exchanges,
    iter_frames,
)

CLIENT_PORT = 53412
BROKER_PORT = 10911


def capture():
    """A client-to-broker stream plus the broker's replies"""
    outbound = b"".join([
        encode_frame({"code": 34}, b'{"clientID":"10.0.0.5@1234","producerDataSet":[]}'),
        encode_frame({"code": 10, "extFields": {"topic": "Orders"}}, b"order-1"),
        encode_frame({"code": 11, "extFields": {"topic": "Orders"}}),
    ])
    inbound = b"".join([
        encode_frame({"code": 0}),
        encode_frame({"code": 0, "remark": "OK"}, b"{not json"),
        encode_frame({"code": 19, "remark": "no new message"}),
    ])

    exchanges = []
    for out_frame, in_frame in zip(iter_frames(outbound), iter_frames(inbound)):
        exchanges.append(Exchange(data=out_frame, src_port=CLIENT_PORT, dst_port=BROKER_PORT))
        exchanges.append(Exchange(data=in_frame, src_port=BROKER_PORT, dst_port=CLIENT_PORT))
    return exchanges


def collect_example(exchanges):
    """Decode everything, errors included"""
    print("Collect Results")
    print("-" * 50)

    for result in decode_all(exchanges):
        if result.ok:
            print(f"  ✓ {result.frame.summary}")
        else:
            print(f"  ✗ {result.error}")


def pipeline_example(exchanges):
    """Compose a pipeline over the decoded frames"""
    print("\nTopic Pipeline")
    print("-" * 50)

    topics = []
    from_exchanges(exchanges).pipe(
        ops.filter(lambda r: r.ok and r.frame.header_info.topic is not None),
        ops.map(lambda r: r.frame.header_info.topic),
        ops.distinct(),
    ).subscribe(on_next=topics.append)
    print(f"  Topics seen: {topics}")

    bodies = []
    rx.from_iterable(exchanges).pipe(
        ReactiveDecoder().frames(),
        ops.map(lambda frame: frame.body_kind.value),
        ops.to_list(),
    ).subscribe(on_next=bodies.extend)
    print(f"  Body kinds: {bodies}")


def main():
    logging.basicConfig(level=logging.WARNING)

    print("=" * 50)
    print("pyrocketmq Reactive Decoding Example")
    print("=" * 50)

    exchanges = capture()
    collect_example(exchanges)
    pipeline_example(exchanges)

    print("\n" + "=" * 50)
    print("✓ Reactive decoding examples completed!")


if __name__ == "__main__":
    main()
