# Copyright (c) 2026 Firefly Software Solutions Inc.
# Licensed under the Apache License, Version 2.0

"""
Reactive Streams support for pyrocketmq.

Provides RxPY-based decoding of many captured exchanges. Each exchange is
decoded on its own: a frame that fails to decode becomes an error result in
the stream, and the frames around it are decoded as usual.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Callable

import reactivex as rx
from reactivex import Observable, abc, operators as ops

from .decoder import DecodedFrame, RocketMQDecoder
from .exceptions import DecodeError
from .models import Exchange

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of decoding one exchange."""

    exchange: Exchange
    frame: DecodedFrame | None = None
    error: DecodeError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class ReactiveDecoder:
    """
    Decode a stream of exchanges using RxPY Observable streams.

    Example:
        >>> decoder = ReactiveDecoder()
        >>> rx.from_iterable(exchanges).pipe(
        ...     decoder.decode(),
        ...     ops.filter(lambda r: r.ok),
        ...     ops.map(lambda r: r.frame.summary),
        ... ).subscribe(on_next=print)
    """

    def __init__(self, decoder: RocketMQDecoder | None = None) -> None:
        """
        Initialize reactive decoder.

        Args:
            decoder: Frame decoder to use (default: RocketMQDecoder()).
        """
        self._decoder = decoder or RocketMQDecoder()

    def decode_one(self, exchange: Exchange) -> DecodeResult:
        """Decode one exchange, capturing structural errors in the result."""
        try:
            frame = self._decoder.decode(exchange.data, exchange.src_port, exchange.dst_port)
        except DecodeError as e:
            logger.warning(
                "Failed to decode %d-byte exchange %d -> %d: %s",
                len(exchange.data),
                exchange.src_port,
                exchange.dst_port,
                e,
            )
            return DecodeResult(exchange=exchange, error=e)
        return DecodeResult(exchange=exchange, frame=frame)

    def decode(
        self,
        scheduler: abc.SchedulerBase | None = None,
    ) -> Callable[[Observable[Exchange]], Observable[DecodeResult]]:
        """
        Create an operator that decodes each exchange.

        Args:
            scheduler: Scheduler to decode on (default: the source's).

        Returns:
            Operator function for use with pipe().
        """
        def _decode(source: Observable[Exchange]) -> Observable[DecodeResult]:
            if scheduler is not None:
                source = source.pipe(ops.observe_on(scheduler))
            return source.pipe(ops.map(self.decode_one))

        return _decode

    def frames(self) -> Callable[[Observable[Exchange]], Observable[DecodedFrame]]:
        """
        Create an operator that emits only successfully decoded frames.

        Returns:
            Operator function for use with pipe().
        """
        def _frames(source: Observable[Exchange]) -> Observable[DecodedFrame]:
            return source.pipe(
                ops.map(self.decode_one),
                ops.filter(lambda result: result.ok),
                ops.map(lambda result: result.frame),
            )

        return _frames


def from_exchanges(
    exchanges: Iterable[Exchange],
    decoder: RocketMQDecoder | None = None,
) -> Observable[DecodeResult]:
    """
    Create an Observable of decode results from captured exchanges.

    Args:
        exchanges: Exchanges in capture order.
        decoder: Frame decoder to use (default: RocketMQDecoder()).

    Returns:
        Observable stream of DecodeResult objects, in input order.
    """
    return rx.from_iterable(exchanges).pipe(ReactiveDecoder(decoder).decode())


def decode_all(
    exchanges: Iterable[Exchange],
    decoder: RocketMQDecoder | None = None,
) -> list[DecodeResult]:
    """
    Decode every exchange and collect the results.

    Args:
        exchanges: Exchanges in capture order.
        decoder: Frame decoder to use (default: RocketMQDecoder()).

    Returns:
        One DecodeResult per exchange, in input order.
    """
    results: list[DecodeResult] = []
    from_exchanges(exchanges, decoder).subscribe(on_next=results.append)
    return results
