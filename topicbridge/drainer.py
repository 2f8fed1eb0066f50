"""Drain a topic: poll until the first empty poll and return what was read.

A single empty poll means the topic is exhausted for now; the loop does not
wait for late arrivals. Offsets are stored manually (auto commit of stored
offsets stays on), and a message is only added to the batch after its
offset was stored. Messages that fail are logged and skipped.

The cancel event is checked between polls, so a cancel set while a poll is
waiting takes effect once that poll returns (up to the poll timeout).

Message ids are the stringified offsets. Offsets are only unique within a
partition, so a multi-partition topic can yield repeated ids in one batch.
"""

import threading
from datetime import datetime, timezone
from typing import List, Optional

from confluent_kafka import KafkaError, KafkaException, TIMESTAMP_NOT_AVAILABLE

from . import diagnostics, kafka_utils
from .models import ConnectionParameters, ConnectorOptions, DrainResult, InboundMessage, EPOCH


def _text(raw) -> str:
    if raw is None:
        return ""
    if isinstance(raw, str):
        return raw
    return raw.decode("utf-8")


def to_inbound(msg, include_key: bool = True) -> InboundMessage:
    ts_type, ts = msg.timestamp()
    if ts_type == TIMESTAMP_NOT_AVAILABLE:
        created = EPOCH
    else:
        created = datetime.fromtimestamp(ts / 1000.0, tz=timezone.utc)
    return InboundMessage(
        message_id=str(msg.offset()),
        created=created,
        key=_text(msg.key()) if include_key else "",
        value=_text(msg.value()),
    )


def _capture(consumer, msg, include_key: bool) -> InboundMessage:
    err = msg.error()
    if err is not None:
        raise KafkaException(err)
    item = to_inbound(msg, include_key)
    consumer.store_offsets(message=msg)
    return item


def drain(params: ConnectionParameters, topic: str, timeout_ms: Optional[int] = None,
          options: Optional[ConnectorOptions] = None,
          cancel: Optional[threading.Event] = None) -> DrainResult:
    if not topic:
        raise ValueError("topic must not be empty")
    if timeout_ms is None:
        timeout_ms = params.poll_timeout_ms
    if timeout_ms <= 0:
        raise ValueError("timeout_ms must be positive")

    options = options or ConnectorOptions()
    sink = diagnostics.get_sink(options.log_path)
    prefix = f"ReadMessagesFromTopic. Topic: {topic}. "

    def on_error(err: KafkaError):
        sink.error(f"{prefix}Connection error: {kafka_utils.reason(err)}")

    batch: List[InboundMessage] = []
    error = ""
    sink.log(f"{prefix}Process started.")

    try:
        consumer = kafka_utils.build_consumer(params, topic, "latest", on_error)
    except KafkaException as e:
        sink.error(f"{prefix}Subscription failed: {kafka_utils.reason(e)}")
        sink.log(f"{prefix}Process finished.")
        return DrainResult()

    try:
        while True:
            if cancel is not None and cancel.is_set():
                error = "Drain cancelled"
                sink.error(f"{prefix}{error}, returning {len(batch)} message(s).")
                break

            msg = consumer.poll(timeout_ms / 1000.0)
            if msg is None:
                sink.log(f"{prefix}No messages available.")
                break

            offset = msg.offset()
            sink.log(f"{prefix}Processing message: {offset}.")
            try:
                item = _capture(consumer, msg, options.include_key)
            except (KafkaException, ValueError) as e:
                sink.error(f"{prefix}Message with Id: {offset} failed: {kafka_utils.reason(e)}.")
                continue
            batch.append(item)
            sink.log(f"{prefix}Message with Id: {offset} processed.")
    except KeyboardInterrupt:
        error = "Drain cancelled by interrupt"
        sink.error(f"{prefix}{error}, returning {len(batch)} message(s).")
    except KafkaException as e:
        error = f"Poll failed: {kafka_utils.reason(e)}"
        sink.error(f"{prefix}{error}")
    finally:
        try:
            consumer.close()
        except (KafkaException, RuntimeError) as e:
            sink.error(f"{prefix}Close failed: {e}")

    sink.log(f"{prefix}Process finished.")
    return DrainResult(messages=tuple(batch), error=error)
