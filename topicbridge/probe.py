"""Weak connectivity check: subscribe, poll once, report whether errors fired.

An empty topic is still healthy; only transport errors reported during the
single poll make the probe fail.
"""

from typing import Optional, Union

from confluent_kafka import KafkaError, KafkaException

from . import diagnostics, kafka_utils
from .models import ConnectionParameters, ConnectorOptions, ProbeResult


class _ErrorSlot:
    """First error seen during one probe call."""

    def __init__(self):
        self.reason: Optional[str] = None

    def record(self, err: Union[KafkaError, BaseException, str]) -> None:
        if self.reason is None:
            self.reason = kafka_utils.reason(err)


def probe(params: ConnectionParameters, topic: str,
          options: Optional[ConnectorOptions] = None) -> ProbeResult:
    if not topic:
        raise ValueError("topic must not be empty")
    options = options or ConnectorOptions()
    sink = diagnostics.get_sink(options.log_path)
    prefix = f"CheckConnection. Topic: {topic}. "
    slot = _ErrorSlot()

    try:
        consumer = kafka_utils.build_consumer(params, topic, "earliest", slot.record)
    except KafkaException as e:
        slot.record(e)
    else:
        try:
            consumer.poll(params.poll_timeout_ms / 1000.0)
        except KafkaException as e:
            slot.record(e)
        finally:
            try:
                consumer.close()
            except (KafkaException, RuntimeError) as e:
                slot.record(e)

    if slot.reason is not None:
        sink.error(f"{prefix}Connection error: {slot.reason}")
        return ProbeResult(healthy=False, reason=slot.reason)
    sink.log(f"{prefix}Connection OK.")
    return ProbeResult(healthy=True)


def check_connection(params: ConnectionParameters, topic: str,
                     options: Optional[ConnectorOptions] = None) -> bool:
    return probe(params, topic, options).healthy
