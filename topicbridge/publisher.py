from typing import Optional

from confluent_kafka import KafkaException

from . import diagnostics, kafka_utils
from .models import ConnectionParameters, ConnectorOptions


class _Delivery:
    def __init__(self):
        self.reason: Optional[str] = None
        self.offset: Optional[int] = None

    def report(self, err, msg):
        if err is not None:
            self.reason = kafka_utils.reason(err)
        elif msg is not None:
            self.offset = msg.offset()


def publish(params: ConnectionParameters, topic: str, value: str, key: str = "",
            options: Optional[ConnectorOptions] = None) -> str:
    """Send one record and wait for the broker; returns "" or the failure reason.

    A fresh producer is used for every call. An empty ``key`` sends no key.
    """
    if not topic:
        raise ValueError("topic must not be empty")
    options = options or ConnectorOptions()
    sink = diagnostics.get_sink(options.log_path)
    prefix = f"PublishMessage. Topic: {topic}. "
    delivery = _Delivery()
    timeout = params.publish_timeout_ms / 1000.0

    try:
        producer = kafka_utils.build_producer(params)
        remaining = kafka_utils.send(producer, topic, value, key or None,
                                     on_delivery=delivery.report, timeout=timeout)
    except (KafkaException, BufferError) as e:
        delivery.reason = kafka_utils.reason(e)
    else:
        if remaining and delivery.reason is None:
            delivery.reason = f"Delivery not confirmed within {params.publish_timeout_ms} ms"

    if delivery.reason is not None:
        sink.error(f"{prefix}Publish failed: {delivery.reason}")
        return delivery.reason
    sink.log(f"{prefix}Message published at offset {delivery.offset}.")
    return ""
