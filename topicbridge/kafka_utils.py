from confluent_kafka import Producer, Consumer, KafkaError, KafkaException
from typing import Callable, Optional, Union

from . import transport
from .models import ConnectionParameters

ErrorCallback = Callable[[KafkaError], None]


def reason(err: Union[KafkaError, BaseException, str]) -> str:
    if isinstance(err, KafkaException) and err.args and isinstance(err.args[0], KafkaError):
        err = err.args[0]
    if isinstance(err, KafkaError):
        return err.str()
    return str(err)


def consumer_config(params: ConnectionParameters, offset_reset: str = "latest",
                    on_error: Optional[ErrorCallback] = None) -> dict:
    conf = {
        "bootstrap.servers": params.servers,
        "group.id": params.group_id,
        # credentials are carried by ConnectionParameters but not applied
        "security.protocol": "plaintext",
        "fetch.max.bytes": params.fetch_max_bytes,
        "message.max.bytes": params.message_max_bytes,
        "receive.message.max.bytes": params.receive_message_max_bytes,
        "auto.offset.reset": offset_reset,
        "max.poll.interval.ms": params.max_poll_interval_ms,
        "session.timeout.ms": params.session_timeout_ms,
        "enable.auto.commit": True,
        "enable.auto.offset.store": False,
    }
    if on_error is not None:
        conf["error_cb"] = on_error
    return conf


def producer_config(params: ConnectionParameters, on_error: Optional[ErrorCallback] = None) -> dict:
    conf = {
        "bootstrap.servers": params.servers,
        "security.protocol": "plaintext",
        "message.max.bytes": params.message_max_bytes,
        "enable.idempotence": True,
        "acks": "all",
        "linger.ms": 0,
        "batch.num.messages": 1,
    }
    if on_error is not None:
        conf["error_cb"] = on_error
    return conf


def build_producer(params: ConnectionParameters, on_error: Optional[ErrorCallback] = None) -> Producer:
    transport.ensure_ready()
    return Producer(producer_config(params, on_error))


def build_consumer(params: ConnectionParameters, topic: str, offset_reset: str = "latest",
                   on_error: Optional[ErrorCallback] = None) -> Consumer:
    transport.ensure_ready()
    c = Consumer(consumer_config(params, offset_reset, on_error))
    try:
        c.subscribe([topic])
    except (KafkaException, RuntimeError):
        c.close()
        raise
    return c


def send(producer: Producer, topic: str, value: str, key: Optional[str] = None,
         on_delivery: Optional[Callable] = None, timeout: float = -1) -> int:
    """Produce one record and wait for it; returns the number still undelivered."""
    producer.produce(
        topic,
        value=value.encode("utf-8"),
        key=key.encode("utf-8") if key else None,
        on_delivery=on_delivery,
    )
    return producer.flush(timeout)
