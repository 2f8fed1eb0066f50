import pytest
from confluent_kafka import KafkaError, KafkaException, TIMESTAMP_CREATE_TIME

from topicbridge import kafka_utils
from topicbridge.models import ConnectionParameters, ConnectorOptions


class FakeMessage:
    def __init__(self, offset, value=b"payload", key=None, ts=1700000000000,
                 error=None, topic="orders", partition=0, ts_type=TIMESTAMP_CREATE_TIME):
        self._offset = offset
        self._value = value
        self._key = key
        self._ts = (ts_type, ts)
        self._error = error
        self._topic = topic
        self._partition = partition

    def offset(self):
        return self._offset

    def key(self):
        return self._key

    def value(self):
        return self._value

    def error(self):
        return self._error

    def timestamp(self):
        return self._ts

    def topic(self):
        return self._topic

    def partition(self):
        return self._partition


class FakeConsumer:
    """Replays ``broker.script`` one poll at a time.

    Script items: a FakeMessage is returned, None is an empty poll, a
    KafkaError fires the error callback and returns nothing, an exception is
    raised, and a callable is invoked to produce the item.
    """

    def __init__(self, broker, conf):
        self.broker = broker
        self.conf = conf
        self.topics = None
        self.polls = []
        self.stored = []
        self.closed = False

    def subscribe(self, topics):
        if self.broker.subscribe_error is not None:
            raise self.broker.subscribe_error
        self.topics = topics

    def poll(self, timeout=-1):
        self.polls.append(timeout)
        if not self.broker.script:
            return None
        item = self.broker.script.pop(0)
        if callable(item):
            item = item()
        if isinstance(item, KafkaError):
            self.conf["error_cb"](item)
            return None
        if isinstance(item, BaseException):
            raise item
        return item

    def store_offsets(self, message=None, offsets=None):
        if message.offset() in self.broker.fail_store:
            raise KafkaException(KafkaError(KafkaError._STATE, "offset store failed"))
        self.stored.append(message.offset())

    def close(self):
        self.closed = True
        if self.broker.close_error is not None:
            raise self.broker.close_error


class FakeProducer:
    def __init__(self, broker, conf):
        self.broker = broker
        self.conf = conf
        self.sent = []
        self.flush_timeouts = []
        self._pending = []

    def produce(self, topic, value=None, key=None, on_delivery=None, **kwargs):
        if self.broker.produce_error is not None:
            raise self.broker.produce_error
        self.sent.append((topic, key, value))
        self._pending.append(on_delivery)

    def flush(self, timeout=-1):
        self.flush_timeouts.append(timeout)
        if self.broker.undelivered:
            return len(self._pending)
        for cb in self._pending:
            if cb is None:
                continue
            if self.broker.delivery_error is not None:
                cb(self.broker.delivery_error, None)
            else:
                self.broker.published += 1
                cb(None, FakeMessage(self.broker.published - 1))
        self._pending = []
        return 0


class FakeBroker:
    def __init__(self):
        self.script = []
        self.fail_store = set()
        self.subscribe_error = None
        self.close_error = None
        self.produce_error = None
        self.delivery_error = None
        self.undelivered = False
        self.published = 0
        self.consumers = []
        self.producers = []

    def make_consumer(self, conf):
        c = FakeConsumer(self, conf)
        self.consumers.append(c)
        return c

    def make_producer(self, conf):
        p = FakeProducer(self, conf)
        self.producers.append(p)
        return p

    @property
    def consumer(self):
        return self.consumers[-1]

    @property
    def producer(self):
        return self.producers[-1]


@pytest.fixture
def broker(monkeypatch):
    b = FakeBroker()
    monkeypatch.setattr(kafka_utils, "Consumer", b.make_consumer)
    monkeypatch.setattr(kafka_utils, "Producer", b.make_producer)
    return b


@pytest.fixture
def params():
    return ConnectionParameters(bootstrap_servers="localhost:9092", group_id="g1")


@pytest.fixture
def options(tmp_path):
    return ConnectorOptions(log_path=str(tmp_path))


@pytest.fixture
def log_text(tmp_path):
    from topicbridge.diagnostics import log_file_name

    def read():
        path = tmp_path / log_file_name()
        return path.read_text(encoding="utf-8") if path.exists() else ""
    return read
