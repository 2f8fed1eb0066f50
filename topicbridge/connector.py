import threading
from typing import Optional

from . import drainer, probe, publisher
from .models import ConnectionParameters, ConnectorOptions, DrainResult, ProbeResult


class Connector:
    """Connection settings plus the three operations callers use.

    Holds no broker handles; every call opens and closes its own consumer or
    producer.
    """

    def __init__(self, params: ConnectionParameters, options: Optional[ConnectorOptions] = None):
        self.params = params
        self.options = options or ConnectorOptions()

    @classmethod
    def from_env(cls, options: Optional[ConnectorOptions] = None, **overrides) -> "Connector":
        return cls(ConnectionParameters.from_env(**overrides), options)

    def read_messages(self, topic: str, timeout_ms: Optional[int] = None,
                      cancel: Optional[threading.Event] = None) -> DrainResult:
        return drainer.drain(self.params, topic, timeout_ms, self.options, cancel)

    def check_connection(self, topic: str) -> bool:
        return probe.check_connection(self.params, topic, self.options)

    def probe(self, topic: str) -> ProbeResult:
        return probe.probe(self.params, topic, self.options)

    def publish(self, topic: str, value: str, key: str = "") -> str:
        return publisher.publish(self.params, topic, value, key, self.options)
