"""Process-wide readiness of the native Kafka client.

confluent_kafka ships librdkafka inside its wheels, so choosing the native
library is a matter of importing the right build for the host. The import is
done once, on first use, and the result is cached for the life of the process.
Callers only learn whether the transport is ready.
"""

import importlib
import logging
import platform
import threading
from dataclasses import dataclass
from typing import Optional

from .errors import TransportUnavailable

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TransportInfo:
    client_version: str
    library_version: str
    platform: str


_info: Optional[TransportInfo] = None
_lock = threading.Lock()


def _platform_tag() -> str:
    system = platform.system() or "unknown"
    machine = platform.machine() or "unknown"
    return f"{system.lower()}-{machine.lower()}"


def _load() -> TransportInfo:
    tag = _platform_tag()
    try:
        ck = importlib.import_module("confluent_kafka")
    except ImportError as e:
        raise TransportUnavailable(f"Kafka client not available for {tag}: {e}") from e
    info = TransportInfo(
        client_version=ck.version()[0],
        library_version=ck.libversion()[0],
        platform=tag,
    )
    logger.info("Kafka transport ready: confluent-kafka %s, librdkafka %s (%s)",
                info.client_version, info.library_version, info.platform)
    return info


def ensure_ready() -> TransportInfo:
    global _info
    if _info is not None:
        return _info
    with _lock:
        if _info is None:
            _info = _load()
    return _info
