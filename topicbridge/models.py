from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from typing import Optional, List, Dict, Any, Tuple, Union
from datetime import datetime, timezone

from . import config

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class ConnectionParameters(BaseModel):
    model_config = ConfigDict(frozen=True)

    bootstrap_servers: List[str]
    group_id: str
    username: str = ""
    password: str = ""
    fetch_max_bytes: int = 1_800_000_000
    message_max_bytes: int = 1_000_000_000
    receive_message_max_bytes: int = 1_850_000_000
    max_poll_interval_ms: int = 10_000
    session_timeout_ms: int = 10_000
    publish_timeout_ms: int = 10_000

    @field_validator("bootstrap_servers", mode="before")
    @classmethod
    def _split_servers(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        servers = [s.strip() for s in v if s and s.strip()]
        if not servers:
            raise ValueError("at least one broker address is required")
        return servers

    @field_validator("group_id")
    @classmethod
    def _group_required(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("group_id must not be empty")
        return v

    @model_validator(mode="after")
    def _check_limits(self):
        # poll budget is the interval minus one second
        if self.max_poll_interval_ms <= 1000:
            raise ValueError("max_poll_interval_ms must be greater than 1000")
        if self.publish_timeout_ms <= 0:
            raise ValueError("publish_timeout_ms must be positive")
        return self

    @property
    def servers(self) -> str:
        return ",".join(self.bootstrap_servers)

    @property
    def poll_timeout_ms(self) -> int:
        return self.max_poll_interval_ms - 1000

    @classmethod
    def from_env(cls, **overrides) -> "ConnectionParameters":
        values = {
            "bootstrap_servers": config.KAFKA_BOOTSTRAP_SERVERS,
            "group_id": config.KAFKA_GROUP_ID,
            "username": config.KAFKA_USERNAME,
            "password": config.KAFKA_PASSWORD,
            "fetch_max_bytes": config.KAFKA_FETCH_MAX_BYTES,
            "message_max_bytes": config.KAFKA_MESSAGE_MAX_BYTES,
            "receive_message_max_bytes": config.KAFKA_RECEIVE_MESSAGE_MAX_BYTES,
            "max_poll_interval_ms": config.KAFKA_MAX_POLL_INTERVAL_MS,
            "session_timeout_ms": config.KAFKA_SESSION_TIMEOUT_MS,
            "publish_timeout_ms": config.KAFKA_PUBLISH_TIMEOUT_MS,
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


class ConnectorOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    include_key: bool = True
    log_path: Optional[str] = None
    wrap_in_envelope: bool = False


class InboundMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    message_id: str
    created: datetime = EPOCH
    key: str = ""
    value: str = ""


class DrainResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    messages: Tuple[InboundMessage, ...] = ()
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error

    def as_payload(self, options: Optional[ConnectorOptions] = None) -> Union[List[Dict[str, Any]], Dict[str, Any]]:
        options = options or ConnectorOptions()
        exclude = None if options.include_key else {"key"}
        items = [m.model_dump(mode="json", exclude=exclude) for m in self.messages]
        if not options.wrap_in_envelope:
            return items
        return {"success": self.ok, "error": self.error, "messages": items}


class ProbeResult(BaseModel):
    healthy: bool
    reason: str = ""
