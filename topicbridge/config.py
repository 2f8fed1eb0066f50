import os
from dotenv import load_dotenv

load_dotenv(override=True)

KAFKA_BOOTSTRAP_SERVERS = os.getenv("KAFKA_BOOTSTRAP_SERVERS", "127.0.0.1:9092")
KAFKA_GROUP_ID = os.getenv("KAFKA_GROUP_ID", "topicbridge")

# Carried to ConnectionParameters but never applied to the transport.
KAFKA_USERNAME = os.getenv("KAFKA_USERNAME", "")
KAFKA_PASSWORD = os.getenv("KAFKA_PASSWORD", "")

KAFKA_FETCH_MAX_BYTES = int(os.getenv("KAFKA_FETCH_MAX_BYTES", "1800000000"))
KAFKA_MESSAGE_MAX_BYTES = int(os.getenv("KAFKA_MESSAGE_MAX_BYTES", "1000000000"))
KAFKA_RECEIVE_MESSAGE_MAX_BYTES = int(os.getenv("KAFKA_RECEIVE_MESSAGE_MAX_BYTES", "1850000000"))
KAFKA_MAX_POLL_INTERVAL_MS = int(os.getenv("KAFKA_MAX_POLL_INTERVAL_MS", "10000"))
KAFKA_SESSION_TIMEOUT_MS = int(os.getenv("KAFKA_SESSION_TIMEOUT_MS", "10000"))
KAFKA_PUBLISH_TIMEOUT_MS = int(os.getenv("KAFKA_PUBLISH_TIMEOUT_MS", "10000"))

LOG_PATH = os.getenv("LOG_PATH", "")   # empty = system temp dir
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
