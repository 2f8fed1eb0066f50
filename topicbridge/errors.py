class TopicBridgeError(Exception):
    pass


class TransportUnavailable(TopicBridgeError):
    """The native Kafka client could not be loaded."""
