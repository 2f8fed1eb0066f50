import argparse
import json
import sys

from pydantic import ValidationError

from . import config
from .connector import Connector
from .errors import TopicBridgeError
from .models import ConnectorOptions


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="topicbridge")
    parser.add_argument("--bootstrap-servers", default=None, help="host:port[,host:port...]")
    parser.add_argument("--group-id", default=None)
    parser.add_argument("--log-path", default=config.LOG_PATH or None, help="Directory for the daily log")
    sub = parser.add_subparsers(dest="command", required=True)

    p_drain = sub.add_parser("drain", help="Read every available message of a topic")
    p_drain.add_argument("topic")
    p_drain.add_argument("--timeout-ms", type=int, default=None)
    p_drain.add_argument("--no-key", action="store_true", help="Do not read message keys")
    p_drain.add_argument("--envelope", action="store_true", help="Wrap output as {success, error, messages}")

    p_check = sub.add_parser("check", help="Check that the broker is reachable")
    p_check.add_argument("topic")

    p_pub = sub.add_parser("publish", help="Publish one message")
    p_pub.add_argument("topic")
    p_pub.add_argument("value")
    p_pub.add_argument("--key", default="")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    options = ConnectorOptions(
        include_key=not getattr(args, "no_key", False),
        log_path=args.log_path,
        wrap_in_envelope=getattr(args, "envelope", False),
    )
    try:
        connector = Connector.from_env(
            options,
            bootstrap_servers=args.bootstrap_servers,
            group_id=args.group_id,
        )
    except ValidationError as e:
        print(f"Invalid connection parameters: {e}", file=sys.stderr)
        return 2

    try:
        if args.command == "drain":
            result = connector.read_messages(args.topic, args.timeout_ms)
            print(json.dumps(result.as_payload(options), ensure_ascii=False, indent=2))
            return 0 if result.ok else 1

        if args.command == "check":
            ok = connector.check_connection(args.topic)
            print("OK" if ok else "KO")
            return 0 if ok else 1

        reason = connector.publish(args.topic, args.value, args.key)
        if reason:
            print(reason, file=sys.stderr)
            return 1
        return 0
    except (TopicBridgeError, ValueError) as e:
        print(f"[topicbridge] {e}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
