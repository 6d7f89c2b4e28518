from __future__ import annotations

import argparse
import json
import logging
import sys

from data_designer_trust_score.errors import InvalidInputError, PersistenceError, RuleSetUnavailableError
from data_designer_trust_score.history import JsonFileHistoryStore
from data_designer_trust_score.rules import YamlRuleSetProvider
from data_designer_trust_score.service import TrustScoreService

EXIT_INVALID_INPUT = 2
EXIT_RULES_UNAVAILABLE = 3
EXIT_HISTORY_UNAVAILABLE = 4

logger = logging.getLogger(__name__)


def read_text(path: str) -> str:
    if path == "-":
        return sys.stdin.read()
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="trust-score", description="Score text for trust signals.")
    parser.add_argument("input", nargs="?", default="-", help="text file to score, '-' for stdin (default)")
    parser.add_argument("--rules", default="rules.yaml", help="YAML file with a 'keywords' list")
    parser.add_argument("--compare", default=None, help="second text file to score side by side")
    parser.add_argument("--history", default=None, help="JSON file to record results in")
    parser.add_argument("--user-id", default=None, help="record results under this user")
    parser.add_argument("--list-history", action="store_true", help="print stored results for --user-id and exit")
    parser.add_argument("--details", action="store_true", help="include match counts and issues")
    parser.add_argument("--verbose", "-v", action="store_true")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s %(name)s: %(message)s",
    )

    history = JsonFileHistoryStore(args.history) if args.history else None
    with TrustScoreService(YamlRuleSetProvider(args.rules), history=history) as service:
        if args.list_history:
            if not args.user_id:
                print("error: --list-history requires --user-id", file=sys.stderr)
                return EXIT_INVALID_INPUT
            try:
                entries = service.history(args.user_id)
            except PersistenceError as exc:
                print(f"error: {exc}", file=sys.stderr)
                return EXIT_HISTORY_UNAVAILABLE
            print(json.dumps([e.to_payload() for e in entries], ensure_ascii=False, indent=2))
            return 0

        try:
            text = read_text(args.input)
            other = read_text(args.compare) if args.compare else None
        except (OSError, UnicodeDecodeError) as exc:
            print(f"error: cannot read input: {exc}", file=sys.stderr)
            return EXIT_INVALID_INPUT

        try:
            if other is not None:
                results = service.compare(text, other, user_id=args.user_id)
                payload = [r.to_payload(include_details=args.details) for r in results]
            else:
                payload = service.analyze(text, user_id=args.user_id).to_payload(include_details=args.details)
        except InvalidInputError as exc:
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_INVALID_INPUT
        except RuleSetUnavailableError as exc:
            logger.debug("rule set fetch failed", exc_info=exc.__cause__)
            print(f"error: {exc}", file=sys.stderr)
            return EXIT_RULES_UNAVAILABLE

    print(json.dumps(payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
