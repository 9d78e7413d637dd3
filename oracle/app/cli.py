"""
Command-line entry point for the Daily Energy Engine.

Usage:
    python -m oracle draw --profile alice [--day 2025-06-01] [--token practical:4]
    python -m oracle history --profile alice
    python -m oracle clear --profile alice
    python -m oracle validate-deck [--deck path/to/cards.json]

Configuration comes from OracleConfig (dotenv file plus ORACLE_* variables);
command-line flags override it for a single run.
"""

import argparse
import json
import logging
import logging.handlers
import sys
from datetime import timedelta
from pathlib import Path
from typing import List, Optional

from oracle.axes.axis_model import AxisVector
from oracle.config import OracleConfig
from oracle.deck.catalog import DeckCatalog
from oracle.deck.validator import validate_catalog
from oracle.engine.daily_energy import DailyEnergyEngine
from oracle.errors import DeckUnavailableError
from oracle.state.recency_backend import JsonFileRecencyBackend
from oracle.state.recency_store import RecencyStore, as_day
from oracle.tokens.semantic_token import SemanticToken

logger = logging.getLogger(__name__)

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logging(level: str = "INFO", log_file: Optional[str] = None) -> None:
    """
    Configure root logging.

    Console output always; optionally a WatchedFileHandler so external log
    rotation is picked up. File write failures degrade silently.
    """
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        try:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.handlers.WatchedFileHandler(log_file, mode='a', encoding='utf-8')
        except OSError as e:
            print(f"Warning: cannot open log file {log_file}: {e}", file=sys.stderr)
        else:
            original_emit = file_handler.emit

            def safe_emit(record):
                try:
                    original_emit(record)
                except (IOError, OSError):
                    pass

            file_handler.emit = safe_emit
            handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
        handlers=handlers,
        force=True,
    )


def _parse_token(spec: str) -> SemanticToken:
    """'name' or 'name:weight'."""
    name, sep, weight = spec.rpartition(":")
    if not sep:
        return SemanticToken(name=spec)
    try:
        value = float(weight)
    except ValueError:
        # colon belongs to the name
        return SemanticToken(name=spec)
    return SemanticToken(name=name, weight=value)


def _parse_axes(spec: str) -> AxisVector:
    values = [float(v) for v in spec.split(",")]
    if len(values) != 4:
        raise argparse.ArgumentTypeError("axes must be four comma-separated numbers: action,tempo,strategy,visibility")
    return AxisVector.from_array(values)


def _load_tokens(args) -> List[SemanticToken]:
    tokens = [_parse_token(spec) for spec in args.token or []]
    if args.tokens_file:
        with open(args.tokens_file, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError(f"{args.tokens_file}: expected a JSON array of token objects")
        tokens.extend(SemanticToken.from_dict(item) for item in data)
    return tokens


def _recency_store(config: OracleConfig) -> RecencyStore:
    return RecencyStore(JsonFileRecencyBackend(config.recency_path), retry_schedule_ms=config.store_retry_ms)


def cmd_draw(args, config: OracleConfig) -> int:
    engine = DailyEnergyEngine.from_config(config)
    commit = config.commit_selections and not args.no_commit

    try:
        tokens = _load_tokens(args)
    except (OSError, ValueError) as e:
        logger.error(f"Invalid tokens: {e}")
        return 2

    reading = engine.derive(
        profile=args.profile,
        tokens=tokens,
        base_axes=args.axes,
        transit_count=args.transits,
        lunar_phase=args.lunar_phase,
        day=args.day,
        seed=args.seed,
        commit=commit,
    )

    if args.json:
        print(json.dumps(reading.to_dict(), indent=2))
    else:
        card = reading.selection.card
        print(f"{reading.day.isoformat()}  {reading.profile}")
        print(f"  Axes:  {reading.axes}")
        print(f"  Vibe:  {reading.vibe}")
        if card is None:
            print(f"  Card:  none ({reading.selection.status.value})")
        else:
            print(f"  Card:  {card.name} ({reading.selection.status.value})")
            print(f"         {card.description}")

    return 0 if reading.selection.ok else 1


def cmd_history(args, config: OracleConfig) -> int:
    store = _recency_store(config)
    recent = store.recent_selections(args.profile, args.day)
    if not recent:
        print(f"No selections in the last 7 days for {args.profile}")
        return 0
    ref = as_day(args.day)
    for name, days_ago in recent:
        label = "today" if days_ago == 0 else f"{days_ago}d ago"
        print(f"  {(ref - timedelta(days=days_ago)).isoformat()}  {label:>8}  {name}")
    return 0


def cmd_clear(args, config: OracleConfig) -> int:
    removed = _recency_store(config).clear(args.profile)
    print(f"Cleared {removed} entries for {args.profile}")
    return 0


def cmd_validate_deck(args, config: OracleConfig) -> int:
    deck_path = Path(args.deck) if args.deck else config.deck_path
    catalog = DeckCatalog(deck_path, validate=False)
    try:
        cards = catalog.load()
    except DeckUnavailableError as e:
        print(f"Deck unavailable: {e}")
        return 1

    problems = validate_catalog(cards)
    print(f"{len(cards)} cards loaded from {deck_path}")
    for problem in problems:
        print(f"  - {problem}")
    if not problems:
        print("  OK")
    return 1 if problems else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oracle", description="Daily energy derivation and card selection")
    parser.add_argument("--log-level", help="Override ORACLE_LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    draw = sub.add_parser("draw", help="Derive today's reading and draw a card")
    draw.add_argument("--profile", required=True)
    draw.add_argument("--day", type=as_day, help="Reference day (YYYY-MM-DD), default today")
    draw.add_argument("--token", action="append", metavar="NAME[:WEIGHT]", help="Add a token (repeatable)")
    draw.add_argument("--tokens-file", help="JSON array of token objects")
    draw.add_argument("--axes", type=_parse_axes, help="Base axes: action,tempo,strategy,visibility")
    draw.add_argument("--transits", type=int, default=0, help="Active transit count")
    draw.add_argument("--lunar-phase", type=float, default=0.5, help="Lunar phase fraction 0-1")
    draw.add_argument("--seed", type=int, help="Override the daily seed")
    draw.add_argument("--no-commit", action="store_true", help="Preview without recording the selection")
    draw.add_argument("--json", action="store_true", help="Print the reading as JSON")
    draw.set_defaults(func=cmd_draw)

    history = sub.add_parser("history", help="Show recent selections for a profile")
    history.add_argument("--profile", required=True)
    history.add_argument("--day", type=as_day, help="Reference day (YYYY-MM-DD), default today")
    history.set_defaults(func=cmd_history)

    clear = sub.add_parser("clear", help="Delete all recorded selections for a profile")
    clear.add_argument("--profile", required=True)
    clear.set_defaults(func=cmd_clear)

    validate = sub.add_parser("validate-deck", help="Check the card catalog for problems")
    validate.add_argument("--deck", help="Catalog path (defaults to ORACLE_DECK_PATH)")
    validate.set_defaults(func=cmd_validate_deck)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = OracleConfig.load_config()
    except ValueError as e:
        setup_logging()
        logger.error(f"Invalid configuration: {e}")
        return 2

    setup_logging(args.log_level or config.log_level, config.log_file)

    try:
        return args.func(args, config)
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130
