"""
Shardfall CLI - Command-line interface for the engine.

Usage:
    shardfall simulate [--seed N] [--decks A B] [--bots A B]   Bot vs bot match
    shardfall validate-deck <deck_file>                        Check a deck list
    shardfall catalog                                          List card archetypes
    shardfall serve [--host H] [--port P]                      Run the REST API
"""

import argparse
import logging
import sys


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Shardfall - Deterministic card-game rules engine",
        prog="shardfall",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # Simulate command
    simulate_parser = subparsers.add_parser("simulate", help="Play a bot vs bot match")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Match RNG seed")
    simulate_parser.add_argument(
        "--decks", nargs=2, default=["crimson-rush", "tidal-grove"], metavar=("DECK1", "DECK2"),
        help="Starter deck names or deck list files",
    )
    simulate_parser.add_argument(
        "--bots", nargs=2, default=["simple", "balanced"], metavar=("BOT1", "BOT2"),
        help="simple, random, or a personality name",
    )
    simulate_parser.add_argument("--quiet", "-q", action="store_true", help="Only print the result")

    # Validate command
    validate_parser = subparsers.add_parser("validate-deck", help="Validate a deck list")
    validate_parser.add_argument("deck_file", help="Path to deck list file")

    # Catalog command
    subparsers.add_parser("catalog", help="List card archetypes")

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Run the REST API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Bind address")
    serve_parser.add_argument("--port", type=int, default=8000, help="Bind port")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    if args.command == "simulate":
        return cmd_simulate(args)
    elif args.command == "validate-deck":
        return cmd_validate_deck(args)
    elif args.command == "catalog":
        return cmd_catalog(args)
    elif args.command == "serve":
        return cmd_serve(args)
    else:
        parser.print_help()
        return 1


def _read_deck(name_or_path: str) -> str:
    """A starter deck name as is, otherwise the contents of the deck list file."""
    from .catalog import STARTER_DECKS

    if name_or_path.lower() in STARTER_DECKS:
        return name_or_path.lower()
    with open(name_or_path, "r", encoding="utf-8") as f:
        return f.read()


def cmd_simulate(args):
    """Play a full match between two bots and print the log."""
    from .api import MatchService, CreateMatchRequest, SeatRequest, ErrorResponse

    try:
        decks = [_read_deck(d) for d in args.decks]
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}")
        return 1

    service = MatchService()
    request = CreateMatchRequest(
        seats=[
            SeatRequest(name=f"{bot} ({i + 1})", deck=deck, bot=bot)
            for i, (deck, bot) in enumerate(zip(decks, args.bots))
        ],
        seed=args.seed,
    )
    result = service.create_match(request)
    if isinstance(result, ErrorResponse):
        print(f"Error: {result.error}")
        for detail in (result.details or {}).get("errors", []):
            print(f"  - {detail}")
        return 1

    session = service.session_manager.get_session(result.match_id)
    env = session.env
    if not args.quiet:
        for entry in env.logs:
            print(entry.describe())

    condition = env.condition
    print(f"\nTurns: {env.state.turn}")
    for player in env.state.players:
        print(f"  {player.name}: {player.life} life")
    if condition.winner is None:
        print("Result: draw")
    else:
        print(f"Result: {env.state.players.get(condition.winner).name} wins ({condition.reason.value})")
    return 0


def cmd_validate_deck(args):
    """Validate a deck list against the standard regulation."""
    from .catalog import default_catalog
    from .engine_core.config import Regulation
    from .engine_core.errors import DeckValidationError
    from .rules import DeckList

    try:
        with open(args.deck_file, "r", encoding="utf-8") as f:
            text = f.read()
    except FileNotFoundError:
        print(f"Error: File not found: {args.deck_file}")
        return 1

    catalog = default_catalog()
    try:
        deck = DeckList.parse(text, catalog)
    except DeckValidationError as e:
        print("Deck could not be parsed:")
        for error in e.errors:
            print(f"  - {error}")
        return 1

    result = Regulation.standard().verify(deck, catalog)
    print(f"Cards: {len(deck)}")
    if result.warnings:
        print("\nWarnings:")
        for w in result.warnings:
            print(f"  - {w}")
    if result.errors:
        print("\nErrors:")
        for e in result.errors:
            print(f"  - {e}")
        return 1
    print("Deck is valid")
    return 0


def cmd_catalog(args):
    """List every card archetype."""
    from .catalog import default_catalog

    catalog = default_catalog()
    for archetype in catalog:
        attr = archetype.attribute
        power = "-" if attr.power is None else attr.power
        print(f"{archetype.id:<6} {archetype.name:<22} {attr.color.display_name:<10} cost {attr.cost}  power {power}")
        text = catalog.describe(archetype.id)
        if text:
            print(f"       {text}")
    return 0


def cmd_serve(args):
    """Run the REST API."""
    try:
        import uvicorn
    except ImportError:
        print("Error: uvicorn not installed. Install with: pip install 'shardfall[api]'")
        return 1
    from .api import create_app

    uvicorn.run(create_app(), host=args.host, port=args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
