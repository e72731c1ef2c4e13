"""
BlastGrid CLI - Command-line interface for the engine.

Usage:
    blastgrid generate [--seed N] [--size N]     Print a generated board
    blastgrid simulate [--seed N] [--p1 BOT]     Play a bot-vs-bot match
    blastgrid snapshot [--seed N]                Dump the initial state as JSON
"""

import argparse
import logging
import sys

CELL_GLYPHS = {
    "Floor": ".",
    "SolidWall": "#",
    "SoftWall": "+",
    "Void": " ",
}

ITEM_GLYPHS = {
    "FireUp": "F",
    "Boots": "B",
    "Kick": "K",
}

POLICIES = ("greedy", "random", "idle")


def format_board(state) -> str:
    """Render a state as text, one row per line."""
    grid = [[CELL_GLYPHS[cell.value] for cell in row] for row in state.board]
    for item in state.items:
        grid[item.y][item.x] = ITEM_GLYPHS[item.item_type.value]
    for bomb in state.bombs:
        grid[bomb.y][bomb.x] = "o"
    for player in state.players.values():
        if player.alive:
            grid[player.y][player.x] = player.player_id.value[-1]
    return "\n".join("".join(row) for row in grid)


def make_policy(name: str, seed: int):
    from .bots import GreedyBot, IdlePolicy, RandomPolicy

    if name == "greedy":
        return GreedyBot()
    if name == "random":
        return RandomPolicy(seed=seed)
    if name == "idle":
        return IdlePolicy()
    raise ValueError(f"Unknown policy: {name}")


def main(argv=None):
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="BlastGrid - Simultaneous-turn bomb grid engine",
        prog="blastgrid",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Log engine decisions")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    generate_parser = subparsers.add_parser("generate", help="Print a generated board")
    generate_parser.add_argument("--seed", type=int, default=None, help="Board seed")
    generate_parser.add_argument("--size", type=int, default=7, help="Board size (odd)")

    simulate_parser = subparsers.add_parser("simulate", help="Play a bot-vs-bot match")
    simulate_parser.add_argument("--seed", type=int, default=None, help="Match seed")
    simulate_parser.add_argument("--p1", choices=POLICIES, default="greedy", help="P1 policy")
    simulate_parser.add_argument("--p2", choices=POLICIES, default="greedy", help="P2 policy")
    simulate_parser.add_argument("--max-turns", type=int, default=60, help="Turn limit")

    snapshot_parser = subparsers.add_parser("snapshot", help="Dump the initial state as JSON")
    snapshot_parser.add_argument("--seed", type=int, default=None, help="Match seed")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.command == "generate":
        cmd_generate(args)
    elif args.command == "simulate":
        cmd_simulate(args)
    elif args.command == "snapshot":
        cmd_snapshot(args)
    else:
        parser.print_help()
        sys.exit(1)


def cmd_generate(args):
    """Print a generated board."""
    from .engine_core.board import create_initial_state

    try:
        state = create_initial_state(seed=args.seed, size=args.size)
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)
    print(format_board(state))


def cmd_simulate(args):
    """Play a bot-vs-bot match and print the outcome."""
    from .engine_core.board import create_initial_state
    from .session import GameLoop

    state = create_initial_state(seed=args.seed)
    p1_policy = make_policy(args.p1, seed=state.rng_seed)
    p2_policy = make_policy(args.p2, seed=state.rng_seed + 1)
    result = GameLoop(p1_policy, p2_policy).run(state, max_turns=args.max_turns)

    print(f"{p1_policy.get_name()} vs {p2_policy.get_name()}\n")
    print(format_board(result.final_state))
    print(f"\nTurns played: {result.turns_played}")
    print(f"Result: {result.final_state.status.value}")


def cmd_snapshot(args):
    """Dump the initial state as JSON."""
    from .engine_core.board import create_initial_state
    from .schemas import GameStateSnapshot

    state = create_initial_state(seed=args.seed)
    print(GameStateSnapshot.from_state(state).model_dump_json(indent=2))


if __name__ == "__main__":
    main()
