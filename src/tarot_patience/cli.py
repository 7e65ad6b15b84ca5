"""
Command-line interface: inspect deals and run batches of simulated games.

Usage examples (after ``pip install -e .``):

    tarot-patience deal --seed 7
    tarot-patience simulate --agent greedy --games 50 --seed 0 --check
"""
from __future__ import annotations

import argparse
from typing import Optional

from .agents import AGENTS
from .board import BoardState
from .engine import new_game
from .moves import legal_moves
from .rules import PERMISSIVE_RULES, STRICT_RULES, RulesConfig
from .simulate import run_batch

FOUNDATION_NAMES = ("♥", "♦", "♣", "♠", "Atouts↑", "Atouts↓")


def _rules_from_args(args: argparse.Namespace) -> RulesConfig:
    return PERMISSIVE_RULES if getattr(args, "permissive", False) else STRICT_RULES


def format_board(state: BoardState) -> str:
    """Plain-text dump of a board, face-down cards shown as ``--``."""
    lines = []
    for ci, col in enumerate(state.columns):
        cards = " ".join(str(c) if c.face_up else "--" for c in col)
        lines.append(f"col{ci:>2}: {cards}")
    for fi, pile in enumerate(state.foundations):
        top = str(pile[-1]) if pile else "."
        lines.append(f"{FOUNDATION_NAMES[fi]:>8}: {top} ({len(pile)})")
    lines.append(f"  Excuse: {'Excuse' if state.excuse_slot is not None else '.'}")
    lines.append(f"   stock: {len(state.stock)}  moves: {state.moves}  merged: {state.trumps_merged}")
    return "\n".join(lines)


def _add_deal_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("deal", help="Print a freshly dealt board.")
    parser.add_argument("--seed", type=int, default=None, help="Seed of the deal.")
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Use the permissive rule variant when listing legal moves.",
    )
    parser.add_argument(
        "--moves",
        action="store_true",
        help="Also list the legal moves from the dealt position.",
    )
    parser.set_defaults(func=_cmd_deal)


def _cmd_deal(args: argparse.Namespace) -> None:
    state = new_game(seed=args.seed)
    print(format_board(state))
    if args.moves:
        for move in legal_moves(state, _rules_from_args(args)):
            print(f"  {move}")


def _add_simulate_parser(subparsers: argparse._SubParsersAction) -> None:
    parser = subparsers.add_parser("simulate", help="Play games with a baseline agent.")
    parser.add_argument(
        "--agent",
        choices=sorted(AGENTS),
        default="greedy",
        help="Which baseline policy plays.",
    )
    parser.add_argument(
        "--games",
        type=int,
        default=20,
        help="Number of games to play.",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=0,
        help="Seed of the first deal; game i uses seed + i.",
    )
    parser.add_argument(
        "--max-steps",
        type=int,
        default=1_000,
        help="Step limit per game.",
    )
    parser.add_argument(
        "--permissive",
        action="store_true",
        help="Use the permissive rule variant.",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Verify board invariants after every step.",
    )
    parser.set_defaults(func=_cmd_simulate)


def _cmd_simulate(args: argparse.Namespace) -> None:
    summary = run_batch(
        args.agent,
        args.games,
        seed=args.seed,
        rules=_rules_from_args(args),
        max_steps=args.max_steps,
        check=args.check,
    )
    for game in summary.games:
        print(
            f"[seed {game.seed}] won={game.won} moves={game.moves} "
            f"steps={game.steps} placed={game.placed}/78",
            flush=True,
        )
    print(
        f"{args.agent}: wins={summary.wins}/{len(summary.games)} "
        f"win_rate={summary.win_rate:.2%} "
        f"mean_moves={summary.mean_moves:.1f} "
        f"mean_placed={summary.mean_placed:.1f}"
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="tarot-patience", description="Tarot patience engine CLI.")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_deal_parser(subparsers)
    _add_simulate_parser(subparsers)
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    if hasattr(args, "func"):
        args.func(args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
