#!/usr/bin/env python
"""Simulated Werewolf party games in the terminal.

Every seat is a stub player; channel messages are printed with rich.

Usage:
    werewolf-party                         # One 8-player game
    werewolf-party --players 12 --seed 42  # Reproducible 12-player game
    werewolf-party --show-private          # Also print private messages
    werewolf-party --games 50              # Many games, then a summary
    werewolf-party --roles                 # Print the role catalog
"""

import argparse
import asyncio
import logging
import random
from collections import Counter
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from werewolf_party.ai.stub_ai import StubPlayer, create_stub_player
from werewolf_party.config import GameSettings, load_settings
from werewolf_party.engine import PhaseController
from werewolf_party.engine.session import Session
from werewolf_party.events import Phase, Winner
from werewolf_party.models import describe_roles
from werewolf_party.stats import MemoryStatsStore
from werewolf_party.transport import Interaction, Prompt, dispatch_choice

logger = logging.getLogger(__name__)

NAMES = [
    "Alice", "Bob", "Carol", "Dave", "Erin", "Frank", "Grace", "Heidi",
    "Ivan", "Judy", "Mallory", "Niaj", "Olivia", "Peggy", "Rupert", "Sybil",
]

CHANNEL = "village-square"


class ConsoleTransport:
    """Prints channel messages and lets stub players answer prompts."""

    def __init__(
        self,
        console: Console,
        show_private: bool = False,
        quiet: bool = False,
        think_time: float = 0.05,
    ):
        self.console = console
        self.show_private = show_private
        self.quiet = quiet
        self.think_time = think_time
        self.controller: Optional[PhaseController] = None
        self.bots: dict[str, StubPlayer] = {}
        self.names: dict[str, str] = {}
        self._tasks: set[asyncio.Task] = set()

    async def broadcast(self, channel_id: str, text: str, prompt: Optional[Prompt] = None) -> None:
        if not self.quiet:
            self.console.print(f"[bold cyan]#{channel_id}[/bold cyan] {escape(text)}")
        if prompt is not None and prompt.interaction == Interaction.VOTE:
            for participant_id in self.bots:
                self._answer(participant_id, prompt)

    async def send_private(self, participant_id: str, text: str, prompt: Optional[Prompt] = None) -> None:
        if self.show_private and not self.quiet:
            name = self.names.get(participant_id, participant_id)
            self.console.print(f"[dim]  (to {escape(name)}) {escape(text)}[/dim]")
        if prompt is not None:
            self._answer(participant_id, prompt)

    def _answer(self, participant_id: str, prompt: Prompt) -> None:
        if participant_id not in self.bots:
            return
        task = asyncio.create_task(self._respond(participant_id, prompt))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _respond(self, participant_id: str, prompt: Prompt) -> None:
        bot = self.bots[participant_id]
        await asyncio.sleep(bot.think_time(self.think_time))
        value = bot.choose(prompt, participant_id)
        if value is None or self.controller is None:
            return
        result = await dispatch_choice(self.controller, participant_id, prompt, value)
        if not result.accepted:
            logger.debug("%s: %s", self.names.get(participant_id, participant_id), result.message)

    async def drain(self) -> None:
        """Cancel answers still in flight."""
        for task in list(self._tasks):
            task.cancel()
        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)


async def run_simulation(
    player_count: int,
    seed: int,
    settings: GameSettings,
    console: Console,
    stats: MemoryStatsStore,
    show_private: bool = False,
    quiet: bool = False,
    skip_chance: float = 0.1,
) -> Session:
    """Play one game with stub players until it ends.

    Args:
        player_count: Number of seats.
        seed: Seed for the session and the stub players.
        settings: Game settings (usually time-scaled).
        console: Rich console for output.
        stats: Store receiving the end-of-game records.
        show_private: Also print private messages.
        quiet: Print nothing while the game runs.
        skip_chance: Probability that a stub ignores a prompt.

    Returns:
        The finished session.
    """
    transport = ConsoleTransport(console, show_private=show_private, quiet=quiet,
                                 think_time=min(settings.night_seconds, settings.day_seconds) / 4)
    controller = PhaseController(transport, settings=settings, stats_sink=stats)
    transport.controller = controller

    participants = []
    for i in range(player_count):
        pid = f"p{i + 1}"
        name = NAMES[i] if i < len(NAMES) else f"Player {i + 1}"
        participants.append((pid, name))
        transport.names[pid] = name
        transport.bots[pid] = create_stub_player(seed=seed + i + 1, skip_chance=skip_chance)

    session = await controller.start_session(CHANNEL, participants, host_id="p1", seed=seed)
    while session.phase != Phase.ENDED:
        await asyncio.sleep(settings.night_seconds / 20)
    await transport.drain()
    return session


def print_leaderboard(console: Console, stats: MemoryStatsStore, limit: int = 10) -> None:
    table = Table(title="Leaderboard")
    table.add_column("Player")
    table.add_column("Games", justify="right")
    table.add_column("Wins", justify="right")
    table.add_column("Kills", justify="right")
    for record in stats.leaderboard(limit):
        table.add_row(record.name, str(record.games_played), str(record.wins), str(record.kills))
    console.print(table)


async def run_many(
    games: int,
    player_count: int,
    seed_base: int,
    settings: GameSettings,
    console: Console,
) -> None:
    """Run games back to back and report the winner distribution."""
    stats = MemoryStatsStore()
    winners: Counter = Counter()
    for game_num in range(games):
        session = await run_simulation(
            player_count, seed_base + game_num * 100, settings, console, stats, quiet=True,
        )
        winners[session.winner.value if session.winner else "none"] += 1

    console.print(f"\n[bold]Games run: {games}[/bold] (seed base {seed_base})")
    for winner, count in winners.most_common():
        console.print(f"  {winner}: {count} ({count / games * 100:.1f}%)")
    print_leaderboard(console, stats)


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Werewolf party - simulated games with stub players",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--players", type=int, default=8, help="Number of players (default: 8)")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for reproducible games")
    parser.add_argument("--config", type=str, default=None, help="YAML file with game settings")
    parser.add_argument(
        "--time-scale",
        type=float,
        default=0.005,
        help="Multiplier applied to every deadline (default: 0.005)",
    )
    parser.add_argument("--games", type=int, default=None, help="Run N games and print a summary")
    parser.add_argument("--show-private", action="store_true", help="Print private messages too")
    parser.add_argument("--log-file", type=str, default=None, help="Save the event log as YAML")
    parser.add_argument("--roles", action="store_true", help="Print the role catalog and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    console = Console()
    if args.roles:
        console.print(escape(describe_roles()))
        return 0

    settings = load_settings(args.config).scaled(args.time_scale)
    if args.players < settings.min_players:
        parser.error(f"--players must be at least {settings.min_players}")
    if args.games is not None and args.games < 1:
        parser.error("--games must be a positive integer")

    if args.seed is None:
        args.seed = random.randint(1, 1000000)

    if args.games is not None:
        asyncio.run(run_many(args.games, args.players, args.seed, settings, console))
        return 0

    console.print(f"\n[bold]Simulating a {args.players}-player game (seed {args.seed})...[/bold]\n")
    stats = MemoryStatsStore()
    session = asyncio.run(run_simulation(
        args.players, args.seed, settings, console, stats, show_private=args.show_private,
    ))

    winner: Optional[Winner] = session.winner
    console.print(Panel(
        f"[bold]Game Over[/bold]\n\nWinner: {winner.value if winner else 'none'}",
        title="Result",
    ))
    print_leaderboard(console, stats)

    if args.log_file:
        session.events.save_to_file(args.log_file)
        console.print(f"Event log saved to {args.log_file}")
    return 0


if __name__ == "__main__":
    exit(main())
