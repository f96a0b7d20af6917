"""PhaseController - drives every channel's session through lobby, night, day and end."""

import asyncio
import logging
import random
from functools import partial
from typing import Awaitable, Callable, Iterable, Mapping, Optional, Sequence, Union

from werewolf_party.config import GameSettings
from werewolf_party.engine.action_collector import ActionCollector
from werewolf_party.engine.actions import (
    ABILITY_ACTIONS,
    ActionKind,
    Potion,
    RejectReason,
    SubmissionResult,
)
from werewolf_party.engine.chemistry import open_duel, resolve_duel
from werewolf_party.engine.day_resolver import DayResolver
from werewolf_party.engine.hunter import drain_revenge_queue, resolve_revenge
from werewolf_party.engine.night_resolver import NightResolver
from werewolf_party.engine.session import Session
from werewolf_party.engine.victory import evaluate_winner
from werewolf_party.errors import DeliveryFailed, LobbyError
from werewolf_party.events import (
    EventFormatter,
    GameEvent,
    GameOver,
    Phase,
    PhaseStarted,
    RolesAssigned,
    SessionStopped,
    Winner,
)
from werewolf_party.models import Player, Role, assign_roles, parse_role, role_info
from werewolf_party.stats import StatsSink, session_records
from werewolf_party.transport import ChoiceOption, Interaction, Prompt, Transport

logger = logging.getLogger(__name__)

NIGHT_TIMER = "night"
DAY_TIMER = "day"
CHEMISTRY_TIMER = "chemistry"
REVENGE_TIMER = "revenge:{}"

_NIGHT_PROMPTS = {
    ActionKind.WOLF_VOTE: "Choose who the pack attacks tonight.",
    ActionKind.FREEZE: "SnowWolf: choose one player to freeze. Their night action will fail.",
    ActionKind.INSPECT: "Seer: choose one player to inspect (once per night).",
    ActionKind.PROTECT: "GuardianAngel: choose one player to protect. Guarding a wolf may kill you.",
    ActionKind.VISIT: "Chemist: choose one player to visit. They pick one of two potions; you drink the other.",
}

Participants = Union[Mapping[str, str], Sequence[tuple[str, str]]]


class PhaseController:
    """Owns every active session, keyed by channel id.

    Game Flow:
        1. Lobby: participants join, a privileged override may force roles
        2. Night N: private actions collected until all are in or the deadline
        3. Day N: votes collected until everyone voted or the deadline
        4. Repeat until a win condition ends the session

    All handlers run on one event loop. Every resolution is guarded so a
    completion event and a deadline racing each other resolve only once.
    """

    def __init__(
        self,
        transport: Transport,
        settings: Optional[GameSettings] = None,
        stats_sink: Optional[StatsSink] = None,
        seed: Optional[int] = None,
    ):
        """Initialize the controller.

        Args:
            transport: Chat platform adapter used for every message.
            settings: Deadlines and probabilities; defaults when None.
            stats_sink: Receives per-participant records when a game ends.
            seed: Optional base seed. Each session derives its own random
                  source from it and the channel id, so games are replayable.
        """
        self.transport = transport
        self.settings = settings or GameSettings()
        self.stats_sink = stats_sink
        self._seed = seed
        self._sessions: dict[str, Session] = {}
        self._player_channels: dict[str, str] = {}
        self._night_resolver = NightResolver(self.settings)
        self._day_resolver = DayResolver(self.settings)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get_session(self, channel_id: str) -> Optional[Session]:
        return self._sessions.get(channel_id)

    def session_for(self, participant_id: str) -> Optional[Session]:
        """Session the participant currently belongs to."""
        channel_id = self._player_channels.get(participant_id)
        return self._sessions.get(channel_id) if channel_id is not None else None

    @property
    def sessions(self) -> list[Session]:
        return list(self._sessions.values())

    # ------------------------------------------------------------------
    # Lobby
    # ------------------------------------------------------------------

    def open_lobby(
        self,
        channel_id: str,
        host_id: Optional[str] = None,
        seed: Optional[Union[int, str]] = None,
    ) -> Session:
        """Create a session accepting players.

        Raises:
            LobbyError: If the channel already has a live session.
        """
        existing = self._sessions.get(channel_id)
        if existing is not None and existing.phase != Phase.ENDED:
            raise LobbyError("A game is already running in this channel; stop it first")

        if seed is None and self._seed is not None:
            seed = f"{self._seed}:{channel_id}"
        session = Session(channel_id=channel_id, host_id=host_id, rng=random.Random(seed))
        session.events.channel_id = channel_id
        self._sessions[channel_id] = session
        logger.info("Lobby opened in channel %s", channel_id)
        return session

    def join(self, channel_id: str, participant_id: str, name: str) -> Player:
        """Add a participant to a lobby.

        Raises:
            LobbyError: No lobby open, already joined, or playing elsewhere.
        """
        session = self._lobby(channel_id)
        if participant_id in session.players:
            raise LobbyError(f"{name} already joined")
        other = self._player_channels.get(participant_id)
        if other is not None and other != channel_id:
            raise LobbyError(f"{name} is already playing in another channel")

        player = Player(participant_id=participant_id, name=name)
        session.players[participant_id] = player
        session.events.names[participant_id] = name
        self._player_channels[participant_id] = channel_id
        return player

    def leave(self, channel_id: str, participant_id: str) -> None:
        """Remove a participant before the game starts."""
        session = self._lobby(channel_id)
        if session.players.pop(participant_id, None) is None:
            raise LobbyError("Not in this lobby")
        session.events.names.pop(participant_id, None)
        self._player_channels.pop(participant_id, None)

    def force_role(self, participant_id: str, role: Union[Role, str]) -> Role:
        """Privileged override: pin a participant's role before the game starts.

        The override bypasses pool balance entirely; it may duplicate
        specialists or leave the table without wolves.

        Raises:
            LobbyError: Participant not in a lobby, or unknown role name.
        """
        session = self.session_for(participant_id)
        if session is None:
            raise LobbyError("You are not in any lobby")
        if session.phase != Phase.LOBBY:
            raise LobbyError("Roles can only be forced before the game starts")
        if not isinstance(role, Role):
            try:
                role = parse_role(role)
            except ValueError as exc:
                raise LobbyError(str(exc)) from exc
        session.players[participant_id].forced_role = role
        logger.info("Role override set in channel %s", session.channel_id)
        return role

    def roster(self, channel_id: str) -> list[dict]:
        """Public player list (names and alive status, no roles)."""
        session = self._sessions.get(channel_id)
        if session is None:
            return []
        return [player.to_dict() for player in session.players.values()]

    def role_listing(self, channel_id: str) -> list[tuple[str, Role, bool]]:
        """Admin view: (name, role, alive) for every participant.

        Raises:
            LobbyError: No session, or roles not assigned yet.
        """
        session = self._sessions.get(channel_id)
        if session is None:
            raise LobbyError("No game in this channel")
        if session.phase == Phase.LOBBY:
            raise LobbyError("Roles have not been assigned yet")
        return [(p.name, p.role, p.is_alive) for p in session.players.values()]

    async def begin(self, channel_id: str) -> Session:
        """Assign roles, tell everyone their role and start night 1.

        Raises:
            LobbyError: No lobby, or fewer than the minimum players.
        """
        session = self._lobby(channel_id)
        if len(session.players) < self.settings.min_players:
            raise LobbyError(f"At least {self.settings.min_players} players are needed to start")

        players = list(session.players.values())
        assign_roles(players, session.rng, gunner_bullets=self.settings.gunner_bullets)
        forced = [p.participant_id for p in players if p.forced_role is not None]
        session.record(RolesAssigned(
            roles={p.participant_id: p.role for p in players},
            forced=forced,
        ))
        if forced:
            logger.warning("Channel %s starts with %d forced role(s)", channel_id, len(forced))
        logger.info("Game started in channel %s with %d players", channel_id, len(players))

        for player in players:
            info = role_info(player.role)
            await self._send_private(
                session, player.participant_id,
                f"Your role is {player.role.value}. {info.description}",
            )

        await self._start_night(session)
        return session

    async def start_session(
        self,
        channel_id: str,
        participants: Participants,
        host_id: Optional[str] = None,
        seed: Optional[Union[int, str]] = None,
    ) -> Session:
        """Open a lobby, join every participant and begin.

        Args:
            channel_id: Channel to play in.
            participants: (participant_id, name) pairs or an id -> name mapping,
                          in join order.
            host_id: Participant allowed to stop the game.
            seed: Optional seed for this session's random source.
        """
        items: Iterable[tuple[str, str]] = (
            participants.items() if isinstance(participants, Mapping) else participants
        )
        session = self.open_lobby(channel_id, host_id=host_id, seed=seed)
        try:
            for participant_id, name in items:
                self.join(channel_id, participant_id, name)
            await self.begin(channel_id)
        except LobbyError:
            self._release(session)
            raise
        return session

    async def stop_session(
        self,
        channel_id: str,
        requested_by: Optional[str] = None,
    ) -> SubmissionResult:
        """Abort a session without declaring a winner."""
        session = self._sessions.get(channel_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "No game is running")
        if requested_by is not None and session.host_id is not None and requested_by != session.host_id:
            return SubmissionResult.reject(RejectReason.NOT_HOST, "Only the host can stop the game")

        self._cancel_all(session)
        session.phase = Phase.ENDED
        event = session.record(SessionStopped(stopped_by=requested_by))
        self._release(session)
        logger.info("Game stopped in channel %s", channel_id)
        await self._announce(session, [event])
        return SubmissionResult.ok("Game stopped")

    # ------------------------------------------------------------------
    # Submissions
    # ------------------------------------------------------------------

    async def submit_night_action(
        self,
        actor_id: str,
        kind: Union[ActionKind, str],
        target_id: str,
    ) -> SubmissionResult:
        """Record a night action (wolf vote, freeze, inspect, protect, visit)."""
        session = self.session_for(actor_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "You are not in a game")
        try:
            kind = ActionKind(kind)
        except ValueError:
            return SubmissionResult.reject(RejectReason.INVALID_CHOICE, f"Unknown action {kind!r}")

        collector = ActionCollector(session)
        result = collector.submit_night_action(actor_id, kind, target_id)
        if not result.accepted:
            return result

        if kind == ActionKind.VISIT:
            await self._open_chemistry(session, actor_id, target_id)
        await self._check_progress(session)
        return result

    async def submit_vote(self, voter_id: str, target_id: str) -> SubmissionResult:
        """Record a day vote; resolves the day once every living player voted."""
        session = self.session_for(voter_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "You are not in a game")

        collector = ActionCollector(session)
        result = collector.submit_vote(voter_id, target_id)
        if not result.accepted:
            return result

        voted, alive = collector.turnout()
        missing = [p.name for p in session.alive_players() if p.participant_id not in session.votes]
        text = f"Vote progress: {voted}/{alive}"
        text += f"\nStill to vote: {', '.join(missing)}" if missing else "\nEveryone has voted."
        await self.transport.broadcast(session.channel_id, text)

        await self._check_progress(session)
        return result

    async def submit_gunner_shot(self, actor_id: str, target_id: str) -> SubmissionResult:
        """Gunner spends a bullet to kill a player during the day."""
        session = self.session_for(actor_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "You are not in a game")

        result = ActionCollector(session).check_gunner_shot(actor_id, target_id)
        if not result.accepted:
            return result

        outcome = self._day_resolver.shoot(session, actor_id, target_id)
        if not await self._settle(session, outcome.events, outcome.winner):
            await self._check_progress(session)
        return SubmissionResult.ok(f"You shot {session.name_of(target_id)}")

    async def submit_hunter_revenge_choice(self, actor_id: str, target_id: str) -> SubmissionResult:
        """Dead Hunter picks the target of the last shot."""
        session = self.session_for(actor_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "You are not in a game")

        result = ActionCollector(session).check_revenge_choice(actor_id, target_id)
        if not result.accepted:
            return result

        self._cancel_timer(session, REVENGE_TIMER.format(actor_id))
        await self._fire_revenge(session, actor_id, target_id)
        return SubmissionResult.ok(f"You shot {session.name_of(target_id)}")

    async def submit_chemist_choice(self, actor_id: str, choice: str) -> SubmissionResult:
        """Chemist's guest picks potion A or B."""
        session = self.session_for(actor_id)
        if session is None:
            return SubmissionResult.reject(RejectReason.NO_SESSION, "You are not in a game")

        result, potion = ActionCollector(session).parse_potion(actor_id, choice)
        if not result.accepted:
            return result

        self._cancel_timer(session, CHEMISTRY_TIMER)
        await self._finish_chemistry(session, potion, forced=False)
        return result

    # ------------------------------------------------------------------
    # Night
    # ------------------------------------------------------------------

    async def _start_night(self, session: Session) -> None:
        if session.phase == Phase.ENDED:
            return
        session.phase = Phase.NIGHT
        session.night += 1
        session.phase_resolved = False
        session.night_actions = {}
        session.votes = {}
        session.frozen = set()
        session.pending_chemistry = None
        session.frenzy_tonight = session.frenzy_next_night
        session.frenzy_next_night = False

        event = session.record(PhaseStarted(alive=session.alive_ids()))
        logger.info("Night %d starts in channel %s", session.night, session.channel_id)
        self._schedule(session, NIGHT_TIMER, self.settings.night_seconds, partial(self._resolve_night, session))
        await self._announce(session, [event])

        wolves = session.alive_wolves()
        if wolves and all(w.hangover for w in wolves):
            await self.transport.broadcast(
                session.channel_id, "Every werewolf is nursing a hangover. No attack tonight."
            )
        await self._send_night_prompts(session)
        await self._check_progress(session)

    async def _send_night_prompts(self, session: Session) -> None:
        collector = ActionCollector(session)
        for player in session.alive_players():
            pid = player.participant_id
            if session.phase != Phase.NIGHT:
                return
            if player.is_wolf_team:
                if player.hangover:
                    await self._send_private(session, pid, "You are hungover and skip tonight's attack.")
                else:
                    await self._send_night_prompt(session, collector, pid, ActionKind.WOLF_VOTE)
            ability = role_info(player.role).ability
            if ability is not None:
                await self._send_night_prompt(session, collector, pid, ABILITY_ACTIONS[ability])

    async def _send_night_prompt(
        self,
        session: Session,
        collector: ActionCollector,
        participant_id: str,
        kind: ActionKind,
    ) -> None:
        options = collector.night_options(participant_id, kind)
        if not options:
            return
        prompt = Prompt(
            interaction=Interaction.NIGHT_ACTION,
            kind=kind,
            options=[ChoiceOption(label=p.name, value=p.participant_id) for p in options],
        )
        await self._send_private(session, participant_id, _NIGHT_PROMPTS[kind], prompt)

    async def _resolve_night(self, session: Session) -> None:
        if session.phase != Phase.NIGHT or session.phase_resolved:
            return
        session.phase_resolved = True
        self._cancel_timer(session, NIGHT_TIMER)
        self._cancel_timer(session, CHEMISTRY_TIMER)

        outcome = self._night_resolver.resolve(session)
        if await self._settle(session, outcome.events, outcome.winner):
            return
        await self._start_day(session)

    # ------------------------------------------------------------------
    # Day
    # ------------------------------------------------------------------

    async def _start_day(self, session: Session) -> None:
        if session.phase == Phase.ENDED:
            return
        session.phase = Phase.DAY
        session.phase_resolved = False
        session.votes = {}

        event = session.record(PhaseStarted(alive=session.alive_ids()))
        logger.info("Day %d starts in channel %s", session.night, session.channel_id)
        self._schedule(session, DAY_TIMER, self.settings.day_seconds, partial(self._resolve_day, session))

        formatter = EventFormatter(session.events.names)
        alive = session.alive_players()
        text = f"{formatter.format(event)}\nVote progress: 0/{len(alive)}"
        prompt = Prompt(
            interaction=Interaction.VOTE,
            options=[ChoiceOption(label=p.name, value=p.participant_id) for p in alive],
        )
        await self.transport.broadcast(session.channel_id, text, prompt)

        for gunner in session.living_by_role(Role.GUNNER):
            if gunner.bullets <= 0:
                continue
            targets = [p for p in session.alive_players() if p.participant_id != gunner.participant_id]
            prompt = Prompt(
                interaction=Interaction.GUNNER,
                options=[ChoiceOption(label=p.name, value=p.participant_id) for p in targets],
            )
            await self._send_private(
                session, gunner.participant_id,
                f"You may shoot someone today. Bullets left: {gunner.bullets}",
                prompt,
            )

    async def _resolve_day(self, session: Session) -> None:
        if session.phase != Phase.DAY or session.phase_resolved:
            return
        session.phase_resolved = True
        self._cancel_timer(session, DAY_TIMER)

        outcome = self._day_resolver.resolve(session)
        if await self._settle(session, outcome.events, outcome.winner):
            return
        await self._start_night(session)

    # ------------------------------------------------------------------
    # Sub-protocols
    # ------------------------------------------------------------------

    async def _open_chemistry(self, session: Session, chemist_id: str, target_id: str) -> None:
        open_duel(session, chemist_id, target_id)
        self._schedule(
            session, CHEMISTRY_TIMER, self.settings.chemist_seconds,
            partial(self._finish_chemistry, session, None, True),
        )
        prompt = Prompt(
            interaction=Interaction.CHEMISTRY,
            options=[ChoiceOption(label="Potion A", value="A"), ChoiceOption(label="Potion B", value="B")],
        )
        delivered = await self._send_private(
            session, target_id,
            "The Chemist pays you a visit. Pick one potion to drink; the Chemist drinks the other.",
            prompt,
        )
        if not delivered:
            await self.transport.broadcast(
                session.channel_id, "The Chemist's guest will have a potion picked for them at random."
            )
        await self._send_private(
            session, chemist_id,
            f"You visit {session.name_of(target_id)}. Waiting for them to choose...",
        )

    async def _finish_chemistry(self, session: Session, potion: Optional[Potion], forced: bool) -> None:
        if session.phase == Phase.ENDED:
            return
        start = len(session.events)
        resolve_duel(session, potion, forced=forced)
        events = session.events.since(start)
        if not events:
            return
        if not await self._settle(session, events, evaluate_winner(session.players.values())):
            await self._check_progress(session)

    async def _open_revenges(self, session: Session) -> None:
        start = len(session.events)
        opened = drain_revenge_queue(session)
        await self._announce(session, session.events.since(start))
        for pending in opened:
            self._schedule(
                session, REVENGE_TIMER.format(pending.hunter_id), self.settings.hunter_seconds,
                partial(self._fire_revenge, session, pending.hunter_id, None),
            )
            prompt = Prompt(
                interaction=Interaction.REVENGE,
                options=[ChoiceOption(label=session.name_of(pid), value=pid) for pid in pending.options],
            )
            await self._send_private(
                session, pending.hunter_id,
                "You are dying. Choose one player to take down with you.",
                prompt,
            )

    async def _fire_revenge(self, session: Session, hunter_id: str, target_id: Optional[str]) -> None:
        if session.phase == Phase.ENDED:
            return
        start = len(session.events)
        if resolve_revenge(session, hunter_id, target_id) is None:
            return
        events = session.events.since(start)
        if not await self._settle(session, events, evaluate_winner(session.players.values())):
            await self._check_progress(session)

    # ------------------------------------------------------------------
    # Shared plumbing
    # ------------------------------------------------------------------

    async def _settle(
        self,
        session: Session,
        events: list[GameEvent],
        winner: Optional[Winner],
    ) -> bool:
        """Announce events, end the game on a winner, else open Hunter prompts.

        Returns:
            True if the session is over.
        """
        await self._announce(session, events)
        if session.phase == Phase.ENDED:
            return True
        if winner is not None:
            await self._end_session(session, winner)
            return True
        await self._open_revenges(session)
        return session.phase == Phase.ENDED

    async def _check_progress(self, session: Session) -> None:
        """Resolve the current phase early once every expected action is in."""
        if session.phase_resolved:
            return
        collector = ActionCollector(session)
        if session.phase == Phase.NIGHT and collector.night_complete():
            await self._resolve_night(session)
        elif session.phase == Phase.DAY and collector.day_complete():
            await self._resolve_day(session)

    async def _end_session(self, session: Session, winner: Winner) -> None:
        if session.phase == Phase.ENDED:
            return
        session.phase = Phase.ENDED
        session.winner = winner
        self._cancel_all(session)

        event = session.record(GameOver(
            winner=winner,
            roles={pid: p.role for pid, p in session.players.items()},
            alive=session.alive_ids(),
        ))
        logger.info("Game over in channel %s: %s win", session.channel_id, winner.value)

        if self.stats_sink is not None:
            try:
                self.stats_sink.record_game(session_records(session, winner))
            except Exception:
                logger.exception("Failed to record statistics for channel %s", session.channel_id)

        self._release(session)
        await self._announce(session, [event])

    async def _announce(self, session: Session, events: list[GameEvent]) -> None:
        formatter = EventFormatter(session.events.names)
        for event in events:
            text = formatter.format(event)
            if text is None:
                continue
            if event.private_to is not None:
                await self._send_private(session, event.private_to, text)
            else:
                await self.transport.broadcast(session.channel_id, text)

    async def _send_private(
        self,
        session: Session,
        participant_id: str,
        text: str,
        prompt: Optional[Prompt] = None,
    ) -> bool:
        """Send privately; on failure warn the channel and carry on."""
        try:
            await self.transport.send_private(participant_id, text, prompt)
        except DeliveryFailed as exc:
            logger.warning("%s (channel %s)", exc, session.channel_id)
            await self.transport.broadcast(
                session.channel_id,
                f"Warning: {session.name_of(participant_id)} cannot receive private messages. "
                "They need to start a chat with the bot.",
            )
            return False
        return True

    def _schedule(
        self,
        session: Session,
        name: str,
        delay: float,
        callback: Callable[[], Awaitable[None]],
    ) -> None:
        """Run `callback` after `delay` seconds unless cancelled first."""
        if session.phase == Phase.ENDED:
            return
        self._cancel_timer(session, name)

        async def fire() -> None:
            try:
                await asyncio.sleep(delay)
            except asyncio.CancelledError:
                return
            session.timers.pop(name, None)
            try:
                await callback()
            except Exception:
                logger.exception("Deadline %r failed in channel %s", name, session.channel_id)

        session.timers[name] = asyncio.create_task(fire())

    def _cancel_timer(self, session: Session, name: str) -> None:
        task = session.timers.pop(name, None)
        if task is not None and task is not asyncio.current_task():
            task.cancel()

    def _cancel_all(self, session: Session) -> None:
        for name in list(session.timers):
            self._cancel_timer(session, name)

    def _lobby(self, channel_id: str) -> Session:
        session = self._sessions.get(channel_id)
        if session is None or session.phase != Phase.LOBBY:
            raise LobbyError("No game is accepting players in this channel")
        return session

    def _release(self, session: Session) -> None:
        """Drop every reference to a finished session."""
        if self._sessions.get(session.channel_id) is session:
            del self._sessions[session.channel_id]
        for pid in session.players:
            if self._player_channels.get(pid) == session.channel_id:
                del self._player_channels[pid]
