"""Event formatter producing the text shown to players.

Formats game events with player display names. Events that reveal nothing
to anyone (protection, the secret role table, attack bookkeeping) format to
None and are never announced.
"""

from typing import Optional

from .game_events import (
    GameEvent,
    RolesAssigned,
    PhaseStarted,
    GameOver,
    SessionStopped,
    Frozen,
    SeerVision,
    SeerBlocked,
    Protected,
    GuardianBlocked,
    ChemistryOpened,
    ChemistryResolved,
    ChemistryCancelled,
    WolfAttack,
    NoAttack,
    NoAttackReason,
    AttackBlocked,
    Converted,
    ConversionCause,
    DrunkBlock,
    HunterRetaliation,
    FrenzyArmed,
    VoteTally,
    Lynch,
    NoLynch,
    NoLynchReason,
    GunnerShot,
    Death,
    DeathCause,
    RevengeRequested,
    HunterRevengeShot,
    Phase,
)

_DEATH_TEXT = {
    DeathCause.WOLF_ATTACK: "{name} was killed during the night.",
    DeathCause.GUARDIAN_RISK: "{name} died trying to guard a wolf.",
    DeathCause.CHEMISTRY: "{name} drank the poisoned potion.",
    DeathCause.HUNTER_RETALIATION: "The Hunter fought back and shot {name}.",
    DeathCause.HUNTER_REVENGE: "{name} was shot by the Hunter.",
    DeathCause.LYNCH: "{name} was lynched by the village.",
    DeathCause.GUNNER: "{name} was shot by the Gunner.",
}


class EventFormatter:
    """Format game events with display names.

    Takes a names mapping and produces strings like:
    - "Alice was killed during the night. Their role was Seer."
    """

    def __init__(self, names: dict[str, str]):
        """Initialize formatter with name mapping.

        Args:
            names: Dict mapping participant id to display name
        """
        self.names = names

    def name(self, participant_id: Optional[str]) -> str:
        if participant_id is None:
            return "nobody"
        return self.names.get(participant_id, participant_id)

    def format(self, event: GameEvent) -> Optional[str]:
        """Format a single event, or None if the event is silent."""
        return self._dispatch(event)

    def _dispatch(self, event: GameEvent) -> Optional[str]:
        if isinstance(event, (RolesAssigned, Protected, WolfAttack)):
            return None
        if isinstance(event, PhaseStarted):
            return self._format_phase_started(event)
        if isinstance(event, Death):
            return self._format_death(event)
        if isinstance(event, Frozen):
            return "Someone was frozen tonight... their night action fails."
        if isinstance(event, SeerVision):
            return f"Vision: {self.name(event.target)} is a {event.seen_as.value}."
        if isinstance(event, SeerBlocked):
            return "You were frozen tonight. Your vision failed."
        if isinstance(event, GuardianBlocked):
            return "The GuardianAngel was frozen. No one was protected tonight."
        if isinstance(event, ChemistryOpened):
            return None
        if isinstance(event, ChemistryResolved):
            return self._format_chemistry(event)
        if isinstance(event, ChemistryCancelled):
            return "The Chemist's visit came to nothing."
        if isinstance(event, NoAttack):
            if event.reason == NoAttackReason.NO_ATTACKERS:
                return "No wolf could attack tonight."
            return "The wolves hesitated. Nobody was attacked."
        if isinstance(event, AttackBlocked):
            return f"{self.name(event.victim)} survived an attack tonight."
        if isinstance(event, Converted):
            if event.cause == ConversionCause.CURSED:
                return "The Cursed was attacked... and turned into a Werewolf!"
            return "The AlphaWolf's bite turned someone into a Werewolf instead of killing them!"
        if isinstance(event, DrunkBlock):
            return self._format_drunk(event)
        if isinstance(event, HunterRetaliation):
            return self._format_retaliation(event)
        if isinstance(event, FrenzyArmed):
            return "The WolfCub died! Next night the wolves take two victims."
        if isinstance(event, VoteTally):
            return self._format_tally(event)
        if isinstance(event, Lynch):
            return None  # the Death event carries the reveal
        if isinstance(event, NoLynch):
            if event.reason == NoLynchReason.TIE:
                return "The vote is tied. Nobody is lynched today."
            return "No valid votes. Nobody is lynched today."
        if isinstance(event, GunnerShot):
            return (
                f"Gunner {self.name(event.actor)} shoots {self.name(event.target)} "
                f"(bullets left: {event.bullets_left})."
            )
        if isinstance(event, RevengeRequested):
            return f"Hunter {self.name(event.actor)} may take one last shot."
        if isinstance(event, HunterRevengeShot):
            how = "at random" if event.random_pick else "deliberately"
            return f"The Hunter aims {how} at {self.name(event.target)}."
        if isinstance(event, GameOver):
            return self._format_game_over(event)
        if isinstance(event, SessionStopped):
            return "The game was stopped by the host."
        return str(event)

    def _format_phase_started(self, event: PhaseStarted) -> str:
        if event.phase == Phase.NIGHT:
            return f"Night {event.night} falls. Everyone goes to sleep..."
        return f"Day {event.night} dawns. Discuss and vote!"

    def _format_death(self, event: Death) -> str:
        text = _DEATH_TEXT[event.cause].format(name=self.name(event.victim))
        return f"{text} Their role was {event.role.value}."

    def _format_chemistry(self, event: ChemistryResolved) -> str:
        prefix = "The potion was picked at random. " if event.forced else ""
        if event.target_poisoned:
            return f"{prefix}The Chemist's guest chose the poison."
        return f"{prefix}The Chemist was left with the poison."

    def _format_drunk(self, event: DrunkBlock) -> str:
        text = f"{self.name(event.victim)} turned out to be the Drunk. The attack failed!"
        if event.hangover_applied:
            text += " The attacking wolf will skip its next attack."
        if event.frenzy_cancelled:
            text += " The second attack of the frenzy is called off."
        return text

    def _format_retaliation(self, event: HunterRetaliation) -> str:
        if not event.success:
            return "The Hunter tried to fight back, but missed."
        if event.survived:
            return f"Hunter {self.name(event.actor)} drove the wolf away and survived."
        return "The Hunter fought back before falling."

    def _format_tally(self, event: VoteTally) -> str:
        if not event.votes:
            return "Vote details: (none)"
        lines = ["Vote details:"]
        for voter, target in event.votes.items():
            lines.append(f"- {self.name(voter)} -> {self.name(target)}")
        return "\n".join(lines)

    def _format_game_over(self, event: GameOver) -> str:
        lines = [f"{event.winner.value} win!", "", "Role reveal:"]
        alive = set(event.alive)
        for pid, role in event.roles.items():
            status = "alive" if pid in alive else "dead"
            lines.append(f"- {self.name(pid)}: {role.value} ({status})")
        return "\n".join(lines)
