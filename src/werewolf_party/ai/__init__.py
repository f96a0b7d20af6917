"""Stub participants for simulations and tests."""

from werewolf_party.ai.stub_ai import (
    StubPlayer,
    create_stub_player,
)

__all__ = [
    "StubPlayer",
    "create_stub_player",
]
