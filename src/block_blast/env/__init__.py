"""Gymnasium environments for Block Blast."""

from __future__ import annotations

from gymnasium.envs.registration import register

register(
    id="BlockBlast-8x8-v0",
    entry_point="block_blast.env.block_blast_env:BlockBlastEnv",
)

__all__ = ["BlockBlast-8x8-v0"]
