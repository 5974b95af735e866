"""
Pool state snapshots consumed by the quoting engines
"""

from .pairs import PairSnapshot, pair_snapshot

__all__ = [
    "PairSnapshot",
    "pair_snapshot",
]
