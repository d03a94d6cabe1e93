"""Role bootstrap paths: one state machine per election outcome."""

from redis_launcher.bootstrap.base import Bootstrap, Phase
from redis_launcher.bootstrap.primary import PrimaryBootstrap
from redis_launcher.bootstrap.replica import ReplicaBootstrap
from redis_launcher.bootstrap.witness import WitnessBootstrap

__all__ = [
    "Bootstrap",
    "Phase",
    "PrimaryBootstrap",
    "ReplicaBootstrap",
    "WitnessBootstrap",
]
