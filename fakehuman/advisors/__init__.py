"""Strategic advisors consulted by the FakeHuman coordinator."""

from .base import AdvisorDependencies, AdvisorStateError, BaseAdvisor, ReserveProvider
from .diplomacy import DiplomacyAdvisor
from .economy import BUILD_ORDER, BuildStep, EconomyAdvisor, structure_score
from .military import MilitaryAdvisor
from .mirv import MIRVAdvisor

__all__ = [
    "AdvisorDependencies",
    "AdvisorStateError",
    "BaseAdvisor",
    "ReserveProvider",
    "DiplomacyAdvisor",
    "EconomyAdvisor",
    "BuildStep",
    "BUILD_ORDER",
    "structure_score",
    "MilitaryAdvisor",
    "MIRVAdvisor",
]
