"""Recommendation models for pairing protocol suggestions."""

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Recommendation:
    """A non-binding suggestion for one protocol step.

    Exactly one of ``defender``, ``attackers`` or ``attacker_choice`` is
    meaningful, depending on ``kind``.
    """

    step: int
    kind: str  # "defender", "attackers", "attacker_choice" or "none"
    defender: Optional[str] = None
    attackers: list[str] = field(default_factory=list)
    attacker_choice: Optional[str] = None
    source: str = "none"  # "solver", "fallback" or "none"

    @property
    def is_empty(self) -> bool:
        return self.defender is None and not self.attackers and self.attacker_choice is None

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON response."""
        data: dict = {"step": self.step, "kind": self.kind, "source": self.source}
        if self.kind == "defender":
            data["defender"] = self.defender
        elif self.kind == "attackers":
            data["attackers"] = list(self.attackers)
        elif self.kind == "attacker_choice":
            data["attacker_choice"] = self.attacker_choice
        return data
