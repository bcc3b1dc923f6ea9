"""
Investment criteria attached to a portfolio.

Criteria are free-text descriptions supplied by the user and consumed by
the research provider when it looks for candidate companies.
"""

import uuid
from dataclasses import dataclass

from smart_invest.core.utils.validation import validate_non_empty, validate_numeric


@dataclass
class InvestmentCriteria:
    """One weighted investment criterion.

    Weight is only required to be numeric. A 1-10 scale, if any, is the
    caller's concern.
    """

    id: str
    description: str
    weight: float = 1
    active: bool = True

    def __post_init__(self) -> None:
        self.description = validate_non_empty(self.description, "description")
        validate_numeric(self.weight, "weight")

    @classmethod
    def create(cls, description: str, weight: float = 1) -> "InvestmentCriteria":
        """Factory method for a new, active criterion with a fresh id."""
        return cls(id=str(uuid.uuid4()), description=description, weight=weight, active=True)
