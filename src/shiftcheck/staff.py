from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EmployeeCategory(str, Enum):
    TITULAR_PHARMACIST = "pharmacien_titulaire"
    ADJUNCT_PHARMACIST = "pharmacien_adjoint"
    DISPENSER = "preparateur"
    SHELF_STOCKER = "rayonniste"
    APPRENTICE = "apprenti"
    STUDENT = "etudiant"


PHARMACIST_CATEGORIES: frozenset[EmployeeCategory] = frozenset(
    {EmployeeCategory.TITULAR_PHARMACIST, EmployeeCategory.ADJUNCT_PHARMACIST}
)


@dataclass(slots=True)
class Employee:
    """
    A worker with a weekly contract-hours target and a role category.
    """

    id: str
    name: str
    category: EmployeeCategory
    contract_hours: float = 35.0
    is_active: bool = True

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return (
            f"Employee(id={self.id!r}, name='{self.name}', "
            f"category={self.category.value}, contract={self.contract_hours}h, {state})"
        )

    def __post_init__(self) -> None:
        self.category = EmployeeCategory(self.category)
        self.contract_hours = float(self.contract_hours)
        if self.contract_hours < 0:
            raise ValueError("contract_hours must be non-negative.")

    @property
    def is_pharmacist(self) -> bool:
        return self.category in PHARMACIST_CATEGORIES
