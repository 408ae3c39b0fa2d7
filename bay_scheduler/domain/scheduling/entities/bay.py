"""Manufacturing bay entity: a staffed production unit that hosts schedules."""

from pydantic import Field

from ...shared.base import Entity


class Bay(Entity):
    """
    Manufacturing bay.

    Throughput is derived from staffing: every assembly and electrical staff
    member contributes ``hours_per_person_per_week`` hours of weekly capacity.
    """

    name: str = Field(min_length=1)
    bay_number: int = Field(ge=0)
    is_active: bool = True
    team: str | None = None
    assembly_staff_count: int = Field(default=0, ge=0)
    electrical_staff_count: int = Field(default=0, ge=0)
    hours_per_person_per_week: float = Field(default=40, ge=0)

    @property
    def total_staff(self) -> int:
        """Get total staff assigned to the bay."""
        return self.assembly_staff_count + self.electrical_staff_count

    @property
    def is_staffed(self) -> bool:
        """Check if the bay has any capacity to absorb work."""
        return self.total_staff > 0 and self.hours_per_person_per_week > 0

    def staffing_summary(self) -> str:
        """Human readable staffing line for bay tooltips."""
        if self.total_staff == 0:
            return "No staff assigned"
        return (
            f"{self.assembly_staff_count} assembly + "
            f"{self.electrical_staff_count} electrical = {self.total_staff} staff "
            f"({self.hours_per_person_per_week:g} hrs/week)"
        )
