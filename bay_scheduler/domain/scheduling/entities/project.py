"""Project entity, as far as the bay schedule consumes it."""

from pydantic import Field

from ...shared.base import Entity
from ..value_objects.enums import Phase

DEFAULT_PHASE_PERCENTAGES: dict[Phase, float] = {
    Phase.FAB: 27,
    Phase.PAINT: 7,
    Phase.PRODUCTION: 60,
    Phase.IT: 7,
    Phase.NTC: 7,
    Phase.QC: 7,
}


class Project(Entity):
    """A customer project whose declared hours get scheduled into a bay."""

    project_number: str = Field(min_length=1)
    name: str = ""
    total_hours: float = Field(default=0, ge=0)

    fab_percentage: float | None = Field(default=None, ge=0, le=100)
    paint_percentage: float | None = Field(default=None, ge=0, le=100)
    production_percentage: float | None = Field(default=None, ge=0, le=100)
    it_percentage: float | None = Field(default=None, ge=0, le=100)
    ntc_percentage: float | None = Field(default=None, ge=0, le=100)
    qc_percentage: float | None = Field(default=None, ge=0, le=100)

    def phase_percentage(self, phase: Phase) -> float:
        """Get a phase's share of the schedule span, falling back to defaults."""
        value = getattr(self, f"{phase.value.lower()}_percentage")
        # Unset and zero both fall back to the default share
        return value or DEFAULT_PHASE_PERCENTAGES[phase]
