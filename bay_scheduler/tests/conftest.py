import os
from collections.abc import Generator
from datetime import date

# Bind the metrics server to a free port when the app starts under test
os.environ.setdefault("METRICS_PORT", "0")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from bay_scheduler.domain.scheduling.entities import (  # noqa: E402
    Bay,
    ManufacturingSchedule,
)
from bay_scheduler.domain.scheduling.services import (  # noqa: E402
    ScheduleBoard,
    compute_time_axis,
)
from bay_scheduler.domain.scheduling.value_objects import (  # noqa: E402
    Granularity,
    TimeAxis,
)
from bay_scheduler.infrastructure.events import InMemoryEventBus  # noqa: E402
from bay_scheduler.main import app  # noqa: E402
from bay_scheduler.tests.utils.factories import make_bay, make_schedule  # noqa: E402
from bay_scheduler.tests.utils.mock_services import (  # noqa: E402
    InMemoryScheduleDataSource,
    MockScheduleCommitter,
)


@pytest.fixture(scope="module")
def client() -> Generator[TestClient, None, None]:
    with TestClient(app) as c:
        yield c


@pytest.fixture
def staffed_bay() -> Bay:
    """2 assembly + 1 electrical at 40 h: 120 h/week, 24 h/day."""
    return make_bay(1, assembly=2, electrical=1)


@pytest.fixture
def unstaffed_bay() -> Bay:
    return make_bay(2, assembly=0, electrical=0)


@pytest.fixture
def march_schedules() -> list[ManufacturingSchedule]:
    return [
        make_schedule(1, date(2025, 3, 1), date(2025, 3, 10)),
        make_schedule(2, date(2025, 3, 5), date(2025, 3, 15), track=1),
        make_schedule(3, date(2025, 3, 20), date(2025, 3, 25)),
    ]


@pytest.fixture
def day_axis() -> TimeAxis:
    """Day slots for March 2025."""
    return compute_time_axis(date(2025, 3, 1), date(2025, 3, 31), Granularity.DAY)


@pytest.fixture
def event_bus() -> InMemoryEventBus:
    return InMemoryEventBus()


@pytest.fixture
def data_source(
    staffed_bay: Bay, unstaffed_bay: Bay, march_schedules: list[ManufacturingSchedule]
) -> InMemoryScheduleDataSource:
    return InMemoryScheduleDataSource(
        bays=[staffed_bay, unstaffed_bay], schedules=march_schedules
    )


@pytest.fixture
def board(
    data_source: InMemoryScheduleDataSource, event_bus: InMemoryEventBus
) -> ScheduleBoard:
    return ScheduleBoard.from_source(data_source, event_bus=event_bus)


@pytest.fixture
def committer() -> MockScheduleCommitter:
    return MockScheduleCommitter()
