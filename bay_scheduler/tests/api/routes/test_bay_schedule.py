"""
Tests for the bay schedule API endpoints.

Every endpoint is stateless: the request carries the bays, schedules and
projects to lay out.
"""

from fastapi.testclient import TestClient

from bay_scheduler.core.config import settings

BASE = f"{settings.API_V1_STR}/bay-schedule"

BAY_1 = {
    "id": 1,
    "name": "Bay 1",
    "bay_number": 1,
    "team": "Team A",
    "assembly_staff_count": 2,
    "electrical_staff_count": 1,
}
UNSTAFFED_BAY = {"id": 2, "name": "Bay 2", "bay_number": 2, "team": "Team A"}

MARCH_SCHEDULES = [
    {
        "id": 1,
        "project_id": 1,
        "bay_id": 1,
        "start_date": "2025-03-01",
        "end_date": "2025-03-10",
    },
    {
        "id": 2,
        "project_id": 2,
        "bay_id": 1,
        "start_date": "2025-03-05",
        "end_date": "2025-03-15",
    },
    {
        "id": 3,
        "project_id": 3,
        "bay_id": 1,
        "start_date": "2025-03-20",
        "end_date": "2025-03-25",
    },
]


class TestTimeAxisEndpoint:
    def test_day_axis(self, client: TestClient):
        response = client.get(
            f"{BASE}/axis",
            params={
                "start_date": "2025-03-01",
                "end_date": "2025-03-31",
                "granularity": "day",
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["granularity"] == "day"
        assert data["slot_width"] == 50
        assert len(data["slots"]) == 31
        assert data["total_width"] == 31 * 50
        assert data["slots"][0]["start"] == "2025-03-01"
        assert data["slots"][0]["is_weekend"] is True
        assert data["slots"][2]["is_weekend"] is False

    def test_inverted_range_is_empty(self, client: TestClient):
        response = client.get(
            f"{BASE}/axis",
            params={"start_date": "2025-03-31", "end_date": "2025-03-01"},
        )

        assert response.status_code == 200
        assert response.json()["slots"] == []
        assert response.json()["total_width"] == 0

    def test_unknown_granularity_rejected(self, client: TestClient):
        response = client.get(
            f"{BASE}/axis",
            params={
                "start_date": "2025-03-01",
                "end_date": "2025-03-31",
                "granularity": "fortnight",
            },
        )

        assert response.status_code == 422


class TestScheduleBarsEndpoint:
    def test_bars_tracks_and_capacity(self, client: TestClient):
        pooled = {
            "id": 4,
            "project_id": 4,
            "start_date": "2025-03-02",
            "end_date": "2025-03-04",
        }
        response = client.post(
            f"{BASE}/bars",
            json={
                "start_date": "2025-03-01",
                "end_date": "2025-03-31",
                "granularity": "day",
                "bays": [BAY_1],
                "schedules": [*MARCH_SCHEDULES, pooled],
            },
        )

        assert response.status_code == 200
        data = response.json()
        bars = {bar["schedule_id"]: bar for bar in data["bars"]}
        assert set(bars) == {1, 2, 3}
        assert {sid: bar["track"] for sid, bar in bars.items()} == {1: 0, 2: 1, 3: 0}
        assert (bars[1]["left"], bars[1]["width"]) == (0, 9 * 50)
        assert bars[2]["left"] == 4 * 50
        assert data["unassigned_schedule_ids"] == [4]

        capacity = data["capacity"][0]
        assert capacity["bay_id"] == 1
        assert capacity["active_schedules"] == 3
        assert capacity["percentage"] == 100
        assert capacity["status"] == "At Capacity"

    def test_inverted_schedule_rejected(self, client: TestClient):
        bad = {**MARCH_SCHEDULES[0], "end_date": "2025-02-01"}
        response = client.post(
            f"{BASE}/bars",
            json={
                "start_date": "2025-03-01",
                "end_date": "2025-03-31",
                "bays": [BAY_1],
                "schedules": [bad],
            },
        )

        assert response.status_code == 422

    def test_committed_schedule_needs_positive_id(self, client: TestClient):
        response = client.post(
            f"{BASE}/bars",
            json={
                "start_date": "2025-03-01",
                "end_date": "2025-03-31",
                "bays": [BAY_1],
                "schedules": [{**MARCH_SCHEDULES[0], "id": 0}],
            },
        )

        assert response.status_code == 422


class TestEstimateEndpoint:
    def test_estimate_on_staffed_bay(self, client: TestClient):
        response = client.post(
            f"{BASE}/estimate",
            json={"bay": BAY_1, "total_hours": 96, "start_date": "2025-03-03"},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["end_date"] == "2025-03-07"
        assert data["days_needed"] == 4
        assert data["weekly_capacity_hours"] == 120
        assert data["daily_capacity_hours"] == 24

    def test_unstaffed_bay_conflict(self, client: TestClient):
        response = client.post(
            f"{BASE}/estimate",
            json={"bay": UNSTAFFED_BAY, "total_hours": 96, "start_date": "2025-03-03"},
        )

        assert response.status_code == 409
        data = response.json()
        assert data["type"] == "capacity_violation"
        assert data["details"]["bay_id"] == 2

    def test_negative_hours_rejected(self, client: TestClient):
        response = client.post(
            f"{BASE}/estimate",
            json={"bay": BAY_1, "total_hours": -1, "start_date": "2025-03-03"},
        )

        assert response.status_code == 422


class TestValidateEndpoint:
    def _validate(self, client: TestClient, proposed: dict, bays=None):
        return client.post(
            f"{BASE}/validate",
            json={
                "proposed": proposed,
                "schedules": MARCH_SCHEDULES,
                "bays": bays if bays is not None else [BAY_1, UNSTAFFED_BAY],
            },
        )

    def test_track_conflict_reported(self, client: TestClient):
        response = self._validate(
            client,
            {
                "id": 9,
                "project_id": 9,
                "bay_id": 1,
                "start_date": "2025-03-05",
                "end_date": "2025-03-08",
                "track": 0,
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["is_valid"] is False
        assert data["violations"][0]["kind"] == "track_conflict"
        assert data["violations"][0]["conflicting_schedule_id"] == 1

    def test_free_lane_is_valid(self, client: TestClient):
        response = self._validate(
            client,
            {
                "id": 9,
                "project_id": 9,
                "bay_id": 1,
                "start_date": "2025-03-05",
                "end_date": "2025-03-08",
                "track": 2,
            },
        )

        assert response.json() == {"is_valid": True, "violations": []}

    def test_unstaffed_bay_and_inverted_range(self, client: TestClient):
        response = self._validate(
            client,
            {
                "id": 9,
                "project_id": 9,
                "bay_id": 2,
                "start_date": "2025-03-08",
                "end_date": "2025-03-05",
            },
        )

        kinds = {v["kind"] for v in response.json()["violations"]}
        assert kinds == {"capacity_violation", "invalid_range"}

    def test_unknown_bay(self, client: TestClient):
        response = self._validate(
            client,
            {
                "id": 9,
                "project_id": 9,
                "bay_id": 77,
                "start_date": "2025-03-05",
                "end_date": "2025-03-08",
            },
        )

        assert response.json()["violations"][0]["kind"] == "unknown_bay"


class TestUtilizationEndpoint:
    def test_weekly_utilization(self, client: TestClient):
        response = client.post(
            f"{BASE}/utilization",
            json={
                "start_date": "2025-03-05",
                "weeks": 3,
                "bays": [BAY_1, {**UNSTAFFED_BAY, "team": "LIBBY"}],
                "schedules": [
                    {
                        "id": 1,
                        "project_id": 1,
                        "bay_id": 1,
                        "start_date": "2025-03-03",
                        "end_date": "2025-03-13",
                    }
                ],
                "projects": [{"id": 1, "project_number": "P-0001"}],
            },
        )

        assert response.status_code == 200
        weeks = response.json()["weeks"]
        assert [w["week_key"] for w in weeks] == [
            "2025-03-03",
            "2025-03-10",
            "2025-03-17",
        ]
        assert {w["bay_id"] for w in weeks} == {1}
        assert [w["utilization_percentage"] for w in weeks] == [50, 50, 0]
        assert weeks[0]["project_ids"] == [1]

    def test_week_count_bounded(self, client: TestClient):
        response = client.post(
            f"{BASE}/utilization", json={"start_date": "2025-03-03", "weeks": 0}
        )

        assert response.status_code == 422
