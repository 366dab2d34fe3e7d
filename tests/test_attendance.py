import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock, patch
from datetime import datetime, time

from pymongo.errors import DuplicateKeyError

from smarthrms.services import attendance as attendance_service
from smarthrms.utils.exceptions import NotFoundError, BusinessLogicError, ConfigurationError


@pytest.fixture
def test_app():
    from fastapi import FastAPI
    from smarthrms.routers import attendance
    from smarthrms.middleware.error_handlers import ExceptionHandlerMiddleware

    app = FastAPI()
    app.add_middleware(ExceptionHandlerMiddleware)
    app.include_router(attendance.router, prefix="/api/attendance")
    return app


@pytest.fixture
def client(test_app):
    return TestClient(test_app)


@pytest.fixture
def colls():
    with patch('smarthrms.services.attendance.attendance_coll') as attendance_coll, \
         patch('smarthrms.services.attendance.employees_coll') as employees_coll:
        attendance_coll.insert_one = AsyncMock()
        attendance_coll.find_one = AsyncMock(return_value=None)
        employees_coll.find_one = AsyncMock(return_value={"employee_id": "emp-1"})
        yield attendance_coll, employees_coll


class TestAttendanceRules:

    def test_on_time_and_late(self):
        assert attendance_service.status_for_check_in(datetime(2024, 5, 1, 9, 0)) == "present"
        assert attendance_service.status_for_check_in(datetime(2024, 5, 1, 9, 30)) == "present"
        assert attendance_service.status_for_check_in(datetime(2024, 5, 1, 9, 31)) == "late"

    def test_custom_cutoff(self):
        assert attendance_service.status_for_check_in(datetime(2024, 5, 1, 8, 15), time(8, 0)) == "late"

    def test_hours_between(self):
        assert attendance_service.hours_between(datetime(2024, 5, 1, 9, 0), datetime(2024, 5, 1, 17, 20)) == 8.33

    def test_bad_cutoff_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            attendance_service._parse_clock("half past nine")

    def test_stats(self):
        records = [
            {"status": "present"},
            {"status": "present"},
            {"status": "late"},
            {"status": "half-day"},
            {"status": "absent"},
            {"status": "absent"},
        ]
        stats = attendance_service.compute_attendance_stats(records)

        assert (stats.present, stats.late, stats.half_day, stats.absent, stats.total) == (2, 1, 1, 2, 6)
        # 4 of 6 attended
        assert stats.attendance_rate == 67

    def test_stats_without_records(self):
        stats = attendance_service.compute_attendance_stats([])
        assert stats.total == 0
        assert stats.attendance_rate == 0


class TestCheckInOut:
    """Daily check-in/check-out flow"""

    async def test_check_in(self, colls):
        attendance_coll, _ = colls

        record = await attendance_service.check_in("emp-1", now=datetime(2024, 5, 1, 9, 45))

        assert record["date"] == "2024-05-01"
        assert record["status"] == "late"
        assert record["check_out"] is None
        attendance_coll.insert_one.assert_awaited_once()

    async def test_check_in_unknown_employee(self, colls):
        _, employees_coll = colls
        employees_coll.find_one = AsyncMock(return_value=None)

        with pytest.raises(NotFoundError):
            await attendance_service.check_in("ghost")

    async def test_second_check_in_same_day(self, colls):
        attendance_coll, _ = colls
        attendance_coll.find_one = AsyncMock(return_value={"attendance_id": "a1"})

        with pytest.raises(BusinessLogicError):
            await attendance_service.check_in("emp-1", now=datetime(2024, 5, 1, 10, 0))
        attendance_coll.insert_one.assert_not_called()

    async def test_check_out_stores_hours(self, colls):
        attendance_coll, _ = colls
        attendance_coll.find_one = AsyncMock(return_value={
            "attendance_id": "a1",
            "employee_id": "emp-1",
            "date": "2024-05-01",
            "check_in": datetime(2024, 5, 1, 9, 0),
            "check_out": None,
        })
        attendance_coll.find_one_and_update = AsyncMock(return_value={"attendance_id": "a1", "hours": 8.5})

        await attendance_service.check_out("emp-1", now=datetime(2024, 5, 1, 17, 30))

        query, update = attendance_coll.find_one_and_update.await_args.args
        assert query == {"attendance_id": "a1"}
        assert update["$set"]["hours"] == 8.5

    async def test_check_out_without_check_in(self, colls):
        with pytest.raises(NotFoundError):
            await attendance_service.check_out("emp-1", now=datetime(2024, 5, 1, 17, 0))

    async def test_check_out_twice(self, colls):
        attendance_coll, _ = colls
        attendance_coll.find_one = AsyncMock(return_value={
            "attendance_id": "a1",
            "check_in": datetime(2024, 5, 1, 9, 0),
            "check_out": datetime(2024, 5, 1, 17, 0),
        })

        with pytest.raises(BusinessLogicError):
            await attendance_service.check_out("emp-1", now=datetime(2024, 5, 1, 18, 0))

    async def test_check_out_of_manual_record(self, colls):
        attendance_coll, _ = colls
        attendance_coll.find_one = AsyncMock(return_value={"attendance_id": "a1", "status": "absent", "check_in": None})

        with pytest.raises(BusinessLogicError):
            await attendance_service.check_out("emp-1")


class TestAttendanceRouter:
    """Test cases for the attendance endpoints"""

    def test_check_in_endpoint(self, colls, client):
        response = client.post("/api/attendance/check-in", json={"employee_id": "emp-1"})

        assert response.status_code == 200
        data = response.json()
        assert data["employee_id"] == "emp-1"
        assert data["status"] in ("present", "late")

    def test_check_in_unknown_employee(self, colls, client):
        _, employees_coll = colls
        employees_coll.find_one = AsyncMock(return_value=None)

        response = client.post("/api/attendance/check-in", json={"employee_id": "ghost"})

        assert response.status_code == 404

    def test_record_absence(self, colls, client):
        attendance_coll, _ = colls

        response = client.post("/api/attendance", json={"employee_id": "emp-1", "date": "2024-05-02"})

        assert response.status_code == 200
        assert response.json()["status"] == "absent"
        assert attendance_coll.insert_one.call_args[0][0]["date"] == "2024-05-02"

    def test_record_duplicate_day(self, colls, client):
        attendance_coll, _ = colls
        attendance_coll.find_one = AsyncMock(return_value={"attendance_id": "a1"})

        response = client.post("/api/attendance", json={"employee_id": "emp-1", "date": "2024-05-02", "status": "present"})

        assert response.status_code == 400
        assert response.json()["error"]["details"]["business_rule"] == "single_record_per_day"

    def test_concurrent_check_in_is_rejected(self, colls, client):
        attendance_coll, _ = colls
        # another request inserted today's record after our lookup
        attendance_coll.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key error"))

        response = client.post("/api/attendance/check-in", json={"employee_id": "emp-1"})

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["error_code"] == "BUSINESS_LOGIC_ERROR"
        assert error["details"]["business_rule"] == "single_check_in_per_day"

    def test_concurrent_manual_record_is_rejected(self, colls, client):
        attendance_coll, _ = colls
        attendance_coll.insert_one = AsyncMock(side_effect=DuplicateKeyError("E11000 duplicate key error"))

        response = client.post("/api/attendance", json={"employee_id": "emp-1", "date": "2024-05-02"})

        assert response.status_code == 400
        assert response.json()["error"]["details"]["business_rule"] == "single_record_per_day"

    @patch('smarthrms.routers.attendance.attendance_coll')
    def test_list_filters(self, mock_attendance_coll, client):
        mock_attendance_coll.find = MagicMock(return_value=MagicMock(to_list=AsyncMock(return_value=[
            {"attendance_id": "a1", "employee_id": "emp-1", "date": "2024-05-01", "status": "present"},
            {"attendance_id": "a2", "employee_id": "emp-1", "date": "2024-05-03", "status": "late"},
        ])))

        response = client.get("/api/attendance/all?employee_id=emp-1&date=2024-05-01")

        assert response.status_code == 200
        assert [r["attendance_id"] for r in response.json()] == ["a2", "a1"]
        mock_attendance_coll.find.assert_called_once_with({"employee_id": "emp-1", "date": "2024-05-01"})

    @patch('smarthrms.routers.attendance.attendance_coll')
    def test_stats_for_day(self, mock_attendance_coll, client):
        mock_attendance_coll.find = MagicMock(return_value=MagicMock(to_list=AsyncMock(return_value=[
            {"attendance_id": "a1", "employee_id": "e1", "date": "2024-05-01", "status": "present"},
            {"attendance_id": "a2", "employee_id": "e2", "date": "2024-05-01", "status": "absent"},
        ])))

        response = client.get("/api/attendance/stats?date=2024-05-01")

        assert response.json() == {
            "present": 1, "late": 0, "absent": 1, "half_day": 0, "total": 2, "attendance_rate": 50,
        }
