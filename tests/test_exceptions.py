import pytest
from fastapi import FastAPI, HTTPException
from fastapi.testclient import TestClient

from smarthrms.middleware.error_handlers import (
    ExceptionHandlerMiddleware,
    PerformanceMiddleware,
    RequestLoggingMiddleware,
)
from smarthrms.utils.exceptions import (
    BusinessLogicError,
    ConfigurationError,
    DatabaseError,
    ExceptionContext,
    NotFoundError,
    ValidationError,
    map_to_http_exception,
)
from smarthrms.utils.logging_config import get_logger


class TestExceptionMapping:

    @pytest.mark.parametrize("exc, status", [
        (ValidationError("bad"), 400),
        (ConfigurationError("bad"), 400),
        (BusinessLogicError("bad"), 400),
        (NotFoundError("missing"), 404),
        (DatabaseError("down"), 500),
    ])
    def test_status_codes(self, exc, status):
        assert map_to_http_exception(exc).status_code == status

    def test_details_are_collected(self):
        exc = NotFoundError("Task t1 not found", resource="task", resource_id="t1", details={"hint": "x"})
        body = exc.to_dict()

        assert body["error_code"] == "NOT_FOUND"
        assert body["details"] == {"hint": "x", "resource": "task", "resource_id": "t1"}

    def test_cause_is_reported(self):
        exc = ConfigurationError("bad value", config_key="LATE_AFTER", cause=ValueError("nope"))
        assert exc.to_dict()["cause"] == "nope"


class TestExceptionContext:

    def test_custom_errors_pass_through(self):
        with pytest.raises(NotFoundError):
            with ExceptionContext("lookup"):
                raise NotFoundError("missing")

    def test_http_errors_pass_through(self):
        with pytest.raises(HTTPException):
            with ExceptionContext("lookup"):
                raise HTTPException(status_code=404)

    def test_value_errors_become_validation_errors(self):
        with pytest.raises(ValidationError) as info:
            with ExceptionContext("parse", request_id="r1"):
                int("x")
        assert info.value.details == {"request_id": "r1"}
        assert isinstance(info.value.cause, ValueError)

    def test_other_errors_become_database_errors(self):
        with pytest.raises(DatabaseError) as info:
            with ExceptionContext("insert", get_logger("tests")):
                raise ConnectionError("mongo unreachable")
        assert info.value.details["operation"] == "insert"


@pytest.fixture
def client():
    app = FastAPI()
    app.add_middleware(PerformanceMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(ExceptionHandlerMiddleware)

    @app.get("/ok")
    async def ok():
        return {"ok": True}

    @app.get("/rule")
    async def rule():
        raise BusinessLogicError("Leave already reviewed", rule="review_pending_only")

    @app.get("/missing")
    async def missing():
        raise HTTPException(status_code=404, detail="Employee not found")

    @app.get("/boom")
    async def boom():
        raise RuntimeError("secret internals")

    @app.get("/typed/{n}")
    async def typed(n: int):
        return {"n": n}

    return TestClient(app)


class TestMiddleware:
    """Error envelope and request tracking headers"""

    def test_success_has_tracking_headers(self, client):
        response = client.get("/ok")

        assert response.status_code == 200
        assert response.headers["X-Request-ID"]
        assert float(response.headers["X-Processing-Time"]) >= 0

    def test_custom_error_envelope(self, client):
        response = client.get("/rule")

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["status_code"] == 400
        assert body["message"] == "Leave already reviewed"
        assert body["error"]["details"]["business_rule"] == "review_pending_only"
        assert body["request_id"] == response.headers["X-Request-ID"]

    def test_http_exception_keeps_status(self, client):
        response = client.get("/missing")

        assert response.status_code == 404
        assert response.json()["detail"] == "Employee not found"

    def test_unhandled_error_is_hidden(self, client):
        response = client.get("/boom")

        assert response.status_code == 500
        assert "secret internals" not in response.text
        assert response.json()["error"] == "Internal server error"

    def test_request_validation(self, client):
        assert client.get("/typed/abc").status_code == 422
