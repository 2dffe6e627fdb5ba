"""API endpoint integration tests.

Requests run against the FastAPI app with the database session overridden
by the per-test SQLite session.
"""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest
from fastapi import FastAPI
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from opsledger import __version__
from opsledger.api.dependencies import get_db_session

pytestmark = pytest.mark.asyncio


def headers_for(employee) -> dict[str, str]:
    return {"X-User-Id": str(employee.employee_id), "X-User-Role": employee.role}


class TestHealthEndpoints:
    """Test health check endpoints."""

    async def test_health_check(self, client: AsyncClient):
        """Health endpoint should return 200."""
        response = await client.get("/health")
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["version"] == __version__

    async def test_readiness_check(self, client: AsyncClient):
        response = await client.get("/ready")
        assert response.status_code == 200
        assert response.json()["status"] == "ready"

    async def test_readiness_reports_unreachable_database(
        self, app: FastAPI, client: AsyncClient
    ):
        """A database that rejects queries makes the service not ready."""

        class UnreachableSession:
            async def execute(self, statement):
                raise OperationalError("SELECT 1", {}, Exception("connection refused"))

        async def unreachable_session():
            yield UnreachableSession()

        app.dependency_overrides[get_db_session] = unreachable_session

        ready = await client.get("/ready")
        health = await client.get("/health")

        assert ready.status_code == 503
        assert ready.json()["status"] == "unavailable"
        assert health.json()["status"] == "degraded"

    async def test_liveness_check(self, client: AsyncClient):
        response = await client.get("/live")
        assert response.status_code == 200
        assert response.json()["status"] == "alive"


class TestAuth:
    """Principal headers and role checks."""

    async def test_missing_principal(self, client: AsyncClient):
        response = await client.get("/api/v1/attendance")
        assert response.status_code == 401
        assert response.json()["code"] == "AUTH_ERROR"

    async def test_malformed_user_id(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/attendance",
            headers={"X-User-Id": "not-a-uuid", "X-User-Role": "admin"},
        )
        assert response.status_code == 401

    async def test_unknown_role(self, client: AsyncClient):
        response = await client.get(
            "/api/v1/attendance",
            headers={"X-User-Id": str(uuid4()), "X-User-Role": "owner"},
        )
        assert response.status_code == 401

    async def test_worker_on_admin_route(self, client: AsyncClient, daily_worker):
        response = await client.get("/api/v1/analytics", headers=headers_for(daily_worker))
        assert response.status_code == 403
        assert response.json()["code"] == "AUTH_ERROR"


class TestAttendanceEndpoints:
    async def test_check_in(self, client: AsyncClient, daily_worker):
        response = await client.post(
            "/api/v1/attendance",
            headers=headers_for(daily_worker),
            json={"action": "check-in", "day": "2026-03-10"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert data["status"] == "present"
        assert data["employee_id"] == str(daily_worker.employee_id)
        assert data["day"] == "2026-03-10"
        assert data["is_checked_out"] is False

    async def test_missing_action(self, client: AsyncClient, daily_worker):
        response = await client.post(
            "/api/v1/attendance", headers=headers_for(daily_worker), json={}
        )

        assert response.status_code == 400
        body = response.json()
        assert body["code"] == "VALIDATION_ERROR"
        assert "action" in body["detail"]

    async def test_worker_list_is_scoped(
        self, client: AsyncClient, daily_worker, salaried_worker, add_attendance
    ):
        await add_attendance(daily_worker, date(2026, 3, 2), 2)
        await add_attendance(salaried_worker, date(2026, 3, 2), 2)

        response = await client.get(
            "/api/v1/attendance",
            headers=headers_for(daily_worker),
            params={"employee_id": str(salaried_worker.employee_id)},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 2
        assert {item["employee_name"] for item in data["items"]} == {"Dana Daily"}


class TestPayrollEndpoints:
    async def test_settings_round_trip(self, client: AsyncClient, admin):
        response = await client.get("/api/v1/payroll-settings", headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json()["default_working_days"] == 20

        response = await client.put(
            "/api/v1/payroll-settings",
            headers=headers_for(admin),
            json={
                "default_payroll_model": "daily_rate",
                "default_working_days": 22,
                "default_daily_rate": "120.00",
            },
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert data["default_payroll_model"] == "daily_rate"
        assert Decimal(data["default_daily_rate"]) == Decimal("120")

    async def test_process_single_then_conflict(self, client: AsyncClient, admin, daily_worker):
        payload = {
            "employee_id": str(daily_worker.employee_id),
            "days_worked": 20,
            "service_charge": "25.00",
            "month": "2026-03-09",
        }

        response = await client.post("/api/v1/payroll", headers=headers_for(admin), json=payload)
        assert response.status_code == 201, response.text
        data = response.json()
        assert data["month"] == "2026-03-01"
        assert data["status"] == "processed"
        assert Decimal(data["total_payable"]) == Decimal("2025")

        response = await client.post("/api/v1/payroll", headers=headers_for(admin), json=payload)
        assert response.status_code == 409
        assert response.json()["code"] == "CONFLICT"

    async def test_process_unknown_employee(self, client: AsyncClient, admin):
        response = await client.post(
            "/api/v1/payroll",
            headers=headers_for(admin),
            json={"employee_id": str(uuid4()), "days_worked": 3},
        )
        assert response.status_code == 404
        assert response.json()["code"] == "NOT_FOUND"

    async def test_process_missing_days_worked(self, client: AsyncClient, admin, daily_worker):
        response = await client.post(
            "/api/v1/payroll",
            headers=headers_for(admin),
            json={"employee_id": str(daily_worker.employee_id)},
        )
        assert response.status_code == 400
        assert "days_worked" in response.json()["detail"]

    async def test_worker_cannot_process(self, client: AsyncClient, daily_worker):
        response = await client.post(
            "/api/v1/payroll",
            headers=headers_for(daily_worker),
            json={"employee_id": str(daily_worker.employee_id), "days_worked": 3},
        )
        assert response.status_code == 403

    async def test_bulk_is_idempotent(
        self, client: AsyncClient, admin, daily_worker, add_attendance
    ):
        await add_attendance(daily_worker, date(2026, 3, 1), 20)

        first = await client.post(
            "/api/v1/payroll/bulk-process",
            headers=headers_for(admin),
            json={"reference_date": "2026-03-31"},
        )
        second = await client.post(
            "/api/v1/payroll/bulk-process",
            headers=headers_for(admin),
            json={"reference_date": "2026-03-31"},
        )

        assert first.json() == {"created_count": 2}
        assert second.json() == {"created_count": 0}

        response = await client.get(
            "/api/v1/payroll",
            headers=headers_for(daily_worker),
            params={"month": "2026-03-01"},
        )
        items = response.json()["items"]
        assert len(items) == 1
        assert Decimal(items[0]["total_payable"]) == Decimal("2000")
        assert items[0]["employee_name"] == "Dana Daily"

    async def test_update_status_and_delete(self, client: AsyncClient, admin, daily_worker):
        created = await client.post(
            "/api/v1/payroll",
            headers=headers_for(admin),
            json={"employee_id": str(daily_worker.employee_id), "days_worked": 5},
        )
        payroll_id = created.json()["payroll_id"]

        response = await client.patch(
            f"/api/v1/payroll/{payroll_id}",
            headers=headers_for(admin),
            json={"status": "paid"},
        )
        assert response.status_code == 200
        assert response.json()["status"] == "paid"

        response = await client.patch(
            f"/api/v1/payroll/{payroll_id}",
            headers=headers_for(admin),
            json={"status": "void"},
        )
        assert response.status_code == 400

        response = await client.delete(f"/api/v1/payroll/{payroll_id}", headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json() == {"deleted": True, "id": payroll_id}

        response = await client.delete(f"/api/v1/payroll/{payroll_id}", headers=headers_for(admin))
        assert response.status_code == 404


class TestFinanceEndpoints:
    async def test_analytics_summary(self, client: AsyncClient, admin):
        await client.post(
            "/api/v1/sales",
            headers=headers_for(admin),
            json={"amount": "5000", "client_name": "Acme", "date": "2026-03-05T10:00:00"},
        )
        await client.post(
            "/api/v1/expenses",
            headers=headers_for(admin),
            json={"amount": "1200", "category": "rent", "date": "2026-03-06T09:00:00"},
        )

        response = await client.get(
            "/api/v1/analytics",
            headers=headers_for(admin),
            params={"start_date": "2026-03-01", "end_date": "2026-03-31"},
        )

        assert response.status_code == 200, response.text
        data = response.json()
        assert Decimal(data["summary"]["profit"]) == Decimal("3800")
        assert data["summary"]["profit_margin"] == "76.00"
        assert data["sales_by_day"][0]["day"] == "2026-03-05"
        assert data["expenses_by_category"][0]["category"] == "rent"

    async def test_savings_and_allocation(self, client: AsyncClient, admin):
        response = await client.get("/api/v1/savings", headers=headers_for(admin))
        assert response.status_code == 200
        assert response.json() is None

        response = await client.post(
            "/api/v1/savings",
            headers=headers_for(admin),
            json={"month": "2026-03-01", "total_revenue": "1800", "savings_percentage": "10"},
        )
        assert response.status_code == 200, response.text
        assert Decimal(response.json()["savings_amount"]) == Decimal("180")

        response = await client.post(
            "/api/v1/profit-allocation",
            headers=headers_for(admin),
            json={
                "month": "2026-03-01",
                "total_profit": "1800",
                "savings_amount": "180",
                "allocations": [{"category": "food", "amount": "500"}],
            },
        )
        assert response.status_code == 200, response.text
        data = response.json()
        assert Decimal(data["remaining_amount"]) == Decimal("1120")
        assert data["allocations"][0]["category"] == "food"

        response = await client.get(
            "/api/v1/profit-allocation",
            headers=headers_for(admin),
            params={"month": "2026-03-20"},
        )
        assert Decimal(response.json()["remaining_amount"]) == Decimal("1120")

    async def test_savings_missing_fields(self, client: AsyncClient, admin):
        response = await client.post(
            "/api/v1/savings",
            headers=headers_for(admin),
            json={"month": "2026-03-01"},
        )
        assert response.status_code == 400
        assert response.json()["code"] == "VALIDATION_ERROR"

    async def test_sale_crud(self, client: AsyncClient, admin):
        created = await client.post(
            "/api/v1/sales",
            headers=headers_for(admin),
            json={"amount": "99.50", "client_name": "Acme"},
        )
        assert created.status_code == 201, created.text
        sale_id = created.json()["sale_id"]

        updated = await client.put(
            f"/api/v1/sales/{sale_id}",
            headers=headers_for(admin),
            json={"client_name": "Globex"},
        )
        assert updated.status_code == 200
        assert updated.json()["client_name"] == "Globex"
        assert Decimal(updated.json()["amount"]) == Decimal("99.50")

        listed = await client.get("/api/v1/sales", headers=headers_for(admin))
        assert [s["sale_id"] for s in listed.json()] == [sale_id]

        deleted = await client.delete(f"/api/v1/sales/{sale_id}", headers=headers_for(admin))
        assert deleted.status_code == 200

        missing = await client.put(
            f"/api/v1/sales/{sale_id}",
            headers=headers_for(admin),
            json={"amount": "1"},
        )
        assert missing.status_code == 404

    async def test_negative_expense_rejected(self, client: AsyncClient, admin):
        response = await client.post(
            "/api/v1/expenses",
            headers=headers_for(admin),
            json={"amount": "-3", "category": "misc"},
        )
        assert response.status_code == 400
