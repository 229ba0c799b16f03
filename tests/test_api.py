"""
API tests through the FastAPI routers
"""
import pytest


@pytest.fixture
def appointment_body(services, vehicles):
    return {
        "customerId": "C1",
        "vehicleId": vehicles["C1"].id,
        "serviceId": services["Oil Change"].id,
        "date": "2025-11-12",
        "startTime": "09:00",
        "status": "COMPLETED",
    }


@pytest.fixture
def appointment_id(client, appointment_body):
    response = client.post("/appointments", json=appointment_body)
    assert response.status_code == 201
    return response.json()["id"]


@pytest.mark.api
class TestCatalogEndpoints:
    """Tests for /services and /admin/services"""

    def test_list_active_services(self, client):
        response = client.get("/services")
        assert response.status_code == 200
        names = [s["name"] for s in response.json()]
        assert names[:3] == ["Oil Change", "Brake Inspection", "Tire Rotation"]
        assert len(names) == 6

    def test_deactivated_service_is_hidden(self, client, services):
        service_id = services["Tire Rotation"].id
        assert client.delete(f"/admin/services/{service_id}").json()["active"] is False
        assert client.get(f"/services/{service_id}").status_code == 404
        assert "Tire Rotation" not in [s["name"] for s in client.get("/services").json()]
        assert "Tire Rotation" in [s["name"] for s in client.get("/admin/services").json()]

    def test_create_duplicate_service(self, client):
        body = {"name": "oil change", "price": "10.00", "estimatedDurationMinutes": 15}
        response = client.post("/admin/services", json=body)
        assert response.status_code == 422
        assert response.json()["field"] == "name"

    def test_create_service_validates_duration(self, client):
        body = {"name": "Detailing", "price": "80.00", "estimatedDurationMinutes": 0}
        assert client.post("/admin/services", json=body).status_code == 422

    def test_update_can_clear_description(self, client, services):
        service_id = services["Oil Change"].id
        response = client.patch(f"/admin/services/{service_id}", json={"description": ""})
        assert response.status_code == 200
        assert response.json()["description"] is None
        assert response.json()["name"] == "Oil Change"


@pytest.mark.api
class TestSchedulingEndpoints:
    """Tests for /scheduling"""

    def test_slots(self, client):
        slots = client.get("/scheduling/slots").json()
        assert slots[0] == "09:00" and slots[-1] == "17:30"

    def test_plan(self, client, services):
        body = {"serviceId": services["Air Conditioning Service"].id, "date": "2025-11-12", "startTime": "04:30 PM"}
        response = client.post("/scheduling/plan", json=body)
        assert response.status_code == 200
        assert response.json() == {
            "date": "2025-11-12",
            "startTime": "16:30",
            "endTime": "18:00",
            "durationMinutes": 90,
        }


@pytest.mark.api
class TestWorkflow:
    """The booking → assignment → progress → completion flow"""

    def test_full_appointment_flow(self, client, appointment_id):
        record = client.get(f"/admin/work-items/{appointment_id}").json()
        assert record["status"] == "REQUESTING"
        assert record["endTime"] == "09:30"
        assert record["assignedEmployeeId"] is None

        assigned = client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        assert assigned.status_code == 200
        assert assigned.json()["status"] == "ASSIGNED"
        assert assigned.json()["assignedEmployeeId"] == "E7"

        base = f"/employees/E7/work-items/{appointment_id}"
        progress = client.post(f"{base}/progress", json={"stage": "in progress", "percentage": 40})
        assert progress.status_code == 201
        assert client.get(base).json()["status"] == "IN_PROGRESS"

        done = client.post(f"{base}/progress", json={"stage": "completed", "percentage": 100})
        assert done.status_code == 201
        summary = client.get(f"{base}/progress").json()
        assert summary["status"] == "COMPLETED"
        assert summary["progressPercentage"] == 100
        assert summary["latestPercentage"] == 100
        assert summary["averagePercentage"] == 70.0

        late = client.post(f"{base}/time-logs", json={"hours": 1, "description": "extra"})
        assert late.status_code == 409

    def test_cancel_then_assign_conflicts(self, client, appointment_id):
        cancelled = client.post(f"/admin/work-items/{appointment_id}/cancel")
        assert cancelled.json()["status"] == "CANCELLED"
        response = client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        assert response.status_code == 409

    def test_double_timer_start(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        base = f"/employees/E7/work-items/{appointment_id}/timer"
        assert client.post(f"{base}/start").json()["timerState"] == "RUNNING"
        second = client.post(f"{base}/start")
        assert second.status_code == 200
        assert second.json()["timerState"] == "RUNNING"
        assert client.post(f"{base}/pause").json()["timerState"] == "STOPPED"

    def test_time_log_retry(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        url = f"/employees/E7/work-items/{appointment_id}/time-logs"
        body = {"hours": "1.25", "description": "Oil drain", "requestId": "abc"}
        first = client.post(url, json=body).json()
        second = client.post(url, json=body).json()
        assert first["id"] == second["id"]
        assert len(client.get(url).json()) == 1

    def test_other_employee_sees_not_found(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        response = client.post(
            f"/employees/E8/work-items/{appointment_id}/progress", json={"stage": "in progress", "percentage": 5}
        )
        assert response.status_code == 404
        assert client.get("/employees/E8/work-items").json() == []
        assert [i["id"] for i in client.get("/employees/E7/work-items").json()] == [appointment_id]

    def test_invalid_percentage(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        response = client.post(
            f"/employees/E7/work-items/{appointment_id}/progress", json={"stage": "in progress", "percentage": 120}
        )
        assert response.status_code == 422
        assert response.json()["field"] == "percentage"

    def test_unassign(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        response = client.post(f"/admin/work-items/{appointment_id}/unassign")
        assert response.json()["status"] == "REQUESTING"
        assert response.json()["assignedEmployeeId"] is None


@pytest.mark.api
class TestCustomerEndpoints:
    """Tests for customer-facing listings"""

    def test_missing_service_is_validation_error(self, client, appointment_body):
        appointment_body.pop("serviceId")
        response = client.post("/appointments", json=appointment_body)
        assert response.status_code == 422
        assert response.json()["field"] == "serviceId"

    def test_project_request(self, client):
        body = {"customerId": "C1", "name": "Respray", "description": "Full body", "startDate": "2025-11-01"}
        response = client.post("/projects", json=body)
        assert response.status_code == 201
        assert response.json()["kind"] == "PROJECT"
        assert response.json()["status"] == "REQUESTING"

    def test_customer_work_items_and_dashboard(self, client, appointment_id):
        client.post("/projects", json={"customerId": "C1", "name": "Wrap", "description": "Matte", "startDate": "2025-11-01"})
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})

        items = client.get("/customers/C1/work-items").json()
        assert len(items) == 2
        assert len(client.get("/customers/C1/work-items", params={"kind": "PROJECT"}).json()) == 1

        stats = client.get("/customers/C1/dashboard").json()
        assert stats["totalVehicles"] == 1
        assert stats["upcomingAppointments"] == 1
        assert stats["totalAppointments"] == 1
        assert stats["totalProjects"] == 1
        assert client.get("/customers/C2/dashboard").json()["totalAppointments"] == 0

    def test_register_vehicle(self, client):
        response = client.post("/customers/C3/vehicles", json={"makeModel": "Nissan Leaf", "licensePlate": "ev-42"})
        assert response.status_code == 201
        assert response.json()["licensePlate"] == "EV-42"
        assert len(client.get("/customers/C3/vehicles").json()) == 1


@pytest.mark.api
class TestAdminEmployees:
    """Tests for /admin/employees"""

    def test_load_and_availability(self, client, appointment_id):
        client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})
        assert client.get("/admin/employees/E7/load").json() == {"employeeId": "E7", "currentLoad": 1}
        assert client.get("/admin/employees/E404/load").status_code == 404

        availability = client.get("/admin/employees/availability", params={"date": "2025-11-12"}).json()
        by_id = {a["employeeId"]: a for a in availability}
        assert by_id["E7"]["currentAppointmentCount"] == 1
        assert by_id["E7"]["available"] is True

    def test_create_employee(self, client):
        response = client.post("/admin/employees", json={"firstName": "Kamal", "lastName": "Jay"})
        assert response.status_code == 201
        assert response.json()["fullName"] == "Kamal Jay"
        assert len(client.get("/admin/employees").json()) == 3

    def test_import_and_admin_dashboard(self, client):
        records = [
            {"customerId": "C9", "serviceName": "Oil Change", "date": "2025-10-01", "status": "Upcoming", "employeeId": "E8"},
            {"customerId": "C9", "name": "Rebuild", "startDate": "2025-09-01", "status": "ongoing", "employeeId": "E8"},
        ]
        response = client.post("/admin/work-items/import", json={"records": records})
        assert response.status_code == 201
        assert [r["status"] for r in response.json()] == ["ASSIGNED", "IN_PROGRESS"]

        stats = client.get("/admin/dashboard").json()
        assert stats["upcomingAppointments"] == 1
        assert stats["ongoingProjects"] == 1
        assert stats["totalVehicles"] == 2


@pytest.mark.api
class TestConcurrentUpdates:
    """Tests for the optimistic locking response"""

    def test_stale_write_returns_conflict(self, client, session_factory, appointment_id):
        from servicehub.domain.work_items.router import get_lifecycle
        from servicehub.domain.work_items.service import WorkItemLifecycle
        from servicehub.main import app

        stale_session = session_factory()
        try:
            stale = WorkItemLifecycle(stale_session)
            stale.get(appointment_id)
            client.post(f"/admin/work-items/{appointment_id}/assign", json={"employeeId": "E7"})

            app.dependency_overrides[get_lifecycle] = lambda: stale
            response = client.post(f"/admin/work-items/{appointment_id}/cancel")
            del app.dependency_overrides[get_lifecycle]

            assert response.status_code == 409
            assert response.json() == {
                "detail": "The work item was modified by another request. Reload and try again."
            }
            assert client.get(f"/admin/work-items/{appointment_id}").json()["status"] == "ASSIGNED"
        finally:
            stale_session.rollback()
            stale_session.close()
