"""HTTP tests for the mess tracker API."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from mess_tracker.api.app import create_app
from mess_tracker.containers import AppContainer
from mess_tracker.domain.catalog import ExtraItem, MealPlan
from mess_tracker.domain.models import UserRecord
from tests.conftest import bearer, today


@pytest.fixture
def client(container: AppContainer) -> TestClient:
    return TestClient(create_app(container))


def _entry_body(user: UserRecord, **overrides: object) -> dict[str, object]:
    body: dict[str, object] = {
        "userId": str(user.id),
        "entryDate": today().isoformat(),
        "mealType": "lunch",
        "dishName": "Rajma Chawal",
        "cost": 60,
    }
    body.update(overrides)
    return body


def test_health(client: TestClient, container: AppContainer) -> None:
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {
        "status": "ok",
        "environment": container.settings.environment,
    }


def test_login_normalizes_code_and_verify(
    client: TestClient, student: UserRecord
) -> None:
    response = client.post("/auth/login", json={"loginCode": "rahu002"})

    assert response.status_code == 200
    data = response.json()
    assert data["user"]["loginCode"] == "RAHU002"
    assert data["user"]["roomNumber"] == "B202"

    verify = client.post(
        "/auth/verify", headers={"Authorization": f"Bearer {data['token']}"}
    )
    assert verify.status_code == 200
    assert verify.json()["user"]["id"] == str(student.id)


def test_login_unknown_code(client: TestClient) -> None:
    response = client.post("/auth/login", json={"loginCode": "NOPE999"})

    assert response.status_code == 401
    assert response.json() == {
        "error": "Access Denied",
        "message": "Invalid login code",
    }


def test_login_rejects_malformed_code(client: TestClient) -> None:
    response = client.post("/auth/login", json={"loginCode": "ab-1"})

    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"
    assert "details" in response.json()


def test_missing_token_is_rejected(client: TestClient) -> None:
    response = client.get("/users/profile")

    assert response.status_code == 401
    assert response.json()["message"] == "Access denied. No token provided."


def test_refresh_accepts_expired_token(
    client: TestClient, container: AppContainer, student: UserRecord
) -> None:
    expired = container.auth_service.codec.encode(
        {"user_id": str(student.id), "login_code": student.login_code},
        timedelta(seconds=-10),
    )
    headers = {"Authorization": f"Bearer {expired}"}

    assert client.post("/auth/verify", headers=headers).status_code == 401
    response = client.post("/auth/refresh", headers=headers)
    assert response.status_code == 200
    assert response.json()["token"] != expired


def test_student_cannot_use_admin_routes(
    client: TestClient, container: AppContainer, student: UserRecord
) -> None:
    response = client.get("/users", headers=bearer(container, student))

    assert response.status_code == 403
    assert response.json() == {
        "error": "Forbidden",
        "message": "Admin access required",
    }


def test_user_management_flow(
    client: TestClient, container: AppContainer, admin: UserRecord
) -> None:
    headers = bearer(container, admin)

    created = client.post(
        "/users",
        json={"name": "Priya Patel", "roomNumber": "C303", "loginCode": "priy003"},
        headers=headers,
    )
    assert created.status_code == 201
    user = created.json()["user"]
    assert user["loginCode"] == "PRIY003"

    duplicate = client.post(
        "/users",
        json={"name": "Someone", "roomNumber": "C304", "loginCode": "PRIY003"},
        headers=headers,
    )
    assert duplicate.status_code == 409

    students = client.get("/users/students", headers=headers).json()
    assert students["count"] == 1
    assert students["students"][0]["name"] == "Priya Patel"

    updated = client.put(
        f"/users/{user['id']}", json={"roomNumber": "D101"}, headers=headers
    )
    assert updated.json()["user"]["roomNumber"] == "D101"

    deleted = client.delete(f"/users/{user['id']}", headers=headers)
    assert deleted.json() == {"message": "User deactivated successfully"}
    assert client.get("/users", headers=headers).json()["count"] == 1


def test_admin_cannot_be_deleted(
    client: TestClient, container: AppContainer, admin: UserRecord
) -> None:
    response = client.delete(f"/users/{admin.id}", headers=bearer(container, admin))

    assert response.status_code == 403
    assert response.json()["message"] == "Cannot delete admin users"


def test_deactivated_user_token_is_rejected(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    headers = bearer(container, student)
    client.delete(f"/users/{student.id}", headers=bearer(container, admin))

    response = client.get("/users/profile", headers=headers)

    assert response.status_code == 401


def test_catalog_is_public(
    client: TestClient, double_plan: MealPlan, extra_roti: ExtraItem
) -> None:
    plans = client.get("/meal-plans").json()["plans"]
    items = client.get("/extra-items", params={"category": "roti"}).json()["items"]

    assert plans[0]["mealTypes"] == ["lunch", "dinner"]
    assert items[0]["name"] == "Extra Roti"
    assert client.get("/extra-items", params={"category": "dal"}).json()["items"] == []


def test_meal_entry_uses_subscription(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
    double_plan: MealPlan,
    extra_roti: ExtraItem,
) -> None:
    subscription = container.subscription_service.create_subscription(
        actor=student,
        meal_plan_id=double_plan.id,
        start_date=today() - timedelta(days=1),
        end_date=today() + timedelta(days=28),
    )

    response = client.post(
        "/meal-entries",
        json=_entry_body(
            student, extras=[{"extraItemId": str(extra_roti.id), "quantity": 1}]
        ),
        headers=bearer(container, admin),
    )

    assert response.status_code == 201
    entry = response.json()["entry"]
    assert entry["entryType"] == "subscription"
    assert entry["cost"] == 0
    assert entry["totalCost"] == 10
    assert entry["subscriptionId"] == str(subscription.id)
    assert entry["extras"][0]["name"] == "Extra Roti"

    active = client.get(
        f"/subscriptions/user/{student.id}/active", headers=bearer(container, admin)
    ).json()
    assert active["subscription"]["remainingMeals"] == 59


def test_duplicate_meal_entry_conflicts(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    headers = bearer(container, admin)
    first = client.post("/meal-entries", json=_entry_body(student), headers=headers)
    second = client.post("/meal-entries", json=_entry_body(student), headers=headers)

    assert first.status_code == 201
    assert first.json()["entry"]["entryType"] == "standalone"
    assert second.status_code == 409
    assert second.json()["error"] == "Conflict"


def test_meal_entry_rejects_future_date(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    tomorrow = (today() + timedelta(days=1)).isoformat()

    response = client.post(
        "/meal-entries",
        json=_entry_body(student, entryDate=tomorrow),
        headers=bearer(container, admin),
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Validation Error"


def test_meal_entry_rejects_cost_over_limit(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    response = client.post(
        "/meal-entries",
        json=_entry_body(student, cost=10001),
        headers=bearer(container, admin),
    )

    assert response.status_code == 400


def test_student_sees_only_own_entries(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    admin_headers = bearer(container, admin)
    own = client.post(
        "/meal-entries", json=_entry_body(student), headers=admin_headers
    ).json()["entry"]
    other = client.post(
        "/meal-entries", json=_entry_body(admin), headers=admin_headers
    ).json()["entry"]
    student_headers = bearer(container, student)

    listed = client.get("/meal-entries", headers=student_headers).json()
    assert [entry["id"] for entry in listed["entries"]] == [own["id"]]
    assert listed["pagination"]["totalCount"] == 1

    forbidden = client.get(f"/meal-entries/{other['id']}", headers=student_headers)
    assert forbidden.status_code == 403
    assert forbidden.json()["message"] == "You can only access your own meal entries"

    everyone = client.get("/meal-entries/admin/all", headers=admin_headers).json()
    assert everyone["pagination"]["totalCount"] == 2
    assert {entry["user"]["name"] for entry in everyone["entries"]} == {
        "Rahul Sharma",
        "Admin User",
    }


def test_entry_delete_and_restore(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    headers = bearer(container, admin)
    entry = client.post(
        "/meal-entries", json=_entry_body(student), headers=headers
    ).json()["entry"]

    deleted = client.delete(f"/meal-entries/{entry['id']}", headers=headers)
    assert deleted.status_code == 200
    assert client.get(f"/meal-entries/{entry['id']}", headers=headers).status_code == (
        404
    )

    restored = client.patch(f"/meal-entries/{entry['id']}/restore", headers=headers)
    assert restored.status_code == 200
    assert restored.json()["entry"]["isActive"] is True


def test_spending_reports(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    admin_headers = bearer(container, admin)
    client.post("/meal-entries", json=_entry_body(student), headers=admin_headers)
    client.post(
        "/meal-entries",
        json=_entry_body(student, mealType="dinner", cost=40),
        headers=admin_headers,
    )
    student_headers = bearer(container, student)

    summary = client.get(
        f"/meal-entries/user/{student.id}/summary", headers=student_headers
    ).json()["summary"]
    assert summary["overallTotal"] == 100
    assert summary["overallMeals"] == 2

    dishes = client.get(
        f"/meal-entries/user/{student.id}/dishes", headers=student_headers
    ).json()["dishes"]
    assert dishes[0] == {
        "dishName": "Rajma Chawal",
        "count": 2,
        "totalCost": 100,
        "avgCost": 50,
        "lastOrdered": today().isoformat(),
    }

    monthly = client.get(
        f"/meal-entries/user/{student.id}/monthly", headers=student_headers
    ).json()["monthly"]
    assert monthly == [
        {"month": today().strftime("%Y-%m"), "totalMeals": 2, "totalCost": 100}
    ]


def test_reports_of_other_users_are_forbidden(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
) -> None:
    response = client.get(
        f"/meal-entries/user/{admin.id}/summary", headers=bearer(container, student)
    )

    assert response.status_code == 403


def test_inverted_date_range_is_rejected(
    client: TestClient, container: AppContainer, student: UserRecord
) -> None:
    response = client.get(
        "/meal-entries",
        params={"startDate": "2024-05-10", "endDate": "2024-05-01"},
        headers=bearer(container, student),
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Start date must be before end date"


def test_subscription_lifecycle(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
    double_plan: MealPlan,
) -> None:
    student_headers = bearer(container, student)
    created = client.post(
        "/subscriptions",
        json={
            "mealPlanId": str(double_plan.id),
            "startDate": today().isoformat(),
            "endDate": (today() + timedelta(days=29)).isoformat(),
            "amountPaid": 1000,
        },
        headers=student_headers,
    )
    assert created.status_code == 201
    subscription = created.json()["subscription"]
    assert subscription["status"] == "active"
    assert subscription["remainingMeals"] == 60
    assert subscription["balanceDue"] == 3600
    assert subscription["mealPlan"]["name"] == "Mini Thali (Double)"

    overlapping = client.post(
        "/subscriptions",
        json={
            "mealPlanId": str(double_plan.id),
            "startDate": (today() + timedelta(days=5)).isoformat(),
            "endDate": (today() + timedelta(days=35)).isoformat(),
        },
        headers=student_headers,
    )
    assert overlapping.status_code == 400

    mine = client.get("/subscriptions/my-subscriptions", headers=student_headers)
    assert len(mine.json()["subscriptions"]) == 1

    cancelled = client.patch(
        f"/subscriptions/{subscription['id']}/cancel", headers=student_headers
    )
    assert cancelled.json()["subscription"]["status"] == "cancelled"

    stats = client.get("/subscriptions/stats", headers=bearer(container, admin))
    assert stats.json()["stats"]["cancelledSubscriptions"] == 1
    assert stats.json()["stats"]["totalSubscriptions"] == 1


def test_admin_records_payment(
    client: TestClient,
    container: AppContainer,
    admin: UserRecord,
    student: UserRecord,
    double_plan: MealPlan,
) -> None:
    subscription = container.subscription_service.create_subscription(
        actor=student,
        meal_plan_id=double_plan.id,
        start_date=today(),
        end_date=today() + timedelta(days=29),
    )

    response = client.patch(
        f"/subscriptions/{subscription.id}/payment",
        json={"amountPaid": 4600},
        headers=bearer(container, admin),
    )

    assert response.status_code == 200
    assert response.json()["subscription"]["balanceDue"] == 0
