# tests/test_entities.py

"""
Tests for centers, services, costs, clients and the dashboard.
"""

from conftest import results
from ledger_admin.database.models.center import Center
from ledger_admin.database.models.client import Client
from ledger_admin.database.models.cost import Cost
from ledger_admin.database.models.service import Service
from ledger_admin.database.models.transaction import Transaction


CLIENT_PAYLOAD = {
    "firstName": "Jane",
    "lastName": "Doe",
    "email": "jane.doe@example.com",
    "phoneNumber": "600000000",
    "birthdate": "1990-04-02T10:00:00",
    "zipcode": 28001,
}


def test_viewer_cannot_create_client(client, make_user, login, store):
    response = client.post("/client", headers=login(make_user("viewer")), json=CLIENT_PAYLOAD)
    assert response.status_code == 403
    assert response.get_json()["error"]["details"]["requiredPermission"] == "clients:create"
    assert Client.count(store) == 0


def test_worker_creates_client(client, make_user, login, store):
    response = client.post("/client", headers=login(make_user("worker")), json=CLIENT_PAYLOAD)
    assert response.status_code == 201
    body = results(response)
    assert body["firstName"] == "Jane"
    assert body["birthdate"] == "1990-04-02"
    assert Client.count(store) == 1


def test_clients_are_not_scoped(client, make_user, login, store):
    Client.create(store, {"first_name": "A", "last_name": "B", "email": "a@b.com"})
    worker = make_user("worker", assigned_centers=["Nowhere"])
    assert len(results(client.get("/client", headers=login(worker)))) == 1


def test_delete_all_clients(client, make_user, login, store):
    for n in range(3):
        Client.create(store, {"first_name": f"F{n}", "last_name": "L", "email": f"{n}@x.com"})
    headers = login(make_user("manager"))
    assert client.delete("/client", headers=headers).status_code == 403

    response = client.delete("/client", headers=login(make_user("admin")))
    assert response.status_code == 200
    assert results(response)["deletedCount"] == 3
    assert Client.count(store) == 0


def test_center_list_is_filtered_by_scope(client, make_user, login, store):
    for name in ("A", "B", "C"):
        Center.create(store, {"name": name})
    worker = make_user("worker", assigned_centers=["A", "C"])
    response = client.get("/center", headers=login(worker))
    assert sorted(c["name"] for c in results(response)) == ["A", "C"]
    assert response.get_json()["data"]["meta"]["total"] == 2

    everything = results(client.get("/center", headers=login(make_user("super_admin"))))
    assert len(everything) == 3


def test_center_detail_outside_scope_is_denied(client, make_user, login, store):
    center = Center.create(store, {"name": "B"})
    worker = make_user("worker", assigned_centers=["A"])
    response = client.get(f"/center/{center.id}", headers=login(worker))
    assert response.status_code == 403
    assert response.get_json()["error"]["details"]["assignedCenters"] == ["A"]


def test_center_rename_must_stay_in_scope(client, make_user, login, store):
    center = Center.create(store, {"name": "A"})
    admin = make_user("admin", assigned_centers=["A"])
    response = client.patch(f"/center/{center.id}", headers=login(admin), json={"name": "B"})
    assert response.status_code == 403
    assert Center.find_by_id(store, center.id).name == "A"


def test_only_super_admin_deletes_centers(client, make_user, login, store):
    center = Center.create(store, {"name": "A"})
    admin = make_user("admin", assigned_centers=["A"])
    assert client.delete(f"/center/{center.id}", headers=login(admin)).status_code == 403
    assert client.delete(f"/center/{center.id}", headers=login(make_user("super_admin"))).status_code == 200
    assert Center.count(store) == 0


def test_service_defaults_and_partial_update(client, make_user, login, store):
    manager = make_user("manager", assigned_services=["Massage"])
    headers = login(manager)

    created = client.post("/service", headers=headers, json={"name": "Massage"})
    assert created.status_code == 201
    body = results(created)
    assert (body["cost"], body["tax"]) == (0, 0)

    client.patch(f"/service/{body['id']}", headers=headers, json={"cost": 45.5})
    stored = Service.find_by_id(store, body["id"])
    assert stored.cost == 45.5
    assert stored.tax == 0


def test_service_list_is_filtered_by_scope(client, make_user, login, store):
    for name in ("S1", "S2"):
        Service.create(store, {"name": name})
    viewer = make_user("viewer", assigned_services=["S2"])
    assert [s["name"] for s in results(client.get("/service", headers=login(viewer)))] == ["S2"]


def test_manager_manages_costs_but_cannot_delete(client, make_user, login, store):
    headers = login(make_user("manager"))

    created = client.post("/costs", headers=headers, json={"name": "Rent"})
    assert created.status_code == 201
    cost_id = results(created)["id"]

    renamed = client.patch(f"/costs/{cost_id}", headers=headers, json={"name": "Office rent"})
    assert results(renamed)["name"] == "Office rent"

    assert client.delete(f"/costs/{cost_id}", headers=headers).status_code == 403
    assert Cost.count(store) == 1

    assert client.get("/costs/missing", headers=headers).status_code == 404


def test_dashboard_counts_visible_records(client, make_user, login, store):
    for name in ("A", "B"):
        Center.create(store, {"name": name})
        Transaction.create(store, {
            "index": 1, "date": "2024-01-01T00:00:00", "center": name, "center_name": name,
            "client": "c", "cost": 100, "worker": "w", "taxes": 10,
            "type_of_transaction": "income", "type_of_movement": "card", "frequency": "once",
            "type_of_client": "private", "service": "s", "service_name": None,
        })
    worker = make_user("worker", assigned_centers=["A"])

    body = results(client.get("/dashboard", headers=login(worker)))
    assert body["counts"]["transactions"] == 1
    assert body["counts"]["centers"] == 1
    assert body["totals"] == {"cost": 100.0, "taxes": 10.0}
    assert "users" not in body["counts"]


def test_permission_catalogue(client, make_user, login):
    body = results(client.get("/permissions", headers=login(make_user("viewer"))))
    assert "super_admin" in body["roles"]
