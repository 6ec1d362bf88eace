import pytest


@pytest.fixture
def logs_url(user):
    return f"/api/v1/users/{user['id']}/habits/logs"


def habit_url(user, habit):
    return f"/api/v1/users/{user['id']}/habits/{habit['id']}"


def test_completed_log_moves_schedule(client, logs_url, make_habit):
    habit = make_habit()
    r = client.post(logs_url, json={"task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00"})
    assert r.status_code == 201
    body = r.json()
    assert body["warnings"] == []
    assert body["log"]["status"] == "completed"
    assert body["log"]["source"] == "manual"
    assert body["log"]["tz"] == "Asia/Kolkata"
    assert body["log"]["local_date"] == "2024-01-01"
    assert body["habit"]["last_execution_date"] == "2024-01-01"
    assert body["habit"]["next_execution_date"] == "2024-01-08"


def test_local_date_follows_log_time_zone(client, logs_url, make_habit):
    habit = make_habit(frequency_of_task=1)
    body = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-01T20:00:00+00:00", "tz": "Asia/Kolkata",
    }).json()
    assert body["log"]["local_date"] == "2024-01-02"
    assert body["habit"]["next_execution_date"] == "2024-01-03"


def test_quantity_reaches_target(client, logs_url, user, make_habit):
    habit = make_habit(frequency_of_task=1, target_value=100, target_unit="km")
    client.post(logs_url, json={"task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00", "quantity": 95})
    body = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-02T09:00:00", "quantity": 10,
    }).json()
    assert body["habit"]["current_progress"] == 105
    assert body["habit"]["target_achieved"] is True
    assert body["habit"]["target_achieved_at"].startswith("2024-03-01T12:00:00")

    # achieved targets stop accumulating
    body = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-03T09:00:00", "quantity": 5,
    }).json()
    assert body["habit"]["current_progress"] == 105
    assert body["habit"]["next_execution_date"] == "2024-01-04"


@pytest.mark.parametrize("status", ["skipped", "failed"])
def test_non_completed_logs_leave_habit(client, logs_url, make_habit, status):
    habit = make_habit(target_value=10, target_unit="km")
    body = client.post(logs_url, json={
        "task_id": habit["id"], "status": status, "occurred_at": "2024-01-01T09:00:00", "quantity": 4,
    }).json()
    assert body["log"]["status"] == status
    assert body["habit"]["next_execution_date"] == "2024-01-01"
    assert body["habit"]["current_progress"] == 0


def test_same_day_log_replaces_previous(client, logs_url, make_habit):
    habit = make_habit()
    first = client.post(logs_url, json={
        "task_id": habit["id"], "status": "skipped", "occurred_at": "2024-01-01T07:00:00", "note": "rain",
    }).json()
    second = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-01T18:00:00",
    }).json()
    assert second["log"]["id"] == first["log"]["id"]
    assert second["log"]["status"] == "completed"
    assert second["log"]["note"] is None

    logs = client.get(logs_url, params={"task_id": habit["id"]}).json()
    assert len(logs) == 1


def test_negative_quantity_is_a_warning(client, logs_url, make_habit):
    habit = make_habit(target_value=10, target_unit="km")
    r = client.post(logs_url, json={"task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00", "quantity": -3})
    assert r.status_code == 201
    body = r.json()
    assert len(body["warnings"]) == 1
    assert body["habit"]["current_progress"] == 0
    assert body["habit"]["next_execution_date"] == "2024-01-08"


def test_bad_frequency_keeps_schedule_but_counts_progress(client, logs_url, make_habit):
    habit = make_habit(frequency_of_task="weekly", target_value=10, target_unit="km")
    body = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00", "quantity": 4,
    }).json()
    assert body["habit"]["last_execution_date"] is None
    assert body["habit"]["next_execution_date"] == "2024-01-01"
    assert body["habit"]["current_progress"] == 4


def test_metadata_round_trips(client, logs_url, make_habit):
    habit = make_habit()
    body = client.post(logs_url, json={
        "task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00",
        "source": "reminder", "metadata": {"mood": "great"},
    }).json()
    assert body["log"]["source"] == "reminder"
    assert body["log"]["metadata"] == {"mood": "great"}


@pytest.mark.parametrize("payload,detail", [
    ({}, "task_id is required"),
    ({"status": "done"}, "Invalid status. Allowed: completed, skipped, failed"),
    ({"source": "cron"}, "Invalid source. Allowed: manual, reminder, import, automation"),
])
def test_rejects_bad_payloads(client, logs_url, make_habit, payload, detail):
    habit = make_habit()
    if payload:
        payload["task_id"] = habit["id"]
    r = client.post(logs_url, json=payload)
    assert r.status_code == 400
    assert r.json()["detail"] == detail


def test_unknown_habit(client, logs_url):
    r = client.post(logs_url, json={"task_id": 999})
    assert r.status_code == 404
    assert r.json()["detail"] == "Habit 999 not found"


def test_habit_of_another_user(client, make_habit):
    habit = make_habit()
    other = client.post("/api/v1/users", json={"name": "Other", "email": "other@example.com"}).json()
    r = client.post(f"/api/v1/users/{other['id']}/habits/logs", json={"task_id": habit["id"]})
    assert r.status_code == 404


def test_unknown_time_zone(client, logs_url, make_habit):
    habit = make_habit()
    r = client.post(logs_url, json={"task_id": habit["id"], "tz": "Mars/Olympus"})
    assert r.status_code == 400
    assert r.json()["detail"] == "Unknown time zone: Mars/Olympus"
    assert client.get(logs_url).json() == []


def test_list_newest_first_with_filter_and_limit(client, logs_url, make_habit):
    run = make_habit(frequency_of_task=1)
    read = make_habit(name="Read", frequency_of_task=1)
    for day in ("01", "02", "03"):
        client.post(logs_url, json={"task_id": run["id"], "occurred_at": f"2024-01-{day}T09:00:00"})
    client.post(logs_url, json={"task_id": read["id"], "occurred_at": "2024-01-05T09:00:00"})

    logs = client.get(logs_url).json()
    assert [l["local_date"] for l in logs] == ["2024-01-05", "2024-01-03", "2024-01-02", "2024-01-01"]

    run_logs = client.get(logs_url, params={"task_id": run["id"], "limit": 2}).json()
    assert [l["local_date"] for l in run_logs] == ["2024-01-03", "2024-01-02"]

    assert client.get(logs_url, params={"limit": 0}).status_code == 422


def test_delete_log_keeps_habit_state(client, logs_url, user, make_habit):
    habit = make_habit()
    log = client.post(logs_url, json={"task_id": habit["id"], "occurred_at": "2024-01-01T09:00:00"}).json()["log"]

    r = client.delete(f"{logs_url}/{log['id']}")
    assert r.json() == {"status": "success", "id": log["id"]}
    assert client.get(logs_url).json() == []
    assert client.get(habit_url(user, habit)).json()["next_execution_date"] == "2024-01-08"

    assert client.delete(f"{logs_url}/{log['id']}").status_code == 404
