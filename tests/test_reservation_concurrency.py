"""Concurrent writers against one resource, on a file-backed database so
every request gets its own connection."""

import threading

import pytest

from app.config import Settings

WRITERS = 8


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DATABASE_URL=f"sqlite:///{tmp_path / 'booking.db'}",
        ENVIRONMENT="test",
        LOG_LEVEL="WARNING",
    )


def run_together(calls):
    """Start every call at the same moment and return their status codes."""
    barrier = threading.Barrier(len(calls))
    statuses = [None] * len(calls)

    def worker(index, call):
        barrier.wait()
        statuses[index] = call().status_code

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return statuses


def test_only_one_of_many_overlapping_creates_succeeds(client, alice, bob, make_resource):
    resource = make_resource(alice)

    def reserve(minute):
        return lambda: client.post(
            "/v1/reservations",
            json={
                "resource_id": resource["id"],
                "start_time": f"2030-05-01T12:{minute:02d}:00Z",
                "end_time": "2030-05-01T13:30:00Z",
            },
            headers=bob,
        )

    statuses = run_together([reserve(minute) for minute in range(WRITERS)])

    assert sorted(statuses) == [201] + [409] * (WRITERS - 1)
    listing = client.get("/v1/reservations", params={"resourceID": resource["id"]}, headers=bob).json()
    assert listing["total"] == 1


def test_only_one_of_many_moves_into_a_slot_succeeds(client, alice, bob, make_resource, make_reservation):
    resource = make_resource(alice)
    reservations = [
        make_reservation(bob, resource["id"], f"2030-05-02T{hour:02d}:00:00Z", f"2030-05-02T{hour:02d}:30:00Z")
        for hour in range(WRITERS)
    ]

    def move(reservation):
        return lambda: client.patch(
            f"/v1/reservations/{reservation['id']}",
            json={"start_time": "2030-05-01T12:00:00Z", "end_time": "2030-05-01T13:00:00Z"},
            headers=bob,
        )

    statuses = run_together([move(r) for r in reservations])

    assert sorted(statuses) == [200] + [409] * (WRITERS - 1)
    moved = client.get(
        "/v1/reservations",
        params={"startsAfter": "2030-05-01T00:00:00Z", "endsBefore": "2030-05-01T23:59:59Z"},
        headers=bob,
    ).json()
    assert moved["total"] == 1


def test_writers_on_different_resources_do_not_conflict(client, alice, bob, make_resource):
    resources = [make_resource(alice, name=f"Room {n}") for n in range(WRITERS)]
    assert client.get("/v1/whoami", headers=bob).status_code == 200

    def reserve(resource):
        return lambda: client.post(
            "/v1/reservations",
            json={
                "resource_id": resource["id"],
                "start_time": "2030-05-01T12:00:00Z",
                "end_time": "2030-05-01T13:00:00Z",
            },
            headers=bob,
        )

    statuses = run_together([reserve(r) for r in resources])

    assert statuses == [201] * WRITERS
