"""Tests for batched nickname resolution."""

import uuid

from meari.db.models import ANONYMOUS_NICKNAME
from meari.nicknames.generator import ADJECTIVES, NOUNS, generate_random_nickname
from meari.nicknames.resolver import NicknameResolver


def _ids(n):
    return [str(uuid.uuid4()) for _ in range(n)]


def test_generated_nickname_is_adjective_noun():
    adjective, noun = generate_random_nickname().split(" ")
    assert adjective in ADJECTIVES
    assert noun in NOUNS


def test_resolve_creates_missing_in_one_batch(fake_db, user_id):
    targets = _ids(5)
    fake_db.seed("user_nicknames", {"assigner_id": user_id, "target_id": targets[0], "nickname": "바다의 고래"})

    result = NicknameResolver(fake_db, user_id).resolve_nicknames(targets)

    assert set(result) == set(targets)
    assert result[targets[0]] == "바다의 고래"
    assert fake_db.queries("user_nicknames", "select") == [("user_nicknames", "select")]
    assert fake_db.queries("user_nicknames", "insert") == [("user_nicknames", "insert")]
    assert len(fake_db.tables["user_nicknames"]) == 5


def test_resolve_existing_makes_no_write(fake_db, user_id):
    targets = _ids(3)
    fake_db.seed("user_nicknames", *[
        {"assigner_id": user_id, "target_id": t, "nickname": f"별빛의 {i}"} for i, t in enumerate(targets)
    ])

    result = NicknameResolver(fake_db, user_id).resolve_nicknames(targets)

    assert result == {t: f"별빛의 {i}" for i, t in enumerate(targets)}
    assert fake_db.queries("user_nicknames", "insert") == []


def test_resolve_is_stable_across_calls(fake_db, user_id):
    targets = _ids(4)
    resolver = NicknameResolver(fake_db, user_id)

    first = resolver.resolve_nicknames(targets)
    fake_db.reset_log()
    second = resolver.resolve_nicknames(targets)

    assert first == second
    assert fake_db.queries("user_nicknames", "insert") == []


def test_resolve_deduplicates_ids(fake_db, user_id):
    target = str(uuid.uuid4())
    result = NicknameResolver(fake_db, user_id).resolve_nicknames([target, target, target])
    assert list(result) == [target]
    assert len(fake_db.tables["user_nicknames"]) == 1


def test_resolve_empty_makes_no_query(fake_db, user_id):
    assert NicknameResolver(fake_db, user_id).resolve_nicknames([]) == {}
    assert fake_db.executed == []


def test_resolve_without_viewer_returns_sentinel(fake_db):
    targets = _ids(2)
    assert NicknameResolver(fake_db, None).resolve_nicknames(targets) == dict.fromkeys(targets, ANONYMOUS_NICKNAME)
    assert fake_db.executed == []


def test_insert_conflict_falls_back_to_sentinel(fake_db, user_id):
    targets = _ids(3)
    fake_db.failures[("user_nicknames", "insert")] = "duplicate key value violates unique constraint"

    result = NicknameResolver(fake_db, user_id).resolve_nicknames(targets)

    assert result == dict.fromkeys(targets, ANONYMOUS_NICKNAME)


def test_insert_failure_keeps_existing_nicknames(fake_db, user_id):
    known, new = _ids(2)
    fake_db.seed("user_nicknames", {"assigner_id": user_id, "target_id": known, "nickname": "바다의 고래"})
    fake_db.failures[("user_nicknames", "insert")] = "unavailable"

    result = NicknameResolver(fake_db, user_id).resolve_nicknames([known, new])

    assert result == {known: "바다의 고래", new: ANONYMOUS_NICKNAME}


def test_read_failure_returns_sentinel_for_all(fake_db, user_id):
    targets = _ids(2)
    fake_db.failures[("user_nicknames", "select")] = "timeout"

    result = NicknameResolver(fake_db, user_id).resolve_nicknames(targets)

    assert result == dict.fromkeys(targets, ANONYMOUS_NICKNAME)
    assert fake_db.queries("user_nicknames", "insert") == []


def test_nicknames_are_private_per_viewer(fake_db):
    viewer_a, viewer_b, target = _ids(3)
    fake_db.seed("user_nicknames", {"assigner_id": viewer_a, "target_id": target, "nickname": "숲속의 여우"})

    result = NicknameResolver(fake_db, viewer_b).resolve_nicknames([target])

    assert result[target] != ANONYMOUS_NICKNAME
    assert len([r for r in fake_db.tables["user_nicknames"] if r["target_id"] == target]) == 2


def test_get_nickname_for_user_creates_once(fake_db, user_id):
    target = str(uuid.uuid4())
    resolver = NicknameResolver(fake_db, user_id)

    first = resolver.get_nickname_for_user(target)
    second = resolver.get_nickname_for_user(target)

    assert first == second
    assert fake_db.queries("user_nicknames", "insert") == [("user_nicknames", "insert")]


def test_resolve_endpoint(client, fake_db, user_id, auth_header):
    targets = _ids(3)
    fake_db.seed("user_nicknames", {"assigner_id": user_id, "target_id": targets[1], "nickname": "바다의 고래"})

    resp = client.post("/api/v1/nicknames/resolve", json={"user_ids": targets}, headers=auth_header)

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert set(data) == set(targets)
    assert data[targets[1]] == "바다의 고래"


def test_resolve_endpoint_requires_auth(client):
    resp = client.post("/api/v1/nicknames/resolve", json={"user_ids": []})
    assert resp.status_code == 401
    assert resp.json()["status"] == "error"


def test_single_nickname_endpoint(client, fake_db, user_id, auth_header):
    target = str(uuid.uuid4())
    fake_db.seed("user_nicknames", {"assigner_id": user_id, "target_id": target, "nickname": "달빛의 토끼"})

    resp = client.get(f"/api/v1/nicknames/{target}", headers=auth_header)

    assert resp.status_code == 200
    assert resp.json()["data"] == {"user_id": target, "nickname": "달빛의 토끼"}


def test_my_nickname_from_profile(client, fake_db, user_id, auth_header):
    fake_db.seed("profiles", {"user_id": user_id, "username": "푸른 고래"})

    resp = client.get("/api/v1/nicknames/me", headers=auth_header)

    assert resp.status_code == 200
    assert resp.json()["data"]["nickname"] == "푸른 고래"


def test_my_nickname_falls_back_to_random(client, auth_header):
    resp = client.get("/api/v1/nicknames/me", headers=auth_header)
    adjective, noun = resp.json()["data"]["nickname"].split(" ")
    assert adjective in ADJECTIVES
    assert noun in NOUNS
