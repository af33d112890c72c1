"""Translation Routes — CMS keys, bulk insert, language reads, soft delete.

Invariants:
    - key is unique: a duplicate is 409
    - A bulk request with any duplicate or existing key writes nothing
    - Language reads need an identity and only see published, live rows
    - Delete is soft and unpublishes
    - Every editor action refuses callers without admin|org|teacher (403)
"""

import pytest

from tests.services.api_helpers import ADMIN, STUDENT, TEACHER_U1, as_user, payload


async def _add(client, key="home.title", english="Home", headers=ADMIN, **extra):
    return await client.post(
        "/api/translations/addCmsKey",
        json={"key": key, "english": english, **extra},
        headers=headers,
    )


async def test_add_key_sets_audit_fields(client):
    res = await _add(client, hindi="घर")
    assert res.status_code == 201
    row = payload(res)
    assert row["key"] == "home.title"
    assert row["hindi"] == "घर"
    assert row["marathi"] is None
    assert row["is_published"] is False
    assert row["created_by"] == row["updated_by"] == "A1"


async def test_duplicate_key_is_409(client, store):
    await _add(client)
    res = await _add(client, english="Homepage")
    assert res.status_code == 409
    assert res.json()["message"] == "Translation with key 'home.title' already exists"
    assert len(store.rows("translations")) == 1


async def test_add_requires_english(client):
    res = await client.post(
        "/api/translations/addCmsKey", json={"key": "k"}, headers=ADMIN,
    )
    assert res.status_code == 400
    assert res.json()["message"] == "Missing required field: english is required"


async def test_add_as_student_is_403(client):
    res = await _add(client, headers=STUDENT)
    assert res.status_code == 403
    assert res.json()["message"] == "Only admin, org, or teacher roles can create translations"


class TestBulkAdd:

    async def test_inserts_all_in_one_request(self, client, store):
        res = await client.post(
            "/api/translations/bulkAddCmsKey",
            json={"translations": [
                {"key": "a", "english": "A"},
                {"key": "b", "english": "B", "is_published": True},
            ]},
            headers=TEACHER_U1,
        )
        assert res.status_code == 201
        body = res.json()
        assert body["message"] == "2 translations created successfully"
        assert [r["key"] for r in body["data"]] == ["a", "b"]
        assert len(store.requests_to("translations", "POST")) == 1

    async def test_duplicate_in_batch_writes_nothing(self, client, store):
        res = await client.post(
            "/api/translations/bulkAddCmsKey",
            json={"translations": [
                {"key": "a", "english": "A"}, {"key": "a", "english": "A2"},
            ]},
            headers=ADMIN,
        )
        assert res.status_code == 400
        assert store.rows("translations") == []

    async def test_existing_key_writes_nothing(self, client, store):
        store.seed("translations", key="b", english="B")
        res = await client.post(
            "/api/translations/bulkAddCmsKey",
            json={"translations": [
                {"key": "a", "english": "A"}, {"key": "b", "english": "B"},
            ]},
            headers=ADMIN,
        )
        assert res.status_code == 409
        assert res.json()["message"] == "The following keys already exist: b"
        assert [r["key"] for r in store.rows("translations")] == ["b"]

    async def test_item_without_english_is_400(self, client):
        res = await client.post(
            "/api/translations/bulkAddCmsKey",
            json={"translations": [{"key": "a"}]},
            headers=ADMIN,
        )
        assert res.status_code == 400
        assert res.json()["message"] == "All translation items must have key and english fields"

    async def test_empty_list_is_400(self, client):
        res = await client.post(
            "/api/translations/bulkAddCmsKey", json={"translations": []}, headers=ADMIN,
        )
        assert res.status_code == 400


class TestLanguageRead:

    async def test_only_published_live_rows(self, client, store):
        store.seed("translations", key="a", english="A", hindi="ए", is_published=True)
        store.seed("translations", key="b", english="B", is_published=False)
        store.seed("translations", key="c", english="C", is_published=True, is_deleted=True)

        res = await client.get("/api/translations/hindi", headers=as_user("U5"))

        assert res.status_code == 200
        assert res.json()["message"] == "Hindi translations retrieved successfully"
        assert res.json()["data"] == [{"key": "a", "hindi": "ए"}]

    async def test_anonymous_is_401(self, client):
        res = await client.get("/api/translations/english")
        assert res.status_code == 401

    async def test_unknown_language_is_400(self, client):
        res = await client.get("/api/translations/french", headers=as_user("U5"))
        assert res.status_code == 400

    async def test_all_translations_is_not_a_language(self, client, store):
        store.seed("translations", key="c", english="C", is_deleted=True)
        res = await client.get("/api/translations/allTranslations", headers=ADMIN)
        assert res.status_code == 200
        assert [r["key"] for r in res.json()["data"]] == ["c"]


async def test_update_records_editor_and_rejects_taken_key(client, store):
    row = store.seed("translations", key="a", english="A", created_by="A1")
    store.seed("translations", key="b", english="B")
    url = f"/api/translations/updateTranslation/{row['id']}"

    res = await client.put(url, json={"english": "Alpha"}, headers=TEACHER_U1)
    updated = payload(res)
    assert updated["english"] == "Alpha"
    assert updated["updated_by"] == "U1"
    assert updated["updated_at"]

    res = await client.put(url, json={"key": "b"}, headers=TEACHER_U1)
    assert res.status_code == 409


async def test_update_missing_translation_is_404(client):
    res = await client.put(
        "/api/translations/updateTranslation/nope", json={"english": "x"}, headers=ADMIN,
    )
    assert res.status_code == 404


async def test_delete_is_soft_and_unpublishes(client, store):
    row = store.seed("translations", key="a", english="A", is_published=True)
    url = f"/api/translations/deleteTranslationKey/{row['id']}"

    res = await client.delete(url, headers=ADMIN)
    assert payload(res) == {"id": row["id"]}
    stored = store.get("translations", row["id"])
    assert stored["is_deleted"] is True
    assert stored["is_published"] is False
    assert stored["updated_by"] == "A1"

    res = await client.delete(url, headers=ADMIN)
    assert res.status_code == 404


EDITOR_ONLY_CALLS = [
    ("post", "/api/translations/bulkAddCmsKey",
     {"translations": [{"key": "a", "english": "A"}]}, "create"),
    ("get", "/api/translations/allTranslations", None, "view all"),
    ("put", "/api/translations/updateTranslation/{id}", {"english": "X"}, "update"),
    ("delete", "/api/translations/deleteTranslationKey/{id}", None, "delete"),
]


@pytest.mark.parametrize("caller", [STUDENT, as_user("U5", "user")])
@pytest.mark.parametrize("method, url, body, action", EDITOR_ONLY_CALLS)
async def test_non_editor_is_403_on_every_editor_action(
    client, store, caller, method, url, body, action,
):
    row = store.seed("translations", key="k", english="K", is_published=True)
    kwargs = {"headers": caller}
    if body is not None:
        kwargs["json"] = body

    res = await client.request(method.upper(), url.format(id=row["id"]), **kwargs)

    assert res.status_code == 403
    assert res.json()["message"] == f"Only admin, org, or teacher roles can {action} translations"
    assert store.rows("translations") == [row]
