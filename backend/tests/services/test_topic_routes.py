"""Topic Routes — names unique within a subject, plus topics across an exam.

Invariants:
    - Same name twice in one subject -> 409; same name in another subject is fine
    - A soft-deleted topic still holds its name (matches the store constraint)
    - getTopicsByExam annotates each topic with its subject
"""

from tests.services.api_helpers import STUDENT, TEACHER_U1, TEACHER_U2, payload


async def _create_topic(client, name, subject_id, headers=TEACHER_U1):
    return await client.post(
        "/api/topics/createTopic",
        json={"name": name, "subject_id": subject_id},
        headers=headers,
    )


async def test_duplicate_name_in_subject_is_409(client, store):
    res = await _create_topic(client, "Limits", "s1")
    assert res.status_code == 201

    res = await _create_topic(client, "Limits", "s1", headers=TEACHER_U2)
    assert res.status_code == 409
    assert res.json()["message"] == 'A topic with the name "Limits" already exists for this subject'
    assert len(store.rows("topics")) == 1


async def test_same_name_in_other_subject_is_allowed(client):
    assert (await _create_topic(client, "Limits", "s1")).status_code == 201
    assert (await _create_topic(client, "Limits", "s2")).status_code == 201


async def test_deleted_topic_still_holds_its_name(client, store):
    store.seed(
        "topics", name="Limits", subject_id="s1", user_id="U1",
        is_active=False, is_deleted=True,
    )
    res = await _create_topic(client, "Limits", "s1")
    assert res.status_code == 409


async def test_store_unique_violation_maps_to_409(client, store):
    """A racing duplicate that slips past the pre-check still answers 409."""
    store.seed("topics", name="Limits", subject_id="s1", user_id="U1")
    store.blind_reads.add("topics")

    res = await _create_topic(client, "Limits", "s1")

    assert res.status_code == 409
    assert res.json()["message"] == 'A topic with the name "Limits" already exists for this subject'


async def test_topics_by_subject(client, store):
    store.seed("topics", name="Limits", subject_id="s1", user_id="U1")
    store.seed("topics", name="Vectors", subject_id="s2", user_id="U1")

    res = await client.get("/api/topics/getTopicsBySubject/s1", headers=STUDENT)
    assert [t["name"] for t in payload(res)["topics"]] == ["Limits"]


async def test_topics_by_exam_carry_their_subject(client, store):
    calculus = store.seed("subjects", name="Calculus", exam_id="e1", user_id="U1")
    store.seed("subjects", name="Elsewhere", exam_id="e2", user_id="U1")
    store.seed("topics", name="Limits", subject_id=calculus["id"], user_id="U1")
    store.seed(
        "topics", name="Gone", subject_id=calculus["id"], user_id="U1",
        is_active=False, is_deleted=True,
    )

    res = await client.get("/api/topics/getTopicsByExam/e1", headers=STUDENT)
    listing = payload(res)
    assert listing["count"] == 1
    (topic,) = listing["topics"]
    assert topic["name"] == "Limits"
    assert topic["subject"]["name"] == "Calculus"


async def test_topics_by_exam_without_subjects(client):
    res = await client.get("/api/topics/getTopicsByExam/empty", headers=STUDENT)
    assert payload(res) == {"topics": [], "count": 0}


async def test_topics_by_user_and_delete(client, store):
    topic = store.seed("topics", name="Limits", subject_id="s1", user_id="U1")
    store.seed("topics", name="Other", subject_id="s1", user_id="U2")

    res = await client.get("/api/topics/getTopicsByUser", headers=TEACHER_U1)
    assert [t["name"] for t in payload(res)["topics"]] == ["Limits"]

    res = await client.delete(f"/api/topics/deleteTopic/{topic['id']}", headers=TEACHER_U2)
    assert res.status_code == 403

    res = await client.delete(f"/api/topics/deleteTopic/{topic['id']}", headers=TEACHER_U1)
    assert res.status_code == 200
    res = await client.get(f"/api/topics/getTopic/{topic['id']}", headers=STUDENT)
    assert res.status_code == 404
