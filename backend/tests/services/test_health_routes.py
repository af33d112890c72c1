"""Health Routes — liveness always 200, readiness follows the remote store.

Also checks the security headers, which every response carries, including
error envelopes and the catch-all 500.
"""

from examhub.api.dependencies import get_exam_service
from examhub.main import app
from tests.services.api_helpers import STUDENT, as_user


async def test_liveness(client):
    res = await client.get("/health")
    assert res.status_code == 200
    body = res.json()
    assert body["status"] == "Success"
    assert body["message"] == "Server is running"
    assert body["data"] == []


async def test_readiness_when_store_reachable(client):
    res = await client.get("/health/ready")
    assert res.status_code == 200
    assert res.json()["data"] == [{"checks": {"remote_store": "healthy"}}]


async def test_readiness_when_store_down(client, store):
    store.fail_next = True
    res = await client.get("/health/ready")
    assert res.status_code == 503
    assert res.json()["status"] == "Failure"


def _assert_security_headers(res):
    assert res.headers["x-content-type-options"] == "nosniff"
    assert res.headers["x-frame-options"] == "SAMEORIGIN"
    assert res.headers["referrer-policy"] == "same-origin"
    assert "default-src 'self'" in res.headers["content-security-policy"]


async def test_security_headers_on_every_response(client):
    _assert_security_headers(await client.get("/health"))
    _assert_security_headers(await client.get("/api/nowhere"))
    _assert_security_headers(await client.get("/api/exams/getAllExams", headers=STUDENT))
    _assert_security_headers(
        await client.get("/api/exams/getAllExams", headers=as_user("U1", "user")),
    )


async def test_security_headers_on_unhandled_500(client):
    class Broken:
        async def list_active(self, **criteria):
            raise RuntimeError("kaboom")

    app.dependency_overrides[get_exam_service] = lambda: Broken()

    res = await client.get("/api/exams/getAllExams", headers=STUDENT)

    assert res.status_code == 500
    _assert_security_headers(res)
