"""End-to-end HTTP tests against the FastAPI app (httpx + ASGITransport)."""

import pytest
from sqlalchemy import select

import qrkit

from qrkit.domain.token import AccessToken
from qrkit.services.storage import CloudinaryStorage, get_storage

from tests.conftest import auth_headers

API = "/api/v1"
CODE = "5b4a3c2d-1e0f-4a9b-8c7d-6e5f4a3b2c1d"


async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "ok"
    assert body["env"] == "test"
    assert body["version"] == qrkit.__version__


# ---------------------------------------------------------------------------
# Authentication and roles
# ---------------------------------------------------------------------------

async def test_auth_is_checked_before_anything_else(client):
    resp = await client.post(f"{API}/qr/bind", json={"code": CODE})
    assert resp.status_code == 401
    assert resp.json() == {"success": False, "error": "UNAUTHORIZED", "message": "Authentication required"}


async def test_bad_or_expired_session(client, user):
    forged = await client.get(f"{API}/me/qr", headers=auth_headers(user, secret="wrong-secret"))
    assert forged.status_code == 401

    expired = await client.get(f"{API}/me/qr", headers=auth_headers(user, expires_in=-10))
    assert expired.status_code == 401


@pytest.mark.parametrize(
    "method, path",
    [
        ("post", "/admin/qr/revoke"),
        ("get", "/admin/qr"),
        ("post", "/admin/kits/grant"),
        ("get", "/admin/content"),
    ],
)
async def test_admin_routes_require_admin_role(client, user, method, path):
    anonymous = await client.request(method.upper(), f"{API}{path}", json={})
    assert anonymous.status_code == 401

    as_user = await client.request(method.upper(), f"{API}{path}", json={}, headers=auth_headers(user))
    assert as_user.status_code == 403
    assert as_user.json()["error"] == "FORBIDDEN"


# ---------------------------------------------------------------------------
# Bind / verify
# ---------------------------------------------------------------------------

async def test_bind_and_verify(client, user, other_user, make_qr):
    await make_qr(CODE)

    resp = await client.post(f"{API}/qr/bind", json={"code": CODE.upper()}, headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json() == {"success": True}

    again = await client.post(f"{API}/qr/bind", json={"code": CODE}, headers=auth_headers(other_user))
    assert again.status_code == 200
    assert again.json()["success"] is False
    assert again.json()["error"] == "ALREADY_BOUND"

    bad = await client.post(f"{API}/qr/bind", json={"code": "xyz"}, headers=auth_headers(user))
    assert bad.json()["error"] == "INVALID_CODE"

    mine = await client.post(f"{API}/qr/verify", json={"code": CODE}, headers=auth_headers(user))
    body = mine.json()
    assert body["success"] is True
    assert body["belongsToUser"] is True and body["isBound"] is True
    assert body["qr"]["code"] == CODE

    theirs = await client.post(f"{API}/qr/verify", json={"code": CODE}, headers=auth_headers(other_user))
    assert theirs.status_code == 200
    assert theirs.json() == {
        "success": False,
        "belongsToUser": False,
        "isBound": False,
        "error": "NOT_FOUND",
    }


async def test_malformed_body_is_invalid_request(client, user):
    resp = await client.post(f"{API}/qr/bind", json={}, headers=auth_headers(user))
    assert resp.status_code == 400
    assert resp.json()["error"] == "INVALID_REQUEST"


# ---------------------------------------------------------------------------
# Token mint + content gate
# ---------------------------------------------------------------------------

async def test_mint_outcomes_are_200_with_error(client, user):
    resp = await client.post(f"{API}/tokens", headers=auth_headers(user))
    assert resp.status_code == 200
    assert resp.json()["error"] == "NO_ACTIVE_QR"


async def test_content_flow(client, session, storage, entitled):
    headers = auth_headers(entitled["user"])
    minted = await client.post(f"{API}/tokens", json={"kitId": entitled["kit"].id}, headers=headers)
    assert minted.status_code == 201
    data = minted.json()["data"]
    assert data["kitId"] == entitled["kit"].id
    token = data["token"]

    resp = await client.get(f"{API}/content/VIDEO/lesson-1", params={"token": token})
    assert resp.status_code == 200
    access = resp.json()["data"]
    assert access["contentUrl"] == "/content/video/lesson-1"
    assert access["signedUrl"].startswith("https://cdn.test/video/")
    assert storage.signed == [("lesson-1", "video", 3600)]

    replay = await client.get(f"{API}/content/VIDEO/lesson-1", params={"token": token})
    assert replay.status_code == 401
    assert replay.json()["error"] == "INVALID_TOKEN"


async def test_content_batch_filters_to_entitled(client, entitled, other_user):
    body = {"contentIds": ["diagram-1", "not-in-any-kit", "diagram-1", "lesson-1"]}
    resp = await client.post(f"{API}/content/batch", json=body, headers=auth_headers(entitled["user"]))
    assert resp.status_code == 200
    assert sorted(c["id"] for c in resp.json()["data"]) == ["diagram-1", "lesson-1"]

    stranger = await client.post(f"{API}/content/batch", json=body, headers=auth_headers(other_user))
    assert stranger.json()["data"] == []


async def test_content_requires_token(client, entitled):
    resp = await client.get(f"{API}/content/VIDEO/lesson-1")
    assert resp.status_code == 400
    assert resp.json()["error"] == "TOKEN_REQUIRED"


async def test_denied_content_still_spends_token(client, session, entitled):
    minted = await client.post(f"{API}/tokens", headers=auth_headers(entitled["user"]))
    token = minted.json()["data"]["token"]

    denied = await client.get(f"{API}/content/VIDEO/not-in-kit", params={"token": token})
    assert denied.status_code == 403
    assert denied.json()["error"] == "ACCESS_DENIED"

    row = (await session.execute(select(AccessToken))).scalars().one()
    assert row.used_at is not None

    retry = await client.get(f"{API}/content/VIDEO/lesson-1", params={"token": token})
    assert retry.status_code == 401


async def test_unconfigured_storage_is_500(app, client, entitled):
    app.dependency_overrides[get_storage] = lambda: CloudinaryStorage()
    minted = await client.post(f"{API}/tokens", headers=auth_headers(entitled["user"]))

    resp = await client.get(
        f"{API}/content/VIDEO/lesson-1", params={"token": minted.json()["data"]["token"]}
    )
    assert resp.status_code == 500
    assert resp.json()["error"] == "SERVICE_CONFIGURATION_ERROR"


# ---------------------------------------------------------------------------
# Admin flows
# ---------------------------------------------------------------------------

async def test_admin_lifecycle_end_to_end(client, admin, user):
    admin_h, user_h = auth_headers(admin), auth_headers(user)

    generated = await client.post(
        f"{API}/admin/qr/generate", json={"count": 2, "metadata": {"cohort": "2026-A"}}, headers=admin_h
    )
    assert generated.status_code == 201
    codes = [q["code"] for q in generated.json()["data"]]
    assert generated.json()["data"][0]["metadata"] == {"cohort": "2026-A"}

    assert (await client.post(f"{API}/qr/bind", json={"code": codes[0]}, headers=user_h)).json() == {
        "success": True
    }
    [qr] = (await client.get(f"{API}/me/qr", headers=user_h)).json()["data"]

    kit = (await client.post(f"{API}/admin/kits", json={"name": "Kit"}, headers=admin_h)).json()["data"]
    item = await client.post(
        f"{API}/admin/kits/items",
        json={"kitId": kit["id"], "contentType": "video", "contentId": "vid-1"},
        headers=admin_h,
    )
    assert item.json()["data"]["contentType"] == "VIDEO"

    grant = await client.post(
        f"{API}/admin/kits/grant", json={"qrId": qr["id"], "kitId": kit["id"]}, headers=admin_h
    )
    assert grant.status_code == 201
    dup = await client.post(
        f"{API}/admin/kits/grant", json={"qrId": qr["id"], "kitId": kit["id"]}, headers=admin_h
    )
    assert dup.status_code == 409

    unbound_grant = await client.post(
        f"{API}/admin/kits/grant",
        json={"qrId": generated.json()["data"][1]["id"], "kitId": kit["id"]},
        headers=admin_h,
    )
    assert unbound_grant.status_code == 400
    assert unbound_grant.json()["error"] == "INVALID_INPUT"

    my_kits = (await client.get(f"{API}/me/kits", headers=user_h)).json()["data"]
    assert [k["id"] for k in my_kits] == [kit["id"]]

    revoked = await client.post(f"{API}/admin/qr/revoke", json={"qrId": qr["id"]}, headers=admin_h)
    assert revoked.status_code == 200
    assert revoked.json()["data"]["isActive"] is False
    again = await client.post(f"{API}/admin/qr/revoke", json={"qrId": qr["id"]}, headers=admin_h)
    assert again.status_code == 409
    assert again.json()["error"] == "ALREADY_REVOKED"
    missing = await client.post(f"{API}/admin/qr/revoke", json={"qrId": "nope"}, headers=admin_h)
    assert missing.status_code == 404

    events = await client.get(f"{API}/admin/qr/events", params={"qrId": qr["id"]}, headers=admin_h)
    assert sorted(e["action"] for e in events.json()["data"]) == ["GENERATED", "REVOKED"]
    assert events.json()["meta"]["total"] == 2

    grants = (await client.get(f"{API}/admin/qr/{qr['id']}/grants", headers=admin_h)).json()["data"]
    assert len(grants) == 1 and grants[0]["revokedAt"] is None

    detail = (await client.get(f"{API}/admin/kits/{kit['id']}", headers=admin_h)).json()["data"]
    assert [i["contentId"] for i in detail["items"]] == ["vid-1"]


async def test_reassign_request_field_names(client, admin, user, make_qr):
    old = await make_qr(CODE, bound_to=user)

    resp = await client.post(
        f"{API}/admin/qr/reassign",
        json={"userId": user.id, "revokeOldQR": True, "oldQRId": old.id, "metadata": {"label": "swap"}},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["newQrId"] != old.id
    assert data["qr"]["boundByUserId"] == user.id

    bad_meta = await client.post(
        f"{API}/admin/qr/reassign",
        json={"userId": user.id, "metadata": {"email": "leak@example.com"}},
        headers=auth_headers(admin),
    )
    assert bad_meta.status_code == 400
    assert bad_meta.json()["error"] == "INVALID_METADATA"

    ghost = await client.post(
        f"{API}/admin/qr/reassign", json={"userId": "ghost"}, headers=auth_headers(admin)
    )
    assert ghost.status_code == 404
    assert ghost.json()["error"] == "USER_NOT_FOUND"


async def test_revoke_grant_by_pair(client, admin, entitled):
    body = {"qrId": entitled["qr"].id, "kitId": entitled["kit"].id}
    first = await client.post(f"{API}/admin/kits/revoke-grant", json=body, headers=auth_headers(admin))
    assert first.json() == {"success": True}
    second = await client.post(f"{API}/admin/kits/revoke-grant", json=body, headers=auth_headers(admin))
    assert second.status_code == 404

    empty = await client.post(f"{API}/admin/kits/revoke-grant", json={}, headers=auth_headers(admin))
    assert empty.status_code == 400


async def test_upload_and_list_content(client, admin, storage):
    resp = await client.post(
        f"{API}/admin/content/upload",
        files={"file": ("intro.mp4", b"\x00\x01fake-video", "video/mp4")},
        data={"title": "Intro"},
        headers=auth_headers(admin),
    )
    assert resp.status_code == 201
    content = resp.json()["data"]
    assert content["contentType"] == "VIDEO"
    assert content["filename"] == "intro.mp4"
    assert content["bytes"] == len(b"\x00\x01fake-video")
    assert storage.uploads[0]["resource_type"] == "video"
    assert content["id"] == storage.uploads[0]["public_id"]

    empty = await client.post(
        f"{API}/admin/content/upload",
        files={"file": ("empty.pdf", b"", "application/pdf")},
        headers=auth_headers(admin),
    )
    assert empty.status_code == 400

    listed = await client.get(f"{API}/admin/content", params={"contentType": "video"}, headers=auth_headers(admin))
    assert [c["id"] for c in listed.json()["data"]] == [content["id"]]


async def test_playlists_over_http(client, admin, entitled, other_user):
    admin_h = auth_headers(admin)
    kit_id = entitled["kit"].id

    playlist = (
        await client.post(f"{API}/admin/kits/{kit_id}/playlists", json={"name": "Week 1"}, headers=admin_h)
    ).json()["data"]
    for content_id in ("lesson-1", "diagram-1"):
        await client.post(
            f"{API}/admin/playlists/{playlist['id']}/items", json={"contentId": content_id}, headers=admin_h
        )
    reordered = await client.post(
        f"{API}/admin/playlists/{playlist['id']}/items/reorder",
        json={"contentIds": ["diagram-1", "lesson-1"]},
        headers=admin_h,
    )
    assert [i["contentId"] for i in reordered.json()["data"]] == ["diagram-1", "lesson-1"]

    removed = await client.delete(
        f"{API}/admin/playlists/{playlist['id']}/items", params={"contentId": "lesson-1"}, headers=admin_h
    )
    assert removed.json() == {"success": True}

    user_view = await client.get(f"{API}/kits/{kit_id}/playlists", headers=auth_headers(entitled["user"]))
    assert [p["name"] for p in user_view.json()["data"]] == ["Week 1"]
    stranger = await client.get(f"{API}/playlists/{playlist['id']}/items", headers=auth_headers(other_user))
    assert stranger.status_code == 403

    patched = await client.patch(
        f"{API}/admin/playlists/{playlist['id']}", json={"name": "Week One"}, headers=admin_h
    )
    assert patched.json()["data"]["name"] == "Week One"
    deleted = await client.delete(f"{API}/admin/playlists/{playlist['id']}", headers=admin_h)
    assert deleted.json() == {"success": True}
