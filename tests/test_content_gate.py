import pytest
from sqlalchemy import select

from qrkit.core.access import TrustedExecutor
from qrkit.core.exceptions import ForbiddenError, InvalidInputError, NotFoundError, ServiceConfigurationError
from qrkit.domain.kit import KitItem
from qrkit.domain.token import AccessToken
from qrkit.services.content_gate import ContentAccessGate
from qrkit.services.storage import CloudinaryStorage, resource_type_for
from qrkit.services.tokens import InvalidTokenError, TokenMintService


@pytest.fixture
def gate(session, storage):
    return ContentAccessGate(TrustedExecutor(session), storage)


async def _mint(scoped, user, kit_id=None):
    svc = TokenMintService(scoped(user))
    return await (svc.mint_for_kit(kit_id) if kit_id else svc.mint())


@pytest.mark.parametrize(
    "content_type, expected",
    [("VIDEO", "video"), ("video", "video"), ("IMAGE", "image"), ("FILE", "raw"), ("PDF", "raw"), ("", "raw")],
)
def test_resource_type_hint(content_type, expected):
    assert resource_type_for(content_type) == expected


async def test_grants_signed_url_for_kit_member(gate, storage, scoped, entitled):
    minted = await _mint(scoped, entitled["user"])

    access = await gate.grant_content_access(minted.token, "video", "lesson-1")

    assert access.content_type == "VIDEO"
    assert access.content_url == "/content/video/lesson-1"
    assert access.signed_url.startswith("https://cdn.test/video/")
    assert access.title == "lesson-1 title"
    assert storage.signed == [("lesson-1", "video", 3600)]


async def test_type_must_match_membership(gate, scoped, entitled):
    minted = await _mint(scoped, entitled["user"])
    with pytest.raises(ForbiddenError) as exc:
        await gate.grant_content_access(minted.token, "IMAGE", "lesson-1")
    assert exc.value.code == "ACCESS_DENIED"


async def test_scope_comes_from_the_token_not_the_caller(
    session, gate, scoped, entitled, make_kit, make_grant
):
    """A token minted for kit A cannot open content that is only in kit B."""
    kit_b = await make_kit("Course B", items=(("VIDEO", "lesson-b"),))
    await make_grant(entitled["qr"], kit_b)

    token_a = await _mint(scoped, entitled["user"], entitled["kit"].id)
    with pytest.raises(ForbiddenError):
        await gate.grant_content_access(token_a.token, "VIDEO", "lesson-b")

    token_b = await _mint(scoped, entitled["user"], kit_b.id)
    access = await gate.grant_content_access(token_b.token, "VIDEO", "lesson-b")
    assert access.content_id == "lesson-b"


async def test_token_is_spent_even_when_access_is_denied(session, gate, scoped, entitled):
    minted = await _mint(scoped, entitled["user"])

    with pytest.raises(ForbiddenError):
        await gate.grant_content_access(minted.token, "VIDEO", "not-in-kit")
    await session.rollback()  # what the request scope does after a denial

    row = (await session.execute(select(AccessToken))).scalars().one()
    await session.refresh(row)
    assert row.used_at is not None
    with pytest.raises(InvalidTokenError):
        await gate.grant_content_access(minted.token, "VIDEO", "lesson-1")


async def test_member_without_content_row(session, gate, scoped, entitled):
    session.add(KitItem(kit_id=entitled["kit"].id, content_type="FILE", content_id="orphan"))
    await session.commit()
    minted = await _mint(scoped, entitled["user"])

    with pytest.raises(NotFoundError) as exc:
        await gate.grant_content_access(minted.token, "FILE", "orphan")
    assert exc.value.code == "CONTENT_NOT_FOUND"


async def test_missing_ids_are_rejected_before_consuming(session, gate, scoped, entitled):
    minted = await _mint(scoped, entitled["user"])
    with pytest.raises(InvalidInputError):
        await gate.grant_content_access(minted.token, "VIDEO", "")
    row = (await session.execute(select(AccessToken))).scalars().one()
    assert row.used_at is None


async def test_unconfigured_storage_fails_closed(session, scoped, entitled):
    minted = await _mint(scoped, entitled["user"])
    gate = ContentAccessGate(TrustedExecutor(session), CloudinaryStorage())

    with pytest.raises(ServiceConfigurationError) as exc:
        await gate.grant_content_access(minted.token, "VIDEO", "lesson-1")
    assert exc.value.status_code == 500
    assert exc.value.code == "SERVICE_CONFIGURATION_ERROR"


def test_signed_url_uses_authenticated_delivery():
    storage = CloudinaryStorage(cloud_name="demo", api_key="key", api_secret="secret")
    url = storage.signed_url("qrkit/content/abc", "video", 3600)
    assert "/demo/video/download?" in url
    assert "type=authenticated" in url
    assert "signature=" in url
    assert "api_secret" not in url
    assert "=secret" not in url
