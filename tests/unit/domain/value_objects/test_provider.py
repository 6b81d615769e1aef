from datetime import datetime, timezone

from soon_auth.domain.value_objects.provider import OAuthProvider, ProviderSession, ProviderUser


def test_provider_session_parses_wire_aliases():
    session = ProviderSession.model_validate(
        {
            "$id": "sess-1",
            "userId": "user-1",
            "secret": "s3cr3t",
            "$createdAt": "2024-05-01T10:00:00.000+00:00",
            "provider": "github",
        }
    )

    assert session.id == "sess-1"
    assert session.user_id == "user-1"
    assert session.secret == "s3cr3t"
    assert session.created_at == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)
    assert "s3cr3t" not in repr(session)


def test_provider_user_populates_by_name():
    user = ProviderUser(id="user-1", email="a@b.io", created_at=datetime.now(timezone.utc))
    assert user.name == ""


def test_oauth_provider_values():
    assert OAuthProvider("github") is OAuthProvider.GITHUB
    assert OAuthProvider("google") is OAuthProvider.GOOGLE
