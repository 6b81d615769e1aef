from soon_auth.domain.value_objects.session_credential import LocalSessionCredential, Principal
from soon_auth.domain.value_objects.user_profile import UserProfile
from tests.factories.user import create_fake_user


def test_profile_marks_federated_accounts():
    user = create_fake_user(provider_user_id="provider-1")
    user.id = 7

    profile = UserProfile.from_entity(user)

    assert profile.id == 7
    assert profile.email == user.email
    assert profile.federated is True


def test_profile_never_exposes_password_hash():
    user = create_fake_user(hashed_password="$2b$04$abc")
    user.id = 1

    assert "hashed_password" not in UserProfile.from_entity(user).model_dump()


def test_principal_user_id_and_hidden_token():
    user = create_fake_user()
    user.id = 3
    principal = Principal(user=user, credential=LocalSessionCredential("raw-token"))

    assert principal.user_id == 3
    assert "raw-token" not in repr(principal.credential)
