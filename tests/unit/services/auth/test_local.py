import pytest

from soon_auth.core.exceptions import (
    INVALID_CREDENTIALS_MESSAGE,
    AuthenticationError,
    DuplicateAccountError,
    ErrorKind,
    InvalidCredentialsError,
    NoOpChangeError,
    PasswordMismatchError,
    RegistrationDisabledError,
    ValidationError,
)
from soon_auth.domain.services.auth.local import LocalAuthService
from soon_auth.domain.value_objects.session_credential import LocalSessionCredential, Principal
from soon_auth.infrastructure.repositories.activity_log_repository import ActivityLogRepository
from soon_auth.utils.security import DUMMY_PASSWORD_HASH, hash_password
from tests.factories.user import create_fake_user

PASSWORD = "correct horse battery"


@pytest.fixture
def service(user_repository, session_issuer, activity_logger):
    return LocalAuthService(user_repository, session_issuer, activity_logger)


@pytest.fixture
def closed_service(user_repository, session_issuer, activity_logger):
    return LocalAuthService(
        user_repository, session_issuer, activity_logger, registration_enabled=False
    )


async def signed_up(service, email="jane@example.com", password=PASSWORD, name="Jane"):
    user, token = await service.sign_up(email, password, name)
    return Principal(user=user, credential=LocalSessionCredential(token))


async def actions(activity_logger, user_id):
    return [entry.action for entry in await activity_logger.recent(user_id)]


class TestSignUp:
    @pytest.mark.asyncio
    async def test_creates_user_and_session(self, service, session_issuer, activity_logger):
        user, token = await service.sign_up(" Jane@Example.com ", PASSWORD, "Jane", "198.51.100.1")

        assert user.email == "jane@example.com"
        assert user.name == "Jane"
        assert user.hashed_password != PASSWORD
        assert (await session_issuer.validate(token)).id == user.id
        [entry] = await activity_logger.recent(user.id)
        assert (entry.action, entry.ip_address) == ("SIGN_UP", "198.51.100.1")

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "email,password,name,field",
        [
            ("not-an-email", PASSWORD, None, "email"),
            ("jane@example.com", "short", None, "password"),
            ("jane@example.com", "x" * 101, None, "password"),
            ("jane@example.com", PASSWORD, "n" * 101, "name"),
        ],
    )
    async def test_rejects_invalid_input_without_side_effects(
        self, service, user_repository, email, password, name, field
    ):
        with pytest.raises(ValidationError) as exc_info:
            await service.sign_up(email, password, name)

        assert exc_info.value.kind is ErrorKind.INVALID_INPUT
        assert field in exc_info.value.fields
        assert await user_repository.find_by_email("jane@example.com") is None

    @pytest.mark.asyncio
    async def test_blank_name_is_stored_as_none(self, service):
        user, _ = await service.sign_up("jane@example.com", PASSWORD, "   ")
        assert user.name is None

    @pytest.mark.asyncio
    async def test_duplicate_email_is_case_insensitive(self, service):
        await service.sign_up("jane@example.com", PASSWORD)

        with pytest.raises(DuplicateAccountError):
            await service.sign_up("JANE@example.com", "another password")

    @pytest.mark.asyncio
    async def test_registration_disabled_creates_nothing(self, closed_service, user_repository):
        with pytest.raises(RegistrationDisabledError):
            await closed_service.sign_up("jane@example.com", PASSWORD)

        assert await user_repository.find_by_email("jane@example.com") is None

    @pytest.mark.asyncio
    async def test_invalid_input_is_reported_before_registration_policy(self, closed_service):
        with pytest.raises(ValidationError):
            await closed_service.sign_up("not-an-email", PASSWORD)

    @pytest.mark.asyncio
    async def test_email_of_deleted_account_can_register_again(self, service):
        principal = await signed_up(service)
        await service.delete_account(principal, PASSWORD)

        user, _ = await service.sign_up("jane@example.com", "a brand new password")

        assert user.id != principal.user_id

    @pytest.mark.asyncio
    async def test_succeeds_when_activity_log_is_down(self, service, mocker):
        mocker.patch.object(ActivityLogRepository, "append", side_effect=ConnectionError("down"))

        user, token = await service.sign_up("jane@example.com", PASSWORD)

        assert user.id is not None
        assert token

    @pytest.mark.asyncio
    async def test_failed_session_issue_leaves_no_account(
        self, service, session_issuer, user_repository, mocker
    ):
        mocker.patch.object(session_issuer, "issue", side_effect=ConnectionError("db down"))

        with pytest.raises(ConnectionError):
            await service.sign_up("jane@example.com", PASSWORD)

        assert await user_repository.find_by_email("jane@example.com") is None

        mocker.stopall()
        user, token = await service.sign_up("jane@example.com", PASSWORD)
        assert user.email == "jane@example.com"
        assert token


class TestSignIn:
    @pytest.mark.asyncio
    async def test_valid_credentials_issue_a_new_session(self, service, session_issuer, activity_logger):
        principal = await signed_up(service)

        user, token = await service.sign_in("JANE@example.com", PASSWORD, "203.0.113.9")

        assert user.id == principal.user_id
        assert token != principal.credential.token
        assert (await session_issuer.validate(token)).id == user.id
        assert (await actions(activity_logger, user.id))[0] == "SIGN_IN"

    @pytest.mark.asyncio
    async def test_wrong_password(self, service):
        await signed_up(service)

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.sign_in("jane@example.com", "wrong password!")

        assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE

    @pytest.mark.asyncio
    async def test_unknown_email_fails_like_wrong_password_and_still_hashes(self, service, mocker):
        verify = mocker.patch(
            "soon_auth.domain.services.auth.local.verify_password_async", return_value=False
        )

        with pytest.raises(InvalidCredentialsError) as exc_info:
            await service.sign_in("nobody@example.com", PASSWORD)

        assert exc_info.value.message == INVALID_CREDENTIALS_MESSAGE
        verify.assert_awaited_once_with(PASSWORD, DUMMY_PASSWORD_HASH)

    @pytest.mark.asyncio
    async def test_deleted_account_cannot_sign_in(self, service):
        principal = await signed_up(service)
        await service.delete_account(principal, PASSWORD)

        with pytest.raises(InvalidCredentialsError):
            await service.sign_in("jane@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_long_password_is_checked_in_full(self, service):
        await service.sign_up("jane@example.com", "a" * 72 + "correct-tail")

        with pytest.raises(InvalidCredentialsError):
            await service.sign_in("jane@example.com", "a" * 72 + "WRONG-tail!!")

        user, _ = await service.sign_in("jane@example.com", "a" * 72 + "correct-tail")
        assert user.email == "jane@example.com"

    @pytest.mark.asyncio
    async def test_federated_only_account_cannot_sign_in_with_password(self, service, user_repository):
        await user_repository.insert(
            create_fake_user(email="fed@example.com", provider_user_id="gh-1")
        )

        with pytest.raises(InvalidCredentialsError):
            await service.sign_in("fed@example.com", PASSWORD)

    @pytest.mark.asyncio
    async def test_empty_password_is_invalid_input(self, service):
        with pytest.raises(ValidationError) as exc_info:
            await service.sign_in("jane@example.com", "")
        assert "password" in exc_info.value.fields


class TestSignOut:
    @pytest.mark.asyncio
    async def test_revokes_session_and_logs(self, service, session_issuer, activity_logger):
        principal = await signed_up(service)

        await service.sign_out(principal, "192.0.2.1")

        assert await session_issuer.validate(principal.credential.token) is None
        assert (await actions(activity_logger, principal.user_id))[0] == "SIGN_OUT"

    @pytest.mark.asyncio
    async def test_storage_failure_is_swallowed(self, service, session_issuer, mocker):
        principal = await signed_up(service)
        mocker.patch.object(session_issuer, "invalidate", side_effect=ConnectionError("down"))

        await service.sign_out(principal)


class TestUpdatePassword:
    @pytest.mark.asyncio
    async def test_replaces_password(self, service, activity_logger):
        principal = await signed_up(service)

        await service.update_password(principal, PASSWORD, "a brand new password", "a brand new password")

        await service.sign_in("jane@example.com", "a brand new password")
        with pytest.raises(InvalidCredentialsError):
            await service.sign_in("jane@example.com", PASSWORD)
        assert "UPDATE_PASSWORD" in await actions(activity_logger, principal.user_id)

    @pytest.mark.asyncio
    async def test_wrong_current_password(self, service):
        principal = await signed_up(service)

        with pytest.raises(InvalidCredentialsError):
            await service.update_password(principal, "not my password", "new password 1", "new password 1")

    @pytest.mark.asyncio
    async def test_unchanged_password_is_a_no_op(self, service):
        principal = await signed_up(service)

        with pytest.raises(NoOpChangeError) as exc_info:
            await service.update_password(principal, PASSWORD, PASSWORD, PASSWORD)
        assert exc_info.value.kind is ErrorKind.NO_OP_CHANGE

    @pytest.mark.asyncio
    async def test_confirmation_mismatch(self, service):
        principal = await signed_up(service)

        with pytest.raises(PasswordMismatchError) as exc_info:
            await service.update_password(principal, PASSWORD, "new password 1", "new password 2")
        assert exc_info.value.kind is ErrorKind.MISMATCH

    @pytest.mark.asyncio
    async def test_new_password_policy_is_checked_first(self, service):
        principal = await signed_up(service)

        with pytest.raises(ValidationError) as exc_info:
            await service.update_password(principal, "not my password", "short", "other")
        assert exc_info.value.kind is ErrorKind.INVALID_INPUT
        assert "new_password" in exc_info.value.fields

    @pytest.mark.asyncio
    async def test_wrong_current_password_wins_over_no_op(self, service):
        principal = await signed_up(service)

        with pytest.raises(InvalidCredentialsError):
            await service.update_password(principal, "not my password", "not my password", "x")


class TestDeleteAccount:
    @pytest.mark.asyncio
    async def test_soft_deletes_and_revokes_all_sessions(
        self, service, session_issuer, user_repository, activity_logger
    ):
        principal = await signed_up(service)
        _, second_token = await service.sign_in("jane@example.com", PASSWORD)

        await service.delete_account(principal, PASSWORD)

        stored = await user_repository.get_by_id(principal.user_id)
        assert stored.is_deleted
        assert await session_issuer.validate(principal.credential.token) is None
        assert await session_issuer.validate(second_token) is None
        assert "DELETE_ACCOUNT" in await actions(activity_logger, principal.user_id)

    @pytest.mark.asyncio
    async def test_wrong_password_deletes_nothing(self, service, user_repository):
        principal = await signed_up(service)

        with pytest.raises(InvalidCredentialsError):
            await service.delete_account(principal, "not my password")

        assert not (await user_repository.get_by_id(principal.user_id)).is_deleted

    @pytest.mark.asyncio
    async def test_already_deleted_user_is_unauthenticated(self, service, user_repository):
        principal = await signed_up(service)
        await user_repository.soft_delete(principal.user_id)

        with pytest.raises(AuthenticationError):
            await service.delete_account(principal, PASSWORD)


class TestUpdateAccount:
    @pytest.mark.asyncio
    async def test_updates_name_and_email(self, service, activity_logger):
        principal = await signed_up(service)

        user = await service.update_account(principal, " Jane Doe ", "Jane.Doe@Example.com")

        assert user.name == "Jane Doe"
        assert user.email == "jane.doe@example.com"
        assert "UPDATE_ACCOUNT" in await actions(activity_logger, principal.user_id)

    @pytest.mark.asyncio
    async def test_name_is_required(self, service):
        principal = await signed_up(service)

        with pytest.raises(ValidationError) as exc_info:
            await service.update_account(principal, "  ", "jane@example.com")
        assert "name" in exc_info.value.fields

    @pytest.mark.asyncio
    async def test_email_taken_by_another_account(self, service, user_repository):
        await user_repository.insert(
            create_fake_user(email="john@example.com", hashed_password=hash_password(PASSWORD))
        )
        principal = await signed_up(service)

        with pytest.raises(DuplicateAccountError):
            await service.update_account(principal, "Jane", "john@example.com")

    @pytest.mark.asyncio
    async def test_keeping_own_email_is_allowed(self, service):
        principal = await signed_up(service)

        user = await service.update_account(principal, "Jane D", "jane@example.com")

        assert user.name == "Jane D"
