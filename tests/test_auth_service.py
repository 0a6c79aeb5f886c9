import pytest

from app.core.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError
from app.db.repositories.users import UserRepository
from app.features.authentication.services import AuthService

from conftest import PASSWORD


@pytest.fixture
def svc(session, tokens):
    return AuthService(user_repo=UserRepository(session), tokens=tokens)


class TestSignUp:
    def test_token_resolves_to_new_user(self, svc, tokens):
        result = svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        assert result.user.id is not None
        assert tokens.validate(result.token) == result.user.id

    def test_password_is_hashed(self, svc):
        result = svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        assert result.user.hashed_password
        assert PASSWORD not in result.user.hashed_password

    @pytest.mark.parametrize(
        "username, email, password",
        [("", "a@example.com", PASSWORD), ("a", "", PASSWORD), ("a", "a@example.com", ""), ("  ", "a@example.com", PASSWORD)],
    )
    def test_required_fields(self, svc, username, email, password):
        with pytest.raises(ValidationError):
            svc.sign_up(username=username, email=email, password=password)

    def test_duplicate_email(self, svc):
        svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        with pytest.raises(ConflictError):
            svc.sign_up(username="alice2", email="Alice@Example.com", password=PASSWORD)


class TestLogIn:
    def test_success(self, svc):
        created = svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        result = svc.log_in(email="alice@example.com", password=PASSWORD)
        assert result.user.id == created.user.id

    def test_unknown_email_and_wrong_password_are_indistinguishable(self, svc):
        svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        with pytest.raises(UnauthorizedError) as wrong_password:
            svc.log_in(email="alice@example.com", password="nope")
        with pytest.raises(UnauthorizedError) as unknown_email:
            svc.log_in(email="bob@example.com", password=PASSWORD)
        assert wrong_password.value.detail == unknown_email.value.detail == "Invalid credentials"

    def test_required_fields(self, svc):
        with pytest.raises(ValidationError):
            svc.log_in(email="", password=PASSWORD)
        with pytest.raises(ValidationError):
            svc.log_in(email="alice@example.com", password="")

    def test_oauth_only_account_cannot_use_password(self, svc):
        svc.oauth_log_in(provider="google", provider_user_id="g-1", email="carol@example.com", display_name="Carol")
        with pytest.raises(UnauthorizedError):
            svc.log_in(email="carol@example.com", password=PASSWORD)


class TestOAuth:
    def test_first_login_creates_passwordless_user(self, svc, tokens):
        result = svc.oauth_log_in(provider="google", provider_user_id="g-1", email="carol@example.com", display_name="Carol")
        assert result.user.username == "Carol"
        assert result.user.hashed_password == ""
        assert result.user.oauth_provider == "google"
        assert result.user.oauth_provider_id == "g-1"
        assert tokens.validate(result.token) == result.user.id

    def test_resolution_is_idempotent(self, svc):
        first = svc.oauth_log_in(provider="google", provider_user_id="g-1", email="carol@example.com")
        second = svc.oauth_log_in(provider="google", provider_user_id="g-1", email="carol@example.com")
        third = svc.oauth_log_in(provider="google", provider_user_id="g-1", email="changed@example.com")
        assert first.user.id == second.user.id == third.user.id

    def test_links_existing_account_by_email(self, svc, session):
        local = svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
        linked = svc.oauth_log_in(provider="google", provider_user_id="g-9", email="alice@example.com", display_name="Alice G")
        assert linked.user.id == local.user.id
        assert linked.user.oauth_provider_id == "g-9"
        assert UserRepository(session).count() == 1
        # le mot de passe local reste utilisable
        assert svc.log_in(email="alice@example.com", password=PASSWORD).user.id == local.user.id

    def test_username_falls_back_to_email_local_part(self, svc):
        result = svc.oauth_log_in(provider="google", provider_user_id="g-2", email="dave@example.com", display_name="")
        assert result.user.username == "dave"

    def test_missing_email(self, svc):
        with pytest.raises(ValidationError):
            svc.oauth_log_in(provider="google", provider_user_id="g-3", email="")

    def test_missing_subject(self, svc):
        with pytest.raises(ValidationError):
            svc.oauth_log_in(provider="google", provider_user_id="", email="e@example.com")


def test_get_user(svc):
    created = svc.sign_up(username="alice", email="alice@example.com", password=PASSWORD)
    assert svc.get_user(created.user.id).email == "alice@example.com"
    with pytest.raises(NotFoundError):
        svc.get_user(999)
