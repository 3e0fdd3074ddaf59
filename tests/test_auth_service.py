import pytest

from features.users.models.user_types import AuthCredentials
from features.users.services.auth_service import AuthService, hash_password, validate_credentials
from repositories.user_repo import UserRepository


@pytest.fixture
def repository(session_factory):
    return UserRepository(session_factory)


@pytest.fixture
def service(repository, clock):
    return AuthService(repository, clock)


def _creds(email="angler@example.com", password="secret1"):
    return AuthCredentials(email=email, password=password)


@pytest.mark.parametrize("email,password,error", [
    ("angler@example.com", "secret1", None),
    ("  angler@example.com ", "secret1", None),
    ("angler@example", "secret1", "Invalid email address"),
    ("not-an-email", "secret1", "Invalid email address"),
    ("angler@example.com", "12345", "Password must be at least 6 characters"),
])
def test_validate_credentials(email, password, error):
    assert validate_credentials(_creds(email, password)) == error


def test_create_account_and_sign_in(service):
    created = service.create_account(_creds(), name="Sam")
    assert created.success
    assert created.token

    signed_in = service.sign_in(_creds(email="Angler@Example.com"))
    assert signed_in.success
    assert signed_in.user_id == created.user_id
    assert signed_in.token != created.token

    profile = service.get_current_user(signed_in.token)
    assert profile.email == "angler@example.com"
    assert profile.name == "Sam"
    assert not profile.is_anonymous


def test_password_is_not_stored_in_clear(service, repository):
    created = service.create_account(_creds())
    record = repository.get_user_record(created.user_id)

    assert record.password_hash != "secret1"
    assert record.password_hash == hash_password("secret1", record.password_salt)


def test_duplicate_email_rejected(service):
    service.create_account(_creds())
    result = service.create_account(_creds(email="ANGLER@example.com"))
    assert not result.success
    assert result.error == "Email already in use"


def test_wrong_password_rejected(service):
    service.create_account(_creds())
    result = service.sign_in(_creds(password="wrong-password"))
    assert not result.success
    assert result.error == "Invalid email or password"
    assert result.token is None


def test_invalid_credentials_fail_before_lookup(service):
    result = service.sign_in(_creds(password="123"))
    assert result.error == "Password must be at least 6 characters"


def test_sign_out_revokes_token(service):
    token = service.create_account(_creds()).token
    assert service.sign_out(token)
    assert service.get_current_user(token) is None
    assert not service.sign_out(token)


def test_convert_anonymous_account(service):
    anonymous = service.sign_in_anonymously()
    assert service.get_current_user(anonymous.token).is_anonymous

    converted = service.convert_anonymous_account(anonymous.token, _creds(), name="Sam")

    assert converted.success
    assert converted.user_id == anonymous.user_id
    assert service.get_current_user(anonymous.token) is None
    profile = service.get_current_user(converted.token)
    assert profile.email == "angler@example.com"
    assert not profile.is_anonymous
    assert service.sign_in(_creds()).user_id == anonymous.user_id


def test_convert_requires_anonymous_user(service):
    token = service.create_account(_creds()).token

    result = service.convert_anonymous_account(token, _creds(email="other@example.com"))
    assert result.error == "Current user is not anonymous"

    result = service.convert_anonymous_account("unknown-token", _creds(email="other@example.com"))
    assert result.error == "No anonymous user to convert"


def test_convert_rejects_taken_email(service):
    service.create_account(_creds())
    anonymous = service.sign_in_anonymously()

    result = service.convert_anonymous_account(anonymous.token, _creds())
    assert result.error == "Email already in use"
