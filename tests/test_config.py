"""
Tests for settings validation and database startup.
"""
import pytest
from pydantic import ValidationError
from sqlalchemy import create_engine

from clinic_auth.config import Settings
from clinic_auth.database import connect


def test_missing_secret_key_fails(monkeypatch):
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://")


@pytest.mark.parametrize("secret", ["", "   ", "dev_jwt_secret", "CHANGEME"])
def test_insecure_secret_key_fails(secret):
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://", secret_key=secret)


def test_defaults(monkeypatch):
    monkeypatch.delenv("BCRYPT_ROUNDS", raising=False)
    settings = Settings(_env_file=None, database_url="sqlite://", secret_key="a-real-secret-value")
    assert settings.algorithm == "HS256"
    assert settings.access_token_expire_minutes == 60
    assert settings.bcrypt_rounds == 10
    assert settings.bootstrap_admin_username is None


def test_bcrypt_rounds_range():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, database_url="sqlite://", secret_key="a-real-secret-value", bcrypt_rounds=2)


def test_connect_exits_when_database_unreachable(tmp_path):
    unreachable = create_engine(f"sqlite:///{tmp_path}/missing/dir/clinic.db")
    with pytest.raises(SystemExit) as exc:
        connect(unreachable)
    assert exc.value.code == 1


def test_connect_succeeds(tmp_path):
    connect(create_engine(f"sqlite:///{tmp_path}/clinic.db"))
