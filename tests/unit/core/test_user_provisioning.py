"""Unit tests for just-in-time user provisioning."""

import pytest

from src.splicer.core.models import TokenClaims
from src.splicer.core.services import UserProvisioningService
from src.splicer.entities.core.user import UserRepository, UserRole


def make_claims(**overrides) -> TokenClaims:
    fields = {
        "issuer": "splicer-api",
        "subject": "auth0|abcdef123456",
        "expires_at": 2000000000,
        "issued_at": 1900000000,
    }
    fields.update(overrides)
    return TokenClaims(**fields)


class TestUserProvisioning:
    def test_creates_user_on_first_sight(self, session):
        user = UserProvisioningService(session).provision_user_from_claims(
            make_claims(email="grace.hopper@example.com")
        )
        session.commit()

        assert user.name == "Grace Hopper"
        assert user.role == UserRole.USER
        stored = UserRepository(session).get_by_issuer_subject(
            "splicer-api", "auth0|abcdef123456"
        )
        assert stored == user

    def test_fallback_name_from_subject(self, session):
        user = UserProvisioningService(session).provision_user_from_claims(make_claims())
        assert user.name == "User ef123456"

    def test_returns_existing_user_and_refreshes_profile(self, session):
        service = UserProvisioningService(session)
        first = service.provision_user_from_claims(make_claims(name="Old Name"))

        again = service.provision_user_from_claims(
            make_claims(name="New Name", email="new@example.com")
        )

        assert again.id == first.id
        assert again.name == "New Name"
        assert again.email == "new@example.com"

    def test_role_claim_is_authoritative(self, session):
        service = UserProvisioningService(session)
        user = service.provision_user_from_claims(make_claims(roles=["admin"]))
        assert user.role == UserRole.ADMIN

        kept = service.provision_user_from_claims(make_claims())
        assert kept.role == UserRole.ADMIN

        demoted = service.provision_user_from_claims(make_claims(roles=["user"]))
        assert demoted.role == UserRole.USER

    def test_missing_subject(self, session):
        with pytest.raises(ValueError):
            UserProvisioningService(session).provision_user_from_claims(
                make_claims(subject="")
            )
