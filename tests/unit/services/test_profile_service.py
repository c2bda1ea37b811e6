"""Unit tests for ProfileService."""

from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError, OperationalError

from core.exceptions import (
    AppException,
    DuplicateKeyError,
    ErrorCode,
    IdentityConflictError,
    ProfileNotFoundError,
    ProfileProvisioningError,
    StoreUnavailableError,
    UpstreamIdentityNotFoundError,
    UsernameUnavailableError,
)
from domain.entities.profile import IdentityClaims, Profile
from domain.services.profile_service import ProfileService
from tests.unit.conftest import FakeUnitOfWork


@pytest.fixture
def service(uow: FakeUnitOfWork) -> ProfileService:
    return ProfileService(
        lambda: uow,
        placeholder_email_domain="placeholder.local",
        max_username_attempts=10,
    )


def _echo_create(uow: FakeUnitOfWork) -> None:
    """Make profiles.create return the profile it was given."""

    async def create(profile: Profile) -> Profile:
        return profile

    uow.profiles.create.side_effect = create


def _created_usernames(uow: FakeUnitOfWork) -> list[str]:
    return [call.args[0].username for call in uow.profiles.create.call_args_list]


def _existing(subject: str = "user_abc") -> Profile:
    return Profile(external_subject_id=subject, username="existing", email="e@example.com")


# --- get ---


class TestGet:
    @pytest.mark.asyncio
    async def test_returns_profile(self, service: ProfileService, uow: FakeUnitOfWork) -> None:
        profile = _existing()
        uow.profiles.get.return_value = profile

        result = await service.get(profile.id)

        assert result is profile

    @pytest.mark.asyncio
    async def test_raises_when_missing(self, service: ProfileService, uow: FakeUnitOfWork) -> None:
        uow.profiles.get.return_value = None

        with pytest.raises(ProfileNotFoundError) as exc_info:
            await service.get(uuid4())

        assert exc_info.value.status_code == 404


# --- get_or_create: existing profiles ---


class TestExistingProfile:
    @pytest.mark.asyncio
    async def test_returns_existing_without_writing(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        existing = _existing("user_abc")
        uow.profiles.get_by_external_subject_id.return_value = existing

        result = await service.get_or_create(
            "user_abc", IdentityClaims(email="new@example.com", username="other")
        )

        assert result is existing
        uow.profiles.create.assert_not_called()
        assert not uow.committed

    @pytest.mark.asyncio
    async def test_repeated_calls_return_same_profile(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        existing = _existing("user_abc")
        uow.profiles.get_by_external_subject_id.return_value = existing

        first = await service.get_or_create("user_abc")
        second = await service.get_or_create("user_abc")

        assert first.id == second.id
        uow.profiles.create.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("subject", ["", "   "])
    async def test_rejects_blank_subject(
        self, service: ProfileService, uow: FakeUnitOfWork, subject: str
    ) -> None:
        with pytest.raises(AppException) as exc_info:
            await service.get_or_create(subject)

        assert exc_info.value.error_code == ErrorCode.VALIDATION_ERROR
        assert exc_info.value.status_code == 400
        uow.profiles.get_by_external_subject_id.assert_not_called()


# --- get_or_create: field derivation ---


class TestFieldDerivation:
    @pytest.mark.asyncio
    async def test_full_claims(self, service: ProfileService, uow: FakeUnitOfWork) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create(
            "user_2abc",
            IdentityClaims(
                username="jdoe",
                email="jane@x.com",
                first_name="Jane",
                last_name="Doe",
                full_name="Jane Q. Doe",
            ),
        )

        assert profile.external_subject_id == "user_2abc"
        assert profile.username == "jdoe"
        assert profile.email == "jane@x.com"
        assert profile.display_name == "Jane Q. Doe"
        assert uow.committed

    @pytest.mark.asyncio
    async def test_first_and_last_name_without_username(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        """Jane Doe signing in with only names and an email."""
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create(
            "sub_jane",
            IdentityClaims(email="jane@x.com", first_name="Jane", last_name="Doe"),
        )

        assert profile.display_name == "Jane Doe"
        assert profile.username == "jane"
        assert profile.email == "jane@x.com"

    @pytest.mark.asyncio
    async def test_no_claims_uses_placeholder_email(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create("sub_123")

        assert profile.email == "sub_123@placeholder.local"
        assert profile.username == "sub_123"
        assert profile.display_name == "sub_123"

    @pytest.mark.asyncio
    async def test_blank_claims_are_treated_as_absent(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create(
            "sub_123",
            IdentityClaims(username="  ", email="", full_name=" "),
        )

        assert profile.email == "sub_123@placeholder.local"
        assert profile.username == "sub_123"
        assert profile.display_name == "sub_123"

    @pytest.mark.asyncio
    async def test_placeholder_domain_is_configurable(self, uow: FakeUnitOfWork) -> None:
        service = ProfileService(lambda: uow, placeholder_email_domain="users.invalid")
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create("sub_9")

        assert profile.email == "sub_9@users.invalid"

    @pytest.mark.asyncio
    async def test_first_name_only(self, service: ProfileService, uow: FakeUnitOfWork) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create(
            "s1", IdentityClaims(email="a@x.com", first_name="Ann")
        )

        assert profile.display_name == "Ann"

    @pytest.mark.asyncio
    async def test_last_name_only(self, service: ProfileService, uow: FakeUnitOfWork) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create(
            "s1", IdentityClaims(email="a@x.com", last_name="Smith")
        )

        assert profile.display_name == "Smith"

    @pytest.mark.asyncio
    async def test_display_name_falls_back_to_email_local_part(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)

        profile = await service.get_or_create("s1", IdentityClaims(email="bob.smith@x.com"))

        assert profile.display_name == "bob.smith"
        assert profile.username == "bob.smith"


# --- get_or_create: username collisions ---


class TestUsernameCollisions:
    @pytest.mark.asyncio
    async def test_single_collision_gets_suffixed_username(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        created: list[Profile] = []

        async def create(profile: Profile) -> Profile:
            if profile.username == "jane":
                raise DuplicateKeyError("username")
            created.append(profile)
            return profile

        uow.profiles.create.side_effect = create

        profile = await service.get_or_create("sub_2", IdentityClaims(email="jane@x.com"))

        assert profile.username == f"jane-{str(profile.id)[:8]}-1"
        assert profile.username != "jane"
        assert profile.email == "jane@x.com"
        assert len(created) == 1

    @pytest.mark.asyncio
    async def test_suffix_counts_attempts(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)
        original = uow.profiles.create.side_effect
        failures = iter([DuplicateKeyError("username")] * 3)

        async def create(profile: Profile) -> Profile:
            err = next(failures, None)
            if err:
                raise err
            return await original(profile)

        uow.profiles.create.side_effect = create

        profile = await service.get_or_create("sub_3", IdentityClaims(username="jane"))

        assert profile.username == f"jane-{str(profile.id)[:8]}-3"

    @pytest.mark.asyncio
    async def test_profile_id_is_stable_across_attempts(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        ids = []

        async def create(profile: Profile) -> Profile:
            ids.append(profile.id)
            if len(ids) < 3:
                raise DuplicateKeyError("username")
            return profile

        uow.profiles.create.side_effect = create

        await service.get_or_create("sub_4", IdentityClaims(username="jane"))

        assert len(set(ids)) == 1

    @pytest.mark.asyncio
    async def test_ten_collisions_use_subject_fallback(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        attempts: list[str] = []

        async def create(profile: Profile) -> Profile:
            attempts.append(profile.username)
            if len(attempts) <= 10:
                raise DuplicateKeyError("username")
            return profile

        uow.profiles.create.side_effect = create

        profile = await service.get_or_create(
            "user_2a-B_c|9", IdentityClaims(email="jane@x.com", username="jd")
        )

        assert profile.username == "jane-user2aBc9"
        assert len(attempts) == 11
        assert attempts[0] == "jd"
        assert len(set(attempts)) == 11

    @pytest.mark.asyncio
    async def test_exhausted_fallback_raises_username_unavailable(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = DuplicateKeyError("username")

        with pytest.raises(UsernameUnavailableError) as exc_info:
            await service.get_or_create("sub_5", IdentityClaims(email="jane@x.com"))

        assert exc_info.value.status_code == 503
        assert exc_info.value.details == {"external_subject_id": "sub_5"}
        assert uow.profiles.create.call_count == 11

    @pytest.mark.asyncio
    async def test_attempt_bound_is_configurable(self, uow: FakeUnitOfWork) -> None:
        service = ProfileService(lambda: uow, max_username_attempts=3)
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = DuplicateKeyError("username")

        with pytest.raises(UsernameUnavailableError):
            await service.get_or_create("sub_6")

        assert uow.profiles.create.call_count == 4
        assert _created_usernames(uow)[-1] == "sub_6-sub6"


# --- get_or_create: identity conflicts ---


class TestIdentityConflicts:
    @pytest.mark.asyncio
    async def test_subject_collision_returns_concurrent_winner(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        winner = _existing("sub_7")
        uow.profiles.get_by_external_subject_id.side_effect = [None, winner]
        uow.profiles.create.side_effect = DuplicateKeyError("external_subject_id")

        result = await service.get_or_create("sub_7", IdentityClaims(email="e@example.com"))

        assert result is winner
        assert uow.profiles.create.call_count == 1

    @pytest.mark.asyncio
    async def test_email_collision_with_winner_returns_it(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        winner = _existing("sub_8")
        uow.profiles.get_by_external_subject_id.side_effect = [None, winner]
        uow.profiles.create.side_effect = DuplicateKeyError("email")

        result = await service.get_or_create("sub_8", IdentityClaims(email="e@example.com"))

        assert result is winner

    @pytest.mark.asyncio
    async def test_email_owned_by_another_identity_raises_conflict(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = DuplicateKeyError("email")

        with pytest.raises(IdentityConflictError) as exc_info:
            await service.get_or_create("sub_9", IdentityClaims(email="taken@example.com"))

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {"external_subject_id": "sub_9", "field": "email"}
        assert uow.profiles.create.call_count == 1

    @pytest.mark.asyncio
    async def test_conflict_after_username_retries_is_not_retried(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = [
            DuplicateKeyError("username"),
            DuplicateKeyError("email"),
        ]

        with pytest.raises(IdentityConflictError):
            await service.get_or_create("sub_10", IdentityClaims(email="a@x.com"))

        assert uow.profiles.create.call_count == 2


# --- get_or_create: store failures ---


class TestStoreFailures:
    @pytest.mark.asyncio
    async def test_connection_error_on_insert_is_not_retried(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = OperationalError(
            "INSERT INTO profiles", {}, Exception("connection refused")
        )

        with pytest.raises(StoreUnavailableError) as exc_info:
            await service.get_or_create("sub_11")

        assert exc_info.value.status_code == 503
        assert uow.profiles.create.call_count == 1

    @pytest.mark.asyncio
    async def test_connection_error_on_lookup(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.side_effect = ConnectionRefusedError()

        with pytest.raises(StoreUnavailableError):
            await service.get_or_create("sub_12")

        uow.profiles.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_other_integrity_error_becomes_provisioning_error(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        cause = IntegrityError("INSERT INTO profiles", {}, Exception("NOT NULL constraint failed"))
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = cause

        with pytest.raises(ProfileProvisioningError) as exc_info:
            await service.get_or_create("sub_13")

        assert exc_info.value.status_code == 500
        assert exc_info.value.details == {"external_subject_id": "sub_13"}
        assert exc_info.value.__cause__ is cause
        assert uow.profiles.create.call_count == 1

    @pytest.mark.asyncio
    async def test_upstream_not_found_propagates_unchanged(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        uow.profiles.create.side_effect = UpstreamIdentityNotFoundError("sub_14")

        with pytest.raises(UpstreamIdentityNotFoundError):
            await service.get_or_create("sub_14")

    @pytest.mark.asyncio
    async def test_each_attempt_uses_its_own_unit_of_work(
        self, service: ProfileService, uow: FakeUnitOfWork
    ) -> None:
        uow.profiles.get_by_external_subject_id.return_value = None
        _echo_create(uow)
        original = uow.profiles.create.side_effect
        failures = iter([DuplicateKeyError("username")])

        async def create(profile: Profile) -> Profile:
            err = next(failures, None)
            if err:
                raise err
            return await original(profile)

        uow.profiles.create.side_effect = create

        await service.get_or_create("sub_15")

        # one lookup plus two insert attempts
        assert uow.entered == 3
