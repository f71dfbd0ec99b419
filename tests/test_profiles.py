import pytest

from portal.errors import PermissionDeniedError, ValidationError


def test_save_creates_then_updates_single_profile(profiles, user_session, gateway, clock):
    created = profiles.save(user_session, {"full_name": "Ada Author", "participation_type": "presenter"})
    clock.advance(days=1)
    updated = profiles.save(user_session, {"affiliation": "University of Somewhere"})

    assert updated.id == created.id
    assert updated.full_name == "Ada Author"
    assert updated.affiliation == "University of Somewhere"
    assert updated.created_at == created.created_at
    assert updated.updated_at == clock.now
    assert len(gateway.list("user_profiles")) == 1


def test_get_for_owner_without_profile(profiles, user_session):
    assert profiles.get_for_owner(user_session) is None


def test_save_rejects_unknown_fields_and_participation(profiles, user_session):
    with pytest.raises(ValidationError):
        profiles.save(user_session, {"password": "hunter2"})
    with pytest.raises(ValidationError):
        profiles.save(user_session, {"participation_type": "sponsor"})


def test_admin_list_and_remove(profiles, user_session, other_session, admin_session):
    mine = profiles.save(user_session, {"full_name": "Ada"})
    profiles.save(other_session, {"full_name": "Bo"})

    assert len(profiles.list_all(admin_session)) == 2
    with pytest.raises(PermissionDeniedError):
        profiles.list_all(user_session)
    with pytest.raises(ValidationError):
        profiles.remove(admin_session, mine.id)

    profiles.remove(admin_session, mine.id, confirm=True)
    assert [p.user_id for p in profiles.list_all(admin_session)] == ["U2"]


def test_users_cannot_read_other_profiles(profiles, user_session, other_session):
    profiles.save(user_session, {"full_name": "Ada"})
    with pytest.raises(PermissionDeniedError):
        profiles.get_for_owner(other_session, "U1")
