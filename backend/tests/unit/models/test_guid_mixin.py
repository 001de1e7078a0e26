"""
Unit tests for GuidMixin identifiers.
"""

import pytest

from backend.src.models import Report, User


class TestGuidMixin:

    def test_guid_round_trip(self, sample_user):
        user = sample_user()

        assert user.guid.startswith("usr_")
        assert len(user.guid) == len("usr_") + 26
        assert User.parse_guid(user.guid) == user.uuid

    def test_guid_is_none_before_flush(self):
        assert Report().guid is None

    def test_wrong_prefix(self, sample_user):
        user = sample_user()

        with pytest.raises(ValueError):
            Report.parse_guid(user.guid)

    @pytest.mark.parametrize("guid", ["", "usr_short", "usr_" + "!" * 26])
    def test_invalid_guids(self, guid):
        with pytest.raises(ValueError):
            User.parse_guid(guid)

    def test_guids_unique(self, sample_user):
        assert sample_user().guid != sample_user().guid
