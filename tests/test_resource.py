"""Tests for resource ids and the filename locale convention."""

from __future__ import annotations

import pytest

from lgengine.localization import Resource, ResourceName, parse_resource_id


class TestParseResourceId:
    """parse_resource_id splits <base>[.<locale>].<ext>."""

    @pytest.mark.parametrize(
        ("resource_id", "expected"),
        [
            ("a.lg", ResourceName("a", "", "", ".lg")),
            ("a.en-US.lg", ResourceName("a", "en-us", "en-US", ".lg")),
            ("b.en-us.lg", ResourceName("b", "en-us", "en-us", ".lg")),
            ("c.en.lg", ResourceName("c", "en", "en", ".lg")),
            ("main.dialog.lg", ResourceName("main.dialog", "", "", ".lg")),
            ("NormalStructuredLG.lg", ResourceName("NormalStructuredLG", "", "", ".lg")),
            ("greet.v2.lg", ResourceName("greet.v2", "", "", ".lg")),
        ],
    )
    def test_convention(self, resource_id: str, expected: ResourceName) -> None:
        """Locale segment is recognized only when it has locale shape."""
        assert parse_resource_id(resource_id) == expected

    def test_no_extension(self) -> None:
        """Ids without a dot are neutral with the whole id as base name."""
        assert parse_resource_id("README") == ResourceName("README", "", "", "")

    def test_leading_dot(self) -> None:
        """Hidden-file style ids keep the whole id as base name."""
        assert parse_resource_id(".lg").base_name == ".lg"

    def test_locale_segment_alone_is_base_name(self) -> None:
        """"en.lg" is the neutral resource named "en"."""
        name = parse_resource_id("en.lg")
        assert (name.base_name, name.locale) == ("en", "")


class TestResource:
    """Resource.create derives base name and locale once."""

    def test_create_derives_parts(self) -> None:
        """Derived fields follow parse_resource_id."""
        resource = Resource.create("test.en-GB.lg", "# test\n- hi")

        assert resource.id == "test.en-GB.lg"
        assert resource.base_name == "test"
        assert resource.locale == "en-gb"
        assert resource.locale_tag == "en-GB"
        assert not resource.is_neutral

    def test_neutral(self) -> None:
        """Resources without a locale segment are neutral."""
        assert Resource.create("test.lg", "").is_neutral

    def test_immutable(self) -> None:
        """Resources are frozen."""
        resource = Resource.create("a.lg", "")
        with pytest.raises(AttributeError):
            resource.content = "changed"  # type: ignore[misc]

    def test_repr_omits_content(self) -> None:
        """repr names the id without dumping the content."""
        text = repr(Resource.create("a.lg", "# secret\n- text"))
        assert "a.lg" in text
        assert "secret" not in text
