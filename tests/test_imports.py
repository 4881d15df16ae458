"""Tests for locale-aware import resolution."""

from __future__ import annotations

import pytest

from lgengine.diagnostics import ImportNotFoundError
from lgengine.locale_utils import resolve_fallback_chain
from lgengine.localization import LocaleBucket, Resource, group_by_locale, resolve_import


@pytest.fixture
def bucket() -> LocaleBucket:
    return group_by_locale(
        Resource.create(rid, "")
        for rid in (
            "a.lg",
            "a.en-US.lg",
            "b.lg",
            "b.en-us.lg",
            "c.lg",
            "c.en.lg",
            "test.lg",
            "test.en.lg",
            "test.en-US.lg",
        )
    )


def _chain(bucket: LocaleBucket, locale: str) -> tuple[str, ...]:
    return resolve_fallback_chain(locale, bucket.locales)


class TestResolveImport:
    """resolve_import follows the evaluating resource's fallback chain."""

    def test_regional_chain(self, bucket: LocaleBucket) -> None:
        """Imports from a regional resource reach the most specific variant."""
        source = bucket.find("a", "en-us")
        assert source is not None
        chain = _chain(bucket, "en-US")

        assert resolve_import(source, "b", chain, bucket).id == "b.en-us.lg"
        assert resolve_import(source, "c", chain, bucket).id == "c.en.lg"

    def test_neutral_chain(self, bucket: LocaleBucket) -> None:
        """Imports from a neutral resource reach neutral targets."""
        source = bucket.find("a", "")
        assert source is not None
        chain = _chain(bucket, "")

        assert resolve_import(source, "b", chain, bucket).id == "b.lg"

    def test_locale_hint(self, bucket: LocaleBucket) -> None:
        """An explicit locale in the import path pins the bucket."""
        source = bucket.find("a", "")
        assert source is not None

        resolved = resolve_import(source, "b", ("",), bucket, locale_hint="en-US")

        assert resolved.id == "b.en-us.lg"

    def test_locale_hint_missing(self, bucket: LocaleBucket) -> None:
        """A pinned locale without the target does not fall back."""
        source = bucket.find("a", "")
        assert source is not None

        with pytest.raises(ImportNotFoundError) as exc_info:
            resolve_import(source, "c", ("",), bucket, locale_hint="fr")

        assert exc_info.value.fallback_chain == ("fr",)

    @pytest.mark.parametrize(
        ("source_locale", "expected"),
        [("en-us", "test.en.lg"), ("en", "test.lg")],
    )
    def test_self_named_import_is_more_general(
        self, bucket: LocaleBucket, source_locale: str, expected: str
    ) -> None:
        """test.en-US.lg importing test.lg reaches the next general variant."""
        source = bucket.find("test", source_locale)
        assert source is not None

        resolved = resolve_import(source, "test", _chain(bucket, source_locale), bucket)

        assert resolved.id == expected

    def test_self_named_from_neutral_not_found(self, bucket: LocaleBucket) -> None:
        """A neutral resource cannot import itself."""
        source = bucket.find("test", "")
        assert source is not None

        with pytest.raises(ImportNotFoundError):
            resolve_import(source, "test", ("",), bucket)

    def test_not_found(self, bucket: LocaleBucket) -> None:
        """Missing targets raise with the searched chain."""
        source = bucket.find("a", "en-us")
        assert source is not None

        with pytest.raises(ImportNotFoundError) as exc_info:
            resolve_import(source, "missing", ("en-us", ""), bucket)

        assert exc_info.value.target == "missing"
        assert exc_info.value.fallback_chain == ("en-us", "")
        assert "missing" in str(exc_info.value)
