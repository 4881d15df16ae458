"""Tests for resource providers and load summaries."""

from __future__ import annotations

from pathlib import Path

import pytest

from lgengine.enums import LoadStatus
from lgengine.localization import (
    FolderResourceProvider,
    LoadSummary,
    MemoryResourceProvider,
    ResourceEntry,
    ResourceLoadResult,
    load_resources,
)

LG_FILES = [
    "NormalStructuredLG.lg",
    "a.en-US.lg",
    "a.lg",
    "b.en-us.lg",
    "b.lg",
    "c.en.lg",
    "c.lg",
    "root.lg",
    "subDialog.lg",
    "test.de.lg",
    "test.en-GB.lg",
    "test.en-US.lg",
    "test.en.lg",
    "test.fr.lg",
    "test.lg",
]


class TestMemoryResourceProvider:
    """Dictionary-backed provider."""

    def test_lists_in_insertion_order(self) -> None:
        """Enumeration follows mapping order."""
        provider = MemoryResourceProvider({"b.lg": "x", "a.lg": "y"})
        assert [entry.id for entry in provider.list_resources()] == ["b.lg", "a.lg"]

    def test_get_resource(self) -> None:
        """Known ids return their entry."""
        provider = MemoryResourceProvider({"a.lg": "# t\n- a"})
        assert provider.get_resource("a.lg") == ResourceEntry("a.lg", "# t\n- a")

    def test_get_missing_raises_key_error(self) -> None:
        """Unknown ids raise KeyError."""
        with pytest.raises(KeyError):
            MemoryResourceProvider().get_resource("missing.lg")


class TestFolderResourceProvider:
    """Disk-backed provider."""

    def test_lists_sorted_lg_files(self, provider: FolderResourceProvider) -> None:
        """Every .lg file under the root is listed in sorted path order."""
        assert [entry.id for entry in provider.list_resources()] == LG_FILES

    def test_reads_content(self, provider: FolderResourceProvider) -> None:
        """Content is decoded UTF-8 text."""
        assert "from c.en.lg" in provider.get_resource("c.en.lg").content

    def test_root_must_exist(self, tmp_path: Path) -> None:
        """A missing root is rejected at construction."""
        with pytest.raises(ValueError, match="not a directory"):
            FolderResourceProvider(tmp_path / "missing")

    @pytest.mark.parametrize("resource_id", ["../secret.lg", "sub/a.lg", "sub\\a.lg"])
    def test_path_components_rejected(
        self, provider: FolderResourceProvider, resource_id: str
    ) -> None:
        """Ids are plain file names; traversal is refused."""
        with pytest.raises(ValueError, match="Path components"):
            provider.get_resource(resource_id)

    def test_missing_file(self, provider: FolderResourceProvider) -> None:
        """Unknown file names raise KeyError."""
        with pytest.raises(KeyError):
            provider.get_resource("nothing.lg")

    def test_recursive_and_flat(self, tmp_path: Path) -> None:
        """Sub-directories are searched unless recursive is off."""
        (tmp_path / "top.lg").write_text("# t\n- top", encoding="utf-8")
        (tmp_path / "nested").mkdir()
        (tmp_path / "nested" / "deep.lg").write_text("# t\n- deep", encoding="utf-8")
        (tmp_path / "notes.txt").write_text("ignored", encoding="utf-8")

        recursive = FolderResourceProvider(tmp_path)
        flat = FolderResourceProvider(tmp_path, recursive=False)

        assert {entry.id for entry in recursive.list_resources()} == {"top.lg", "deep.lg"}
        assert [entry.id for entry in flat.list_resources()] == ["top.lg"]
        assert recursive.get_resource("deep.lg").content == "# t\n- deep"

    def test_duplicate_file_names(self, tmp_path: Path) -> None:
        """Two files with one name in different folders are ambiguous."""
        for folder in ("one", "two"):
            (tmp_path / folder).mkdir()
            (tmp_path / folder / "a.lg").write_text("# t\n- a", encoding="utf-8")

        with pytest.raises(ValueError, match="Duplicate resource id 'a.lg'"):
            FolderResourceProvider(tmp_path).list_resources()


class TestLoadResources:
    """load_resources turns provider entries into Resources."""

    def test_skips_other_extensions(self) -> None:
        """Entries with another extension are recorded as skipped."""
        provider = MemoryResourceProvider({"a.lg": "# t\n- a", "a.lu": "intent", "b.LG": "# t\n- b"})

        resources, summary = load_resources(provider)

        assert [r.id for r in resources] == ["a.lg", "b.LG"]
        assert summary.successful == 2
        assert summary.skipped == 1
        assert summary.errors == 0

    def test_non_text_content_is_an_error(self) -> None:
        """Non-str content is reported, not raised."""
        provider = MemoryResourceProvider({"a.lg": b"bytes"})  # type: ignore[dict-item]

        resources, summary = load_resources(provider)

        assert resources == ()
        (failure,) = summary.get_errors()
        assert failure.resource_id == "a.lg"
        assert isinstance(failure.error, TypeError)

    def test_custom_extension(self) -> None:
        """The extension filter is configurable."""
        provider = MemoryResourceProvider({"a.lg": "", "a.tmpl": ""})
        resources, _ = load_resources(provider, extension=".tmpl")
        assert [r.id for r in resources] == ["a.tmpl"]


class TestLoadSummary:
    """Aggregated load results."""

    def test_counts_and_repr(self) -> None:
        """Counts by status and a compact repr."""
        summary = LoadSummary((
            ResourceLoadResult("a.lg", LoadStatus.SUCCESS),
            ResourceLoadResult("b.txt", LoadStatus.SKIPPED),
            ResourceLoadResult("c.lg", LoadStatus.ERROR, OSError("boom")),
        ))

        assert (summary.successful, summary.skipped, summary.errors) == (1, 1, 1)
        assert repr(summary) == "LoadSummary(total=3, ok=1, skipped=1, errors=1)"
        assert summary.results[0].is_success
        assert not summary.results[2].is_success
