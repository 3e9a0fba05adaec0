"""Tests for the file naming adapter."""

import tempfile
from pathlib import Path

import pytest

from notemerge.adapters.naming import DenoteNaming, desluggify
from notemerge.core.errors import PreconditionError, UnsupportedFlavorError
from notemerge.core.model import Flavor


def test_flavor_from_extension():
    naming = DenoteNaming()
    assert naming.get_flavor(Path("20240101T000000--a.org")) is Flavor.ORG
    assert naming.get_flavor(Path("20240101T000000--a.md")) is Flavor.MARKDOWN
    assert naming.get_flavor(Path("20240101T000000--a.txt")) is Flavor.TEXT


def test_unknown_extension_is_unsupported():
    with pytest.raises(UnsupportedFlavorError):
        DenoteNaming().get_flavor(Path("20240101T000000--a.rst"))


def test_extract_identifier():
    naming = DenoteNaming()
    path = Path("20240101T120000==1a--some-title__tag1_tag2.md")
    assert naming.extract_identifier(path) == "20240101T120000"


def test_extract_identifier_missing():
    with pytest.raises(PreconditionError):
        DenoteNaming().extract_identifier(Path("no-id-here.md"))


def test_desluggify():
    assert desluggify("parallel-transport") == "Parallel transport"
    assert desluggify("") == ""


def test_title_from_filename_when_file_has_none():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "20240101T120000--covariant-derivative__math.txt"
        path.write_text("no metadata here\n")
        assert DenoteNaming().extract_title(path) == "Covariant derivative"


def test_title_from_yaml_frontmatter():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "20240101T120000--slug.md"
        path.write_text('---\ntitle: "Real Title"\ntags: [a]\n---\n\nBody\n')
        assert DenoteNaming().extract_title(path) == "Real Title"


def test_title_from_toml_frontmatter():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "20240101T120000--slug.md"
        path.write_text('+++\ntitle = "Toml Title"\n+++\n\nBody\n')
        assert DenoteNaming().extract_title(path) == "Toml Title"


def test_title_from_org_keyword():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "20240101T120000--slug.org"
        path.write_text("#+title:      Org Title\n#+date: [2024-01-01]\n\n* Heading\n")
        assert DenoteNaming().extract_title(path) == "Org Title"


def test_title_from_text_field():
    with tempfile.TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "20240101T120000--slug.txt"
        path.write_text("title:      Text Title\ndate: 2024-01-01\n\nBody\n")
        assert DenoteNaming().extract_title(path) == "Text Title"


def test_title_of_missing_file_uses_name():
    path = Path("/nonexistent/20240101T120000--gone-note.md")
    assert DenoteNaming().extract_title(path) == "Gone note"
