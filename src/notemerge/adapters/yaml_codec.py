import io
import re
import tomllib
from typing import Any

import yaml

_YAML_FM = re.compile(r"^\s*---\s*\n(.*?)\n---\s*(?:\n|$)", re.DOTALL)
_TOML_FM = re.compile(r"^\s*\+\+\+\s*\n(.*?)\n\+\+\+\s*(?:\n|$)", re.DOTALL)
_ORG_KEYWORD = re.compile(r"^#\+(\w+):[ \t]*(.*)$", re.MULTILINE)
_TEXT_FIELD = re.compile(r"^(\w+)\s*:[ \t]*(.*)$", re.MULTILINE)


class YamlFrontmatter:
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _YAML_FM.match(text)
        if not m:
            return {}, text
        try:
            fm = yaml.safe_load(io.StringIO(m.group(1))) or {}
        except yaml.YAMLError:
            return {}, text
        if not isinstance(fm, dict):
            return {}, text
        return fm, text[m.end() :]


class TomlFrontmatter:
    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        m = _TOML_FM.match(text)
        if not m:
            return {}, text
        try:
            fm = tomllib.loads(m.group(1))
        except tomllib.TOMLDecodeError:
            return {}, text
        return fm, text[m.end() :]


class OrgKeywords:
    """`#+key: value` lines at the top of an org file."""

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        head, _, body = text.partition("\n\n")
        meta: dict[str, Any] = {}
        for m in _ORG_KEYWORD.finditer(head):
            meta.setdefault(m.group(1).lower(), m.group(2).strip())
        return meta, body


class TextFields:
    """`key: value` lines up to the first blank line of a plain text file."""

    def decode(self, text: str) -> tuple[dict[str, Any], str]:
        head, _, body = text.partition("\n\n")
        meta: dict[str, Any] = {}
        for m in _TEXT_FIELD.finditer(head):
            meta.setdefault(m.group(1).lower(), m.group(2).strip())
        return meta, body


def decode_markdown(text: str) -> dict[str, Any]:
    """Read YAML (`---`) or TOML (`+++`) front matter, whichever is present."""
    if _YAML_FM.match(text):
        return YamlFrontmatter().decode(text)[0]
    if _TOML_FM.match(text):
        return TomlFrontmatter().decode(text)[0]
    return {}
