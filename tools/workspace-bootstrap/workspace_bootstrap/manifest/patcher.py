"""Line-oriented edits for ``pyproject.toml`` manifests.

Every operation takes the manifest text and returns a :class:`PatchResult`.
The text is never parsed and re-serialised: untouched lines are carried over
byte-for-byte so comments, ordering and hand formatting survive. Edits are
additive and idempotent; presence is decided by literal substring checks.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from ..errors import ManifestStructureError

DEPENDENCY_ANCHOR = "dependencies = ["
PROJECT_HEADER = "[project]"
WORKSPACE_HEADER = "[tool.uv.workspace]"
SOURCES_HEADER = "[tool.uv.sources]"

DEFAULT_DEPENDENCY_INDENT = "    "
DEFAULT_MEMBER_INDENT = "  "

_TABLE_HEADER_RE = re.compile(r"^\s*\[{1,2}[A-Za-z0-9_.\- ]+\]{1,2}\s*(#.*)?$")
_BARE_ASSIGNMENT_RE = re.compile(r"^\s*[A-Za-z0-9_\-]+\s*=")
_MEMBERS_RE = re.compile(r"^\s*members\s*=\s*\[")


class PatchOutcome(str, enum.Enum):
    APPLIED = "applied"
    NOOP = "noop"


@dataclass(frozen=True)
class PatchResult:
    text: str
    outcome: PatchOutcome
    message: str

    @property
    def changed(self) -> bool:
        return self.outcome is PatchOutcome.APPLIED


def format_dependency(name: str, location: Optional[str] = None) -> str:
    """Render a dependency entry, optionally as a ``name @ location`` direct reference."""

    if location:
        return f"{name} @ {location}"
    return name


def add_dependency(text: str, entry: str) -> PatchResult:
    """Prepend ``entry`` to the ``dependencies = [`` list of the ``[project]`` table."""

    lines = _split_lines(text)
    index = _find_dependency_anchor(lines)
    if index is None:
        raise ManifestStructureError(
            f"dependency list anchor not found: add a '{DEPENDENCY_ANCHOR}' list to [project] and rerun."
        )
    if f'"{entry}"' in text or f"'{entry}'" in text:
        return PatchResult(text, PatchOutcome.NOOP, f"Dependency '{entry}' already present.")

    quoted = _quote(entry)
    line = lines[index]
    body = _strip_eol(line)
    anchor_end = body.index(DEPENDENCY_ANCHOR) + len(DEPENDENCY_ANCHOR)
    head, rest = body[:anchor_end], body[anchor_end:]

    close = _closing_bracket(rest)
    code = rest[: _code_end(rest)]
    if close is not None or code.strip():
        # Elements share the anchor line; prepend in place.
        existing = rest[:close] if close is not None else code
        if existing.strip():
            rest = f"{quoted}, {rest.lstrip()}"
        else:
            rest = quoted + rest.lstrip()
        lines[index] = head + rest + _eol(line)
    else:
        indent = DEFAULT_DEPENDENCY_INDENT
        element = _first_element(lines, index + 1)
        if element is not None:
            indent = _indent_of(lines[element])
        lines.insert(index + 1, f"{indent}{quoted},{_newline(lines)}")

    return PatchResult("".join(lines), PatchOutcome.APPLIED, f"Added '{entry}' to dependencies.")


def ensure_workspace_member(text: str, member: str) -> PatchResult:
    """Register ``member`` in ``[tool.uv.workspace].members``, creating the section if needed."""

    lines = _split_lines(text)
    header = _find_header(lines, WORKSPACE_HEADER)
    if header is None:
        updated = _append_section(text, lines, WORKSPACE_HEADER, [f"members = [{_quote(member)}]"])
        return PatchResult(updated, PatchOutcome.APPLIED, f"Added {WORKSPACE_HEADER} with member '{member}'.")
    if member in text:
        return PatchResult(text, PatchOutcome.NOOP, f"Workspace member '{member}' already present.")

    members_index = None
    for index in range(header + 1, len(lines)):
        body = _strip_eol(lines[index])
        if _TABLE_HEADER_RE.match(body):
            break
        if _MEMBERS_RE.match(body):
            members_index = index
            break
    if members_index is None:
        raise ManifestStructureError(f"{WORKSPACE_HEADER} has no 'members = [' list to extend.")

    line = lines[members_index]
    body = _strip_eol(line)
    open_end = body.index("[") + 1
    head, rest = body[:open_end], body[open_end:]
    close = _closing_bracket(rest)
    if close is not None:
        inner = rest[:close].rstrip()
        if not inner.strip():
            inner = _quote(member)
        elif inner.endswith(","):
            inner = f"{inner} {_quote(member)}"
        else:
            inner = f"{inner}, {_quote(member)}"
        lines[members_index] = head + inner + rest[close:] + _eol(line)
    else:
        _insert_before_closing(lines, members_index, member)

    return PatchResult("".join(lines), PatchOutcome.APPLIED, f"Added '{member}' to workspace members.")


def ensure_source_binding(text: str, package: str) -> PatchResult:
    """Bind ``package`` to the workspace in ``[tool.uv.sources]``."""

    entry = f"{package} = {{ workspace = true }}"
    lines = _split_lines(text)
    header = _find_header(lines, SOURCES_HEADER)
    if header is None:
        updated = _append_section(text, lines, SOURCES_HEADER, [entry])
        return PatchResult(updated, PatchOutcome.APPLIED, f"Added {SOURCES_HEADER} with '{entry}'.")

    escaped = re.escape(package)
    # Dotted keys (``pkg.workspace = true``) define the same table.
    key_re = re.compile(rf"^\s*(?:{escaped}|\"{escaped}\"|'{escaped}')\s*[.=]")
    for index in range(header + 1, len(lines)):
        body = _strip_eol(lines[index])
        if _TABLE_HEADER_RE.match(body):
            break
        if key_re.match(body):
            return PatchResult(text, PatchOutcome.NOOP, f"Workspace source for '{package}' already present.")

    lines.insert(header + 1, entry + _newline(lines))
    return PatchResult("".join(lines), PatchOutcome.APPLIED, f"Added '{entry}' to {SOURCES_HEADER}.")


def _insert_before_closing(lines: List[str], members_index: int, member: str) -> None:
    last_element: Optional[int] = None
    members_body = _strip_eol(lines[members_index])
    members_rest = members_body[members_body.index("[") + 1 :]
    if members_rest[: _code_end(members_rest)].strip():
        last_element = members_index

    closing: Optional[int] = None
    for index in range(members_index + 1, len(lines)):
        body = _strip_eol(lines[index])
        stripped = body.strip()
        if stripped.startswith("]"):
            closing = index
            break
        close = _closing_bracket(body)
        if close is not None:
            # Last element shares its line with the closing bracket.
            inner = body[:close].rstrip()
            separator = " " if inner.endswith(",") else ", "
            lines[index] = f"{inner}{separator}{_quote(member)}{body[close:]}{_eol(lines[index])}"
            return
        if _TABLE_HEADER_RE.match(body) or _BARE_ASSIGNMENT_RE.match(body):
            raise ManifestStructureError(
                f"members list in {WORKSPACE_HEADER} is not closed before line {index + 1}; refusing to guess."
            )
        if stripped and not stripped.startswith("#"):
            last_element = index
    if closing is None:
        raise ManifestStructureError(f"closing ']' of the members list in {WORKSPACE_HEADER} not found.")

    indent = DEFAULT_MEMBER_INDENT
    if last_element is not None:
        lines[last_element] = _with_trailing_comma(lines[last_element])
        if last_element != members_index:
            indent = _indent_of(lines[last_element])
    lines.insert(closing, f"{indent}{_quote(member)},{_newline(lines)}")


def _find_dependency_anchor(lines: Sequence[str]) -> Optional[int]:
    header = _find_header(lines, PROJECT_HEADER)
    if header is None:
        return None
    for index in range(header + 1, len(lines)):
        body = _strip_eol(lines[index])
        if _TABLE_HEADER_RE.match(body):
            break
        if body.lstrip().startswith(DEPENDENCY_ANCHOR):
            return index
    return None


def _find_header(lines: Sequence[str], header: str) -> Optional[int]:
    header_re = re.compile(rf"^\s*{re.escape(header)}\s*(#.*)?$")
    for index, line in enumerate(lines):
        if header_re.match(_strip_eol(line)):
            return index
    return None


def _first_element(lines: Sequence[str], start: int) -> Optional[int]:
    for index in range(start, len(lines)):
        stripped = _strip_eol(lines[index]).strip()
        if not stripped or stripped.startswith("#"):
            continue
        if stripped.startswith("]"):
            return None
        return index
    return None


def _append_section(text: str, lines: Sequence[str], header: str, entries: Sequence[str]) -> str:
    newline = _newline(lines)
    if text and not text.endswith("\n"):
        text += newline
    prefix = newline if text else ""
    body = "".join(entry + newline for entry in entries)
    return f"{text}{prefix}{header}{newline}{body}"


def _with_trailing_comma(line: str) -> str:
    body = _strip_eol(line)
    code = body[: _code_end(body)].rstrip()
    if code.endswith(",") or code.endswith("["):
        return line
    return code + "," + body[len(code) :] + _eol(line)


def _unquoted(fragment: str) -> Iterator[Tuple[int, str]]:
    quote: Optional[str] = None
    escaped = False
    for index, char in enumerate(fragment):
        if quote:
            if escaped:
                escaped = False
            elif char == "\\" and quote == '"':
                escaped = True
            elif char == quote:
                quote = None
            continue
        if char in ("'", '"'):
            quote = char
            continue
        yield index, char


def _code_end(fragment: str) -> int:
    for index, char in _unquoted(fragment):
        if char == "#":
            return index
    return len(fragment)


def _closing_bracket(fragment: str) -> Optional[int]:
    """Index of the ``]`` closing an already-open list, ignoring strings and comments."""

    depth = 0
    for index, char in _unquoted(fragment):
        if char == "#":
            return None
        if char == "[":
            depth += 1
        elif char == "]":
            if depth == 0:
                return index
            depth -= 1
    return None


def _split_lines(text: str) -> List[str]:
    parts = text.split("\n")
    lines = [part + "\n" for part in parts[:-1]]
    if parts[-1]:
        lines.append(parts[-1])
    return lines


def _strip_eol(line: str) -> str:
    return line.rstrip("\r\n")


def _eol(line: str) -> str:
    return line[len(_strip_eol(line)) :]


def _newline(lines: Sequence[str]) -> str:
    for line in lines:
        if line.endswith("\r\n"):
            return "\r\n"
        if line.endswith("\n"):
            return "\n"
    return "\n"


def _indent_of(line: str) -> str:
    return line[: len(line) - len(line.lstrip(" \t"))]


def _quote(value: str) -> str:
    return f'"{value}"'
