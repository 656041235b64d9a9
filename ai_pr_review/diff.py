from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

DEV_NULL = "/dev/null"

HUNK_RE = re.compile(r'^@@\s+-(\d+)(?:,(\d+))?\s+\+(\d+)(?:,(\d+))?\s+@@')
_GIT_HEADER_RE = re.compile(r'^diff --git "?a/(.+?)"? "?b/(.+?)"?$')


@dataclass
class Change:
    """A single line inside a hunk.

    ``content`` keeps the leading ``+``/``-``/`` `` marker, the way it
    appears in the diff.
    """

    type: str  # "add" | "del" | "normal"
    content: str
    old_line: Optional[int] = None
    new_line: Optional[int] = None

    @property
    def line_number(self) -> Optional[int]:
        return self.new_line if self.new_line is not None else self.old_line


@dataclass
class DiffChunk:
    content: str
    old_start: int
    old_lines: int
    new_start: int
    new_lines: int
    changes: List[Change] = field(default_factory=list)


@dataclass
class DiffFile:
    from_path: Optional[str] = None
    to_path: Optional[str] = None
    chunks: List[DiffChunk] = field(default_factory=list)
    new: bool = False
    deleted: bool = False
    additions: int = 0
    deletions: int = 0

    @property
    def is_deleted(self) -> bool:
        return self.to_path == DEV_NULL


class DiffParser:
    """Reads a unified diff into per-file records with their hunks."""

    def parse(self, unified_diff: Optional[str]) -> List[DiffFile]:
        if not unified_diff:
            return []

        files: List[DiffFile] = []
        current: Optional[DiffFile] = None
        chunk: Optional[DiffChunk] = None
        old_ln = new_ln = 0
        old_left = new_left = 0

        # only "\n" ends a line; str.splitlines() also breaks on \x0c, \x85 and \u2028
        lines = unified_diff.split('\n')
        if lines and lines[-1] == '':
            lines.pop()

        for raw in lines:
            if raw.endswith('\r'):
                raw = raw[:-1]
            # inside a hunk every +/-/space line is content, even "--- x"
            if chunk is not None and (old_left > 0 or new_left > 0):
                if raw.startswith('+'):
                    chunk.changes.append(Change("add", raw, new_line=new_ln))
                    current.additions += 1
                    new_ln += 1
                    new_left -= 1
                    continue
                if raw.startswith('-'):
                    chunk.changes.append(Change("del", raw, old_line=old_ln))
                    current.deletions += 1
                    old_ln += 1
                    old_left -= 1
                    continue
                if raw.startswith(' ') or raw == '':
                    line = raw or ' '
                    chunk.changes.append(Change("normal", line, old_line=old_ln, new_line=new_ln))
                    old_ln += 1
                    new_ln += 1
                    old_left -= 1
                    new_left -= 1
                    continue

            if raw.startswith('diff --git '):
                current = DiffFile()
                files.append(current)
                chunk = None
                m = _GIT_HEADER_RE.match(raw)
                if m:
                    current.from_path, current.to_path = m.group(1), m.group(2)
                continue

            if raw.startswith('--- '):
                if current is None or current.chunks:
                    # plain unified diff without a git header
                    current = DiffFile()
                    files.append(current)
                    chunk = None
                current.from_path = _strip_prefix(raw[4:], 'a/')
                continue

            if raw.startswith('+++ ') and current is not None:
                current.to_path = _strip_prefix(raw[4:], 'b/')
                continue

            if current is None:
                continue

            if raw.startswith('new file mode'):
                current.new = True
                current.from_path = DEV_NULL
                continue
            if raw.startswith('deleted file mode'):
                current.deleted = True
                current.to_path = DEV_NULL
                continue

            m = HUNK_RE.match(raw)
            if m:
                old_ln = int(m.group(1))
                old_left = int(m.group(2)) if m.group(2) is not None else 1
                new_ln = int(m.group(3))
                new_left = int(m.group(4)) if m.group(4) is not None else 1
                chunk = DiffChunk(
                    content=raw,
                    old_start=old_ln,
                    old_lines=old_left,
                    new_start=new_ln,
                    new_lines=new_left,
                )
                current.chunks.append(chunk)
                continue
            # index lines, similarity headers, "\ No newline at end of file", binary notices

        return files


def _strip_prefix(path: str, prefix: str) -> str:
    # "--- a/file.py\t2024-01-01 ..." carries an optional timestamp
    path = path.split('\t', 1)[0].strip()
    if path.startswith('"') and path.endswith('"'):
        path = path[1:-1]
    if path == DEV_NULL:
        return path
    return path[len(prefix):] if path.startswith(prefix) else path


def parse_patterns(raw: Optional[str]) -> List[str]:
    """Split a comma-separated pattern string into trimmed, non-empty globs."""
    if not raw:
        return []
    return [part.strip() for part in raw.split(',') if part.strip()]


@lru_cache(maxsize=256)
def _glob_regex(pattern: str) -> re.Pattern:
    """Translate a path glob into a regex.

    ``*`` and ``?`` stay within one path segment, ``**`` spans segments and
    ``[...]`` / ``[!...]`` are character classes.
    """
    out = []
    i, n = 0, len(pattern)
    while i < n:
        ch = pattern[i]
        if ch == '*':
            if i + 1 < n and pattern[i + 1] == '*':
                i += 2
                if i < n and pattern[i] == '/':
                    out.append('(?:.*/)?')
                    i += 1
                else:
                    out.append('.*')
                continue
            out.append('[^/]*')
        elif ch == '?':
            out.append('[^/]')
        elif ch == '[':
            translated = _bracket_class(pattern, i)
            if translated is None:
                out.append(re.escape(ch))
            else:
                cls, i = translated
                out.append(cls)
        else:
            out.append(re.escape(ch))
        i += 1
    return re.compile(''.join(out) + r'\Z')


_POSIX_CLASSES = {
    "alnum": "a-zA-Z0-9",
    "alpha": "a-zA-Z",
    "digit": "0-9",
    "lower": "a-z",
    "upper": "A-Z",
    "xdigit": "0-9A-Fa-f",
    "space": r"\s",
    "word": r"\w",
    "punct": re.escape("!\"#$%&'()*+,-./:;<=>?@[\\]^_`{|}~"),
}


def _bracket_class(pattern: str, start: int) -> Optional[Tuple[str, int]]:
    """Translate the ``[...]`` class opening at ``start``.

    Returns the regex and the index of the closing ``]``, or None when the
    bracket has to be taken literally (unclosed, empty or invalid range).
    """
    n = len(pattern)
    j = start + 1
    negate = j < n and pattern[j] in '!^'
    if negate:
        j += 1

    members: List[str] = []
    # a "]" right after the opening bracket is a member, not the end
    if j < n and pattern[j] == ']':
        members.append(re.escape(']'))
        j += 1

    while j < n:
        if pattern.startswith('[:', j):
            close = pattern.find(':]', j + 2)
            name = pattern[j + 2:close] if close != -1 else None
            if name in _POSIX_CLASSES:
                members.append(_POSIX_CLASSES[name])
                j = close + 2
                continue
        ch = pattern[j]
        if ch == ']':
            break
        members.append(ch if ch == '-' else re.escape(ch))
        j += 1
    else:
        return None

    if not members:
        return None
    if negate:
        members.append('/')
    cls = f"[{'^' if negate else ''}{''.join(members)}]"
    try:
        re.compile(cls)
    except re.error:
        return None
    return cls, j


def matches_glob(path: str, pattern: str) -> bool:
    return _glob_regex(pattern).match(path) is not None


def filter_excluded(files: Iterable[DiffFile], patterns: Sequence[str]) -> List[DiffFile]:
    """Drop files whose target path matches any exclude pattern."""
    kept: List[DiffFile] = []
    for f in files:
        path = f.to_path or ""
        if any(matches_glob(path, p) for p in patterns):
            continue
        kept.append(f)
    return kept
