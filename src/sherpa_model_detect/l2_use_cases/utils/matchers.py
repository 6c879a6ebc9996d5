"""Pure functions for picking model files out of a directory index by name."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from sherpa_model_detect.l1_entities.file_entry import FileEntry

_WORD_SEPARATORS = frozenset('/-_. ')


def find_by_exact_name(files: Sequence[FileEntry], name: str) -> str | None:
    """Path of the first file whose basename equals *name* (case-insensitive)."""
    target = name.lower()
    for entry in files:
        if entry.name_lower == target:
            return entry.path
    return None


def find_by_suffix(files: Sequence[FileEntry], suffix: str) -> str | None:
    """Exact basename match first, then the first basename ending with *suffix*.

    Catches prefixed variants such as ``tiny.en-tokens.txt``.
    """
    exact = find_by_exact_name(files, suffix)
    if exact is not None:
        return exact
    target = suffix.lower()
    for entry in files:
        if entry.name_lower.endswith(target):
            return entry.path
    return None


def _is_int8(entry: FileEntry) -> bool:
    return 'int8' in entry.name_lower


def _pick_by_quantization(matches: list[FileEntry], prefer_int8: bool | None) -> FileEntry:
    if prefer_int8 is False:
        preferred = [m for m in matches if not _is_int8(m)]
    else:
        preferred = [m for m in matches if _is_int8(m)]
    return preferred[0] if preferred else matches[0]


def find_by_any_token(
    files: Sequence[FileEntry],
    tokens: Iterable[str],
    prefer_int8: bool | None = None,
) -> str | None:
    """First ``.onnx`` file whose name contains one of *tokens*, tried in order.

    When both quantized and full-precision weights match, *prefer_int8* decides:
    True or None picks the int8 file, False picks the other one.
    """
    for token in tokens:
        needle = token.lower()
        matches = [f for f in files if f.is_onnx and needle in f.name_lower]
        if matches:
            return _pick_by_quantization(matches, prefer_int8).path
    return None


def find_largest_excluding(files: Sequence[FileEntry], exclude_tokens: Iterable[str]) -> str | None:
    """Largest ``.onnx`` file whose name contains none of *exclude_tokens*."""
    excluded = [t.lower() for t in exclude_tokens]
    best: FileEntry | None = None
    for entry in files:
        if not entry.is_onnx:
            continue
        if any(t in entry.name_lower for t in excluded):
            continue
        if best is None or entry.size > best.size:
            best = entry
    return best.path if best is not None else None


def contains_word(haystack: str, word: str) -> bool:
    """True if *word* occurs in *haystack* delimited by path/name separators or the string ends.

    ``contains_word('sherpa-onnx-t-one', 'one')`` is True, while
    ``contains_word('cantonese', 'tone')`` is False.
    """
    if not word:
        return False
    start = haystack.find(word)
    while start != -1:
        end = start + len(word)
        before_ok = start == 0 or haystack[start - 1] in _WORD_SEPARATORS
        after_ok = end == len(haystack) or haystack[end] in _WORD_SEPARATORS
        if before_ok and after_ok:
            return True
        start = haystack.find(word, start + 1)
    return False


def contains_any_word(haystack: str, words: Iterable[str]) -> bool:
    return any(contains_word(haystack, w) for w in words)
