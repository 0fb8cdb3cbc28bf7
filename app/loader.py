"""
Tile table loading.

Responsibilities:
- encoding detection + newline normalization
- delimiter detection over a sample of the first non-blank lines
- header + row parsing into immutable tiles
- fallback dataset when the source is missing or yields nothing
"""

from __future__ import annotations

import csv
import logging
from collections import Counter
from pathlib import Path
from typing import List, Optional, Sequence, Union

from charset_normalizer import from_bytes

from . import rules
from .models import LoadResult, Tile

logger = logging.getLogger(__name__)


class SourceUnavailable(Exception):
    """The tile source could not be opened or read."""


def decode_text(raw: bytes) -> tuple[str, str]:
    """
    Decode input bytes to text.

    Rules:
    - UTF-8 is the expected encoding; a BOM is kept and stripped per line later.
    - Otherwise use charset-normalizer's best guess.
    - If that fails too, decode UTF-8 with replacement characters.
    """
    try:
        return raw.decode("utf-8"), "utf-8"
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        try:
            return raw.decode(match.encoding), match.encoding
        except (UnicodeDecodeError, LookupError):
            logger.debug("charset-normalizer guess %s failed to decode", match.encoding)

    return raw.decode("utf-8", errors="replace"), "utf-8"


def normalize_newlines(text: str) -> str:
    return text.replace("\r\n", "\n").replace("\r", "\n")


def strip_bom(value: str) -> str:
    return value.lstrip(rules.BOM)


def parse_line(line: str, delimiter: str) -> List[str]:
    """Split one line into fields; unterminated quotes run to end of line."""
    reader = csv.reader(
        [line],
        delimiter=delimiter,
        quotechar=rules.QUOTE_CHAR,
        escapechar=rules.ESCAPE_CHAR,
        doublequote=True,
        strict=False,
    )
    try:
        return next(reader, [])
    except csv.Error:
        # e.g. a field over csv.field_size_limit()
        return line.split(delimiter)


def sample_lines(lines: Sequence[str], limit: int = rules.SAMPLE_LINE_LIMIT) -> List[str]:
    samples: List[str] = []
    for line in lines:
        if not line.strip():
            continue
        samples.append(strip_bom(line))
        if len(samples) >= limit:
            break
    return samples


def _modal_field_count(samples: Sequence[str], delimiter: str) -> int:
    counts = Counter(len(parse_line(line, delimiter)) for line in samples)
    # most_common keeps first-encountered order among equal frequencies
    return counts.most_common(1)[0][0]


def detect_delimiter(samples: Sequence[str]) -> str:
    if not samples:
        return rules.DEFAULT_DELIMITER

    best = rules.DELIMITER_CANDIDATES[0]
    best_count = -1
    for candidate in rules.DELIMITER_CANDIDATES:
        mode = _modal_field_count(samples, candidate)
        if mode > best_count:
            best, best_count = candidate, mode
    return best


def build_tile(header: Sequence[str], fields: Sequence[str]) -> Optional[Tile]:
    """
    Zip header names to field values positionally.

    Short rows are padded with "", extra fields are ignored and a repeated
    header name keeps its last value. Returns None for a row with no title
    and no links.
    """
    columns = {}
    for i, name in enumerate(header):
        columns[name] = fields[i].strip() if i < len(fields) else ""

    title = columns.get(rules.COL_TITLE, "")
    url = columns.get(rules.COL_LINK, "")
    reference_url = columns.get(rules.COL_REFERENCE_LINK, "")
    if not (title or url or reference_url):
        return None

    return Tile(
        columns=columns,
        url=url,
        reference_url=reference_url,
        icon=columns.get(rules.COL_ICON, ""),
    )


def load_table(raw: bytes, source_name: str = "") -> LoadResult:
    """Parse raw tile-table bytes. Never raises on malformed content."""
    text, encoding = decode_text(raw)
    lines = normalize_newlines(text).split("\n")

    samples = sample_lines(lines)
    delimiter = detect_delimiter(samples)

    header = [name.strip() for name in parse_line(strip_bom(lines[0]), delimiter)]

    rows: List[Tile] = []
    rows_parsed = 0
    rows_discarded = 0
    for line in lines[1:]:
        if not line.strip():
            continue
        rows_parsed += 1
        fields = parse_line(strip_bom(line), delimiter)
        if len(fields) != len(header):
            logger.debug("row %d has %d fields, header has %d", rows_parsed, len(fields), len(header))
        tile = build_tile(header, fields)
        if tile is None:
            rows_discarded += 1
            continue
        rows.append(tile)

    logger.debug(
        "loaded %s: delimiter=%s columns=%d rows=%d discarded=%d",
        source_name or "<bytes>",
        rules.DELIMITER_NAMES[delimiter],
        len(header),
        len(rows),
        rows_discarded,
    )

    return LoadResult(
        source_name=source_name,
        encoding=encoding,
        delimiter=delimiter,
        header=header,
        sample_lines=samples,
        rows_parsed=rows_parsed,
        rows_discarded=rows_discarded,
        rows=rows,
    )


def read_source(path: Union[str, Path]) -> bytes:
    try:
        return Path(path).read_bytes()
    except OSError as e:
        raise SourceUnavailable(f"cannot read tile source {path}: {e}") from e


def fallback_tiles() -> List[Tile]:
    header = [
        rules.COL_TITLE,
        rules.COL_LINK,
        rules.COL_REFERENCE_LINK,
        rules.COL_DESCRIPTION,
        rules.COL_TAGLINES,
        rules.COL_ICON,
    ]
    return [
        build_tile(header, [title, "#", "#", "", rules.FALLBACK_TAG, ""])
        for title in rules.FALLBACK_TITLES
    ]


def with_fallback(result: LoadResult) -> LoadResult:
    """Substitute the built-in dataset when nothing displayable was loaded."""
    if result.rows:
        return result
    return result.model_copy(update={"rows": fallback_tiles(), "fallback": True})


def load_bytes(raw: bytes, source_name: str = "") -> LoadResult:
    result = load_table(raw, source_name)
    if not result.rows and raw.strip():
        logger.warning(
            "no tiles parsed from non-empty source %s (delimiter=%s, header=%s); check header and delimiter",
            source_name or "<bytes>",
            rules.DELIMITER_NAMES[result.delimiter],
            result.header,
        )
    return with_fallback(result)


def load_source(path: Union[str, Path]) -> LoadResult:
    """Read and load the tile source, degrading to the fallback dataset."""
    source_name = Path(path).name
    try:
        raw = read_source(path)
    except SourceUnavailable as e:
        logger.info("%s; using fallback tiles", e)
        return with_fallback(LoadResult(source_name=source_name))
    return load_bytes(raw, source_name)
