# src/ingestor/csv_rows.py
"""Lazy CSV row decoding over a byte-line stream.

Rows are positional; column names in a header row are never consulted.
A bad row is logged and dropped, the stream keeps going.
"""
import csv, logging

from ingest_common.errors import DecodeError

logger = logging.getLogger(__name__)

BOM = "\ufeff"


def _decoded(lines, source, start, pos):
    # pos[0] tracks the physical line number of the last line handed to csv.
    for n, raw in enumerate(lines, start=start):
        pos[0] = n
        try:
            text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        except UnicodeDecodeError as exc:
            logger.error("%s line %d skipped: %s", source, n, DecodeError(str(exc)))
            continue
        if n == 1:
            text = text.lstrip(BOM)
        yield text


def read_rows(lines, *, width, has_header=True, source=""):
    """Yield rows of at least ``width`` string fields from ``lines``.

    ``lines`` is any iterable of bytes or str lines, e.g. botocore's
    ``StreamingBody.iter_lines(keepends=True)``. Single pass.

    The header is the first physical line and is dropped before decoding,
    so a header that fails to decode never costs a data row.
    """
    lines = iter(lines)
    start = 1
    if has_header:
        next(lines, None)
        start = 2
    pos = [start - 1]
    reader = csv.reader(_decoded(lines, source, start, pos))
    while True:
        try:
            row = next(reader)
        except StopIteration:
            return
        except csv.Error as exc:
            logger.error("%s line %d skipped: %s", source, pos[0], DecodeError(str(exc)))
            continue
        if not row:
            continue
        if len(row) < width:
            logger.error("%s line %d skipped: %s", source, pos[0],
                         DecodeError(f"expected {width} fields, got {len(row)}"))
            continue
        yield row
