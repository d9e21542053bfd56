from __future__ import annotations

import io
import zipfile
import zlib

from sources.errors import MalformedMarkup, NoEmbeddedPayload

MARKUP_SUFFIX = ".kml"

# zipfile raises RuntimeError for encrypted entries, NotImplementedError for
# unsupported compression methods and EOFError for truncated streams.
_UNREADABLE = (zipfile.BadZipFile, zlib.error, RuntimeError, NotImplementedError, EOFError)


def find_markup_entry(names: list[str], *, suffix: str = MARKUP_SUFFIX) -> str | None:
    """
    First entry name ending with `suffix`, in archive directory order.

    Archives with several matching entries are not disambiguated further.
    """
    return next((n for n in names if n.endswith(suffix)), None)


def extract_markup(data: bytes, *, suffix: str = MARKUP_SUFFIX) -> str:
    try:
        with zipfile.ZipFile(io.BytesIO(data)) as zf:
            entry = find_markup_entry(zf.namelist(), suffix=suffix)
            if entry is None:
                raise NoEmbeddedPayload(f"No '{suffix}' entry in archive")
            raw = zf.read(entry)
    except _UNREADABLE as e:
        raise NoEmbeddedPayload(f"Not a readable archive: {e}") from e

    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise MalformedMarkup(f"Archive entry '{entry}' is not UTF-8: {e}") from e
