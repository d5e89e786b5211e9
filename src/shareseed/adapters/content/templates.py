"""Built-in content stubs: just enough leading bytes to look like the real type."""

from __future__ import annotations

from collections.abc import Mapping


# Magic numbers / minimal headers keyed by lower-case extension.
DEFAULT_STUBS: dict[str, bytes] = {
    "pdf": b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n",
    "docx": b"PK\x03\x04\x14\x00\x06\x00",
    "xlsx": b"PK\x03\x04\x14\x00\x06\x00",
    "pptx": b"PK\x03\x04\x14\x00\x06\x00",
    "zip": b"PK\x03\x04",
    "doc": b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
    "xls": b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
    "ppt": b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
    "msg": b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1",
    "png": b"\x89PNG\r\n\x1a\n",
    "jpg": b"\xff\xd8\xff\xe0\x00\x10JFIF\x00",
    "jpeg": b"\xff\xd8\xff\xe0\x00\x10JFIF\x00",
    "gif": b"GIF89a",
    "txt": b"Draft - do not distribute\r\n",
    "csv": b"id,name,amount\r\n",
    "log": b"[INFO] service started\r\n",
    "xml": b'<?xml version="1.0" encoding="UTF-8"?>\r\n',
    "html": b"<!DOCTYPE html>\r\n",
    "rtf": b"{\\rtf1\\ansi\r\n",
    "clutter": b"",
}


class TemplateStubProvider:
    """ContentStubProvider backed by a table of per-type stub bytes.

    Args:
        stubs: Extra or replacement stubs, merged over DEFAULT_STUBS.
            Keys are matched case-insensitively, with or without a dot.
    """

    def __init__(self, stubs: Mapping[str, bytes] | None = None) -> None:
        self._stubs = dict(DEFAULT_STUBS)
        for kind, data in (stubs or {}).items():
            self._stubs[self._key(kind)] = data

    @staticmethod
    def _key(kind: str) -> str:
        return kind.lower().lstrip(".")

    def stub_for(self, kind: str) -> bytes:
        """Return the stub for kind, or b"" for unknown kinds."""
        return self._stubs.get(self._key(kind), b"")

    def kinds(self) -> list[str]:
        """Content types with a non-empty stub."""
        return sorted(k for k, v in self._stubs.items() if v)
