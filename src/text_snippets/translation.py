"""Translatable text values.

:class:`Translation` stores the source text of a snippet as it was written
in content data and produces display text on demand.  Locale selection is
not decided here: display text comes from whatever ``gettext`` catalog the
host application has installed, and falls back to the source text when
none is.

Legacy hash
-----------
Older saves referenced snippets by an integer fingerprint of their source
text rather than by id.  :meth:`Translation.legacy_hash` reproduces that
fingerprint (djb2 over the UTF-8 bytes, wrapped to a signed 32-bit int) so
:meth:`~text_snippets.registry.SnippetLibrary.migrate_hash_to_id` can map
old references to stable ids.  Texts with a translation context, or texts
that are never translated, had no such fingerprint and return ``None``.
"""

from __future__ import annotations

import gettext
from dataclasses import dataclass
from collections.abc import Mapping
from typing import Any

_DJB2_SEED = 5381
_U32_MASK = 0xFFFFFFFF


def djb2_hash(data: bytes) -> int:
    """Return the djb2 hash of *data* as a signed 32-bit integer."""
    h = _DJB2_SEED
    for byte in data:
        h = ((h << 5) + h + byte) & _U32_MASK
    if h >= 0x80000000:
        h -= 0x100000000
    return h


@dataclass(frozen=True, slots=True)
class Translation:
    """A localizable piece of text.

    Attributes:
        raw:               Source text as written in content data.
        context:           Optional ``msgctxt`` disambiguating identical
                           source strings.
        needs_translation: ``False`` for text that is shown verbatim
                           (see :meth:`no_translation`).
    """

    raw: str = ""
    context: str | None = None
    needs_translation: bool = True

    @classmethod
    def no_translation(cls, text: str) -> Translation:
        """Wrap *text* so that it is displayed as-is in every locale."""
        return cls(raw=text, needs_translation=False)

    @classmethod
    def from_json(cls, value: Any) -> Translation:
        """Read a translation from a parsed content value.

        Accepts a plain string, or a mapping with a required ``str`` key and
        an optional ``ctxt`` key.

        Raises:
            TypeError:  If *value* has the wrong shape.
            KeyError:   If a mapping lacks ``str``.
        """
        if isinstance(value, str):
            return cls(raw=value)
        if isinstance(value, Mapping):
            if "str" not in value:
                raise KeyError("str")
            raw = value["str"]
            ctxt = value.get("ctxt")
            if not isinstance(raw, str) or (ctxt is not None and not isinstance(ctxt, str)):
                raise TypeError("translation 'str' and 'ctxt' must be strings")
            return cls(raw=raw, context=ctxt)
        raise TypeError(f"expected a string or mapping, got {type(value).__name__}")

    def empty(self) -> bool:
        return not self.raw

    def translated(self) -> str:
        """Return the display text for the active locale."""
        if not self.raw or not self.needs_translation:
            return self.raw
        if self.context is not None:
            return gettext.pgettext(self.context, self.raw)
        return gettext.gettext(self.raw)

    def legacy_hash(self) -> int | None:
        """Return the legacy integer fingerprint, or ``None`` if it never had one."""
        if not self.needs_translation or self.context is not None:
            return None
        return djb2_hash(self.raw.encode("utf-8"))
