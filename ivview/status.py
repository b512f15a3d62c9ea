"""Status line template with a fixed set of placeholders."""

from __future__ import annotations
from dataclasses import dataclass
from string import Formatter
from typing import Any, Iterable, Mapping, Tuple

MISSING = "-"


class StatusFormatError(ValueError):
    """The template is malformed or uses an unknown placeholder."""


@dataclass(frozen=True)
class StatusFormat:
    """A parsed ``"{index}/{nimages} {filename}"`` style template.

    Only bare placeholders are accepted; conversions and format specs are
    rejected at parse time so rendering can't fail later.
    """
    source: str
    parts: Tuple[Tuple[str, str], ...]  # (literal text, key or "")

    @classmethod
    def parse(cls, source: str, allowed_keys: Iterable[str]) -> StatusFormat:
        allowed = set(allowed_keys)
        parts = []
        try:
            for literal, key, spec, conversion in Formatter().parse(source):
                if key is None:
                    parts.append((literal, ""))
                    continue
                if spec or conversion:
                    raise StatusFormatError(f"placeholder {{{key}}} can't carry a format spec")
                if key not in allowed:
                    raise StatusFormatError(
                        f"unknown placeholder {{{key}}}, expected one of {sorted(allowed)}")
                parts.append((literal, key))
        except ValueError as e:
            if isinstance(e, StatusFormatError):
                raise
            raise StatusFormatError(f"malformed status format {source!r}: {e}") from e
        return cls(source, tuple(parts))

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(key for _, key in self.parts if key)

    def render(self, values: Mapping[str, Any]) -> str:
        out = []
        for literal, key in self.parts:
            out.append(literal)
            if key:
                value = values.get(key)
                out.append(MISSING if value is None else str(value))
        return "".join(out)
