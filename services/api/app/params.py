"""Request parameters with an explicit allow-list for mass assignment.

HTML forms post flat bracketed keys (`question[title]=...`). `Parameters`
nests them into a mapping and offers the two operations handlers use before
touching the database:

    attrs = params.require("question").permit("title", "body")

`require` fails with `ParameterMissing` when the key is absent or empty, and
`permit` returns a copy restricted to the named keys. Only permitted
parameters may be passed to the repository; anything else raises
`ForbiddenAttributes`.
"""

import re
from collections.abc import Iterable, Mapping
from typing import Any

from .errors import ParameterMissing
from .logging_config import get_logger

logger = get_logger(__name__)

_KEY_RE = re.compile(r"\[([^\[\]]*)\]")


def _split_key(key: str) -> list[str]:
    """Split `question[title]` into `["question", "title"]`.

    An empty segment (`tags[]`) is kept as "" and means "append".
    """
    head, _, rest = key.partition("[")
    if not rest:
        return [key]
    return [head] + _KEY_RE.findall("[" + rest)


def _assign(target: dict, path: list[str], value: str) -> None:
    node = target
    for i, part in enumerate(path[:-1]):
        if path[i + 1] == "":
            # "tags[]" collects repeated keys into a list
            items = node.get(part)
            if not isinstance(items, list):
                items = node[part] = []
            items.append(value)
            return
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child
    node[path[-1]] = value


class Parameters(Mapping):
    """Read-only nested request parameters."""

    def __init__(self, data: Mapping | None = None, permitted: bool = False):
        self._data = {
            k: Parameters(v, permitted) if isinstance(v, Mapping) else v
            for k, v in (data or {}).items()
        }
        self.permitted = permitted

    @classmethod
    def from_pairs(cls, pairs: Iterable[tuple[str, Any]]) -> "Parameters":
        """Build nested parameters from flat (key, value) pairs."""
        data: dict = {}
        for key, value in pairs:
            _assign(data, _split_key(key), value)
        return cls(data)

    def require(self, key: str) -> "Parameters":
        """Return the nested parameters under `key`.

        Raises:
            ParameterMissing: If `key` is absent, empty, or not a nested mapping.
        """
        value = self._data.get(key)
        if not isinstance(value, Parameters) or not value:
            raise ParameterMissing(key)
        return value

    def permit(self, *names: str) -> "Parameters":
        """Return a permitted copy holding only the named scalar values."""
        allowed = {}
        for name in names:
            value = self._data.get(name)
            if name in self._data and not isinstance(value, (Parameters, list)):
                allowed[name] = value
        unpermitted = sorted(set(self._data) - set(allowed))
        if unpermitted:
            logger.debug("unpermitted_parameters", keys=unpermitted)
        return Parameters(allowed, permitted=True)

    def to_dict(self) -> dict:
        return {
            k: v.to_dict() if isinstance(v, Parameters) else v
            for k, v in self._data.items()
        }

    def __getitem__(self, key):
        return self._data[key]

    def __iter__(self):
        return iter(self._data)

    def __len__(self):
        return len(self._data)

    def __repr__(self) -> str:
        return f"<Parameters {self.to_dict()!r} permitted={self.permitted}>"
