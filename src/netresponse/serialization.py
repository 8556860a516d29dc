"""JSON body (de)serialisation backed by :class:`pydantic.TypeAdapter`.

The cache stores bodies and headers as JSON text.  Reading them back needs
a *type descriptor* rather than a concrete class because success bodies
are often parameterised (``list[User]``, ``dict[str, Order]``).  A
``TypeAdapter`` accepts any such descriptor, including plain ``Any``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import TypeAdapter


@lru_cache(maxsize=256)
def _adapter(type_: Any) -> TypeAdapter[Any]:
    return TypeAdapter(type_)


class JsonSerializer:
    """Serializer collaborator used by :class:`~netresponse.cache.ResponseCache`.

    Both methods raise on failure; callers decide whether that is fatal.
    """

    def serialize(self, value: Any) -> str:
        """Encode *value* (models, dataclasses, containers, scalars) as JSON text."""
        return _adapter(Any).dump_json(value).decode("utf-8")

    def deserialize(self, raw: str | bytes, type_: Any) -> Any:
        """Decode JSON *raw* into an instance described by *type_*.

        Raises:
            pydantic.ValidationError: If *raw* is not valid JSON or does not
                match *type_*.
        """
        return _adapter(type_).validate_json(raw)
