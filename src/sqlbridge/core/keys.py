"""Generated key holder filled by ``DatabaseAccess.insert_returning_keys``."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType

from sqlbridge.core.errors import ConfigError, NoGeneratedKeysError


class GeneratedKeyHolder:
    """
    Receives the keys an INSERT generated.

    The holder names the columns the caller expects the engine to assign.
    ``table`` is required by engines whose keys come from a per-table
    sequence (Oracle).

    Example:
        holder = GeneratedKeyHolder("id", table="orders")
        access.insert_returning_keys(sql, args, tags, holder)
        order_id = holder.get_key()
    """

    def __init__(self, *columns: str, table: str | None = None):
        if not columns:
            raise ConfigError("GeneratedKeyHolder needs at least one key column name")
        self.columns: tuple[str, ...] = tuple(columns)
        self.table = table
        self._keys: dict[str, int] = {}
        self._populated = False

    @property
    def populated(self) -> bool:
        return self._populated

    @property
    def keys(self) -> Mapping[str, int]:
        return MappingProxyType(self._keys)

    def add_key(self, name: str, value: int) -> None:
        """Record one converted key. Only the executor should call this."""
        if self._populated:
            raise ConfigError("GeneratedKeyHolder has already been populated")
        self._keys[name] = value

    def fill(self, keys: Mapping[str, int]) -> None:
        """Record every requested key at once and seal the holder."""
        if self._populated:
            raise ConfigError(
                "GeneratedKeyHolder has already been populated; use a new holder per insert"
            )
        for name, value in keys.items():
            self.add_key(name, value)
        self._populated = True

    def get_key(self, name: str | None = None) -> int:
        """Key for ``name``, or the first requested column when omitted."""
        column = name or self.columns[0]
        try:
            return self._keys[column]
        except KeyError:
            raise NoGeneratedKeysError(
                f"No generated key recorded for column {column!r}"
            ).with_context(column=column) from None

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"GeneratedKeyHolder(columns={self.columns!r}, keys={self._keys!r})"


__all__ = ["GeneratedKeyHolder"]
