"""Containers that validate names on insertion.

Used for element attributes, declaration pairs and metadata name tokens so
that an invalid key fails at the point of assignment.
"""

from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Mapping,
    MutableMapping,
    MutableSequence,
    Optional,
    Tuple,
    Union,
    overload,
)

from loose_xml.character.names import validate_name


class NameMap(MutableMapping[str, str]):
    """Ordered ``str -> str`` mapping whose keys must be valid names.

    Values are coerced with ``str``. Insertion order is kept so that
    serialization is stable.
    """

    def __init__(
        self,
        items: Optional[Union[Mapping[str, Any], Iterable[Tuple[str, Any]]]] = None,
    ) -> None:
        self._data: Dict[str, str] = {}
        if items is not None:
            self.update(items)

    def __getitem__(self, key: str) -> str:
        return self._data[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self._data[validate_name(key)] = str(value)

    def __delitem__(self, key: str) -> None:
        del self._data[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"


class NameList(MutableSequence[str]):
    """Ordered list of strings that must all be valid names."""

    def __init__(self, items: Optional[Iterable[str]] = None) -> None:
        self._data: List[str] = []
        if items is not None:
            self.extend(items)

    @overload
    def __getitem__(self, index: int) -> str: ...

    @overload
    def __getitem__(self, index: slice) -> List[str]: ...

    def __getitem__(self, index: Union[int, slice]) -> Union[str, List[str]]:
        return self._data[index]

    def __setitem__(self, index: Any, value: Any) -> None:
        if isinstance(index, slice):
            self._data[index] = [validate_name(item) for item in value]
        else:
            self._data[index] = validate_name(value)

    def __delitem__(self, index: Union[int, slice]) -> None:
        del self._data[index]

    def __len__(self) -> int:
        return len(self._data)

    def insert(self, index: int, value: str) -> None:
        self._data.insert(index, validate_name(value))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, NameList):
            return self._data == other._data
        if isinstance(other, list):
            return self._data == other
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"
