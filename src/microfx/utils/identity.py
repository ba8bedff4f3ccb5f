"""Identity-keyed weak map.

``weakref.WeakKeyDictionary`` keys by hash/equality, so two equal
dataclass elements would share one slot. This map keys by ``id()`` and
holds only a weak reference, so value-equal objects never collide and an
entry disappears as soon as its object is collected.
"""

from typing import Any, Callable, Dict, Generic, Iterator, Optional, Tuple, TypeVar
import weakref

from microfx.core.errors import ElementContractError

V = TypeVar("V")


class WeakIdentityMap(Generic[V]):
    """Mapping from live objects (by identity) to values.

    Args:
        on_collect: Called with the stored value when its key object is
            garbage collected (after the entry is removed)
    """

    def __init__(self, on_collect: Optional[Callable[[V], None]] = None):
        self._entries: Dict[int, Tuple[weakref.ref, V]] = {}
        self._on_collect = on_collect

    def _ref(self, obj: Any) -> weakref.ref:
        key = id(obj)

        def collected(_ref: weakref.ref, key: int = key) -> None:
            entry = self._entries.get(key)
            # the id may already belong to a newer object with its own ref
            if entry is not None and entry[0] is _ref:
                del self._entries[key]
                if self._on_collect is not None:
                    self._on_collect(entry[1])

        try:
            return weakref.ref(obj, collected)
        except TypeError:
            raise ElementContractError(
                f"{type(obj).__name__} cannot be weakly referenced; "
                "add '__weakref__' to its __slots__"
            ) from None

    def get(self, obj: Any, default: Optional[V] = None) -> Optional[V]:
        entry = self._entries.get(id(obj))
        if entry is None or entry[0]() is not obj:
            return default
        return entry[1]

    def __contains__(self, obj: Any) -> bool:
        entry = self._entries.get(id(obj))
        return entry is not None and entry[0]() is obj

    def __getitem__(self, obj: Any) -> V:
        entry = self._entries.get(id(obj))
        if entry is None or entry[0]() is not obj:
            raise KeyError(obj)
        return entry[1]

    def __setitem__(self, obj: Any, value: V) -> None:
        entry = self._entries.get(id(obj))
        if entry is not None and entry[0]() is obj:
            self._entries[id(obj)] = (entry[0], value)
        else:
            self._entries[id(obj)] = (self._ref(obj), value)

    def setdefault(self, obj: Any, factory: Callable[[], V]) -> V:
        """Return the value for ``obj``, storing ``factory()`` first if absent."""
        if obj in self:
            return self[obj]
        value = factory()
        self[obj] = value
        return value

    def pop(self, obj: Any, default: Optional[V] = None) -> Optional[V]:
        entry = self._entries.get(id(obj))
        if entry is None or entry[0]() is not obj:
            return default
        del self._entries[id(obj)]
        return entry[1]

    def items(self) -> Iterator[Tuple[Any, V]]:
        """Live (object, value) pairs."""
        for ref, value in list(self._entries.values()):
            obj = ref()
            if obj is not None:
                yield obj, value

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return sum(1 for ref, _ in self._entries.values() if ref() is not None)
