"""
Provides an order-preserving dictionary.

The `OrderedMap` is the in-memory representation of a document whose field
order is significant. It keeps the keys in the order in which they were first
inserted, and every form of iteration (``iter``, `~OrderedMap.keys`,
`~OrderedMap.values`, `~OrderedMap.entries`, ``repr``) follows that order.

Assigning a new value to a key that already exists does not change the
position of that key. Deleting a key and inserting it again moves it to the
end::

    m = OrderedMap([('a', 1), ('b', 2)])
    m['a'] = 3        # keys: a, b
    del m['a']
    m['a'] = 4        # keys: b, a

Unlike a regular ``dict``, two ordered maps are only equal if they contain the
same keys in the same order. An ordered map never compares equal to an object
that is not an ordered map.

Instances of `OrderedMap` are not thread safe. Code that shares an instance
between threads has to protect it with a lock.
"""

import collections.abc
import reprlib
import typing

KeyT = typing.TypeVar("KeyT")
ValueT = typing.TypeVar("ValueT")

Predicate = typing.Callable[[typing.Any, typing.Any], typing.Any]

# Anything an ordered map can be built from or merged with.
Source = typing.Union[
    typing.Mapping[KeyT, ValueT], typing.Iterable[typing.Tuple[KeyT, ValueT]]
]


class InvalidArgumentError(ValueError):
    """
    Raised when an `OrderedMap` cannot be built from the supplied arguments.
    """


class OrderedMap(typing.MutableMapping[KeyT, ValueT]):
    """
    Mapping that preserves the insertion order of its keys.

    The values are stored in a regular ``dict``, while the order of the keys
    is tracked in a separate list. Every mutating operation updates both, so
    that the list always contains each key of the ``dict`` exactly once.

    Please note that ``popitem`` (inherited from ``MutableMapping``) removes
    and returns the *first* entry, while ``dict.popitem`` removes the last
    one.
    """

    def __init__(self, source: typing.Optional[Source] = None):
        """
        Create an ordered map.

        :param source:
            mapping or iterable of key-value pairs that provides the initial
            content. If ``source`` is a mapping, its keys are inserted in the
            order returned by its ``keys()`` method. If ``source`` is an
            iterable of pairs, the pairs are inserted in iteration order. For
            duplicate keys, the last value wins, but the key keeps the
            position of its first occurrence. If ``None`` (the default), the
            map is empty.
        """
        self._data = {}
        self._keys = []
        if source is not None:
            self.merge_in_place(source)

    @classmethod
    def from_flat(cls, *args) -> "OrderedMap":
        """
        Create an ordered map from a flat list of alternating keys and values.

        For example, ``OrderedMap.from_flat('a', 1, 'b', 2)`` creates a map
        with the keys ``'a'`` and ``'b'`` (in this order).

        As a special case, if the only argument is a mapping, the new map is
        initialized with the content of that mapping.

        :param args:
            alternating keys and values or a single mapping.
        :return:
            new ordered map.
        :raise InvalidArgumentError:
            if ``args`` has an odd number of elements (and is not a single
            mapping).
        """
        if len(args) == 1 and isinstance(args[0], collections.abc.Mapping):
            return cls(args[0])
        if len(args) % 2 != 0:
            raise InvalidArgumentError(
                "odd number of elements for OrderedMap ({0})".format(len(args))
            )
        return cls(zip(args[0::2], args[1::2]))

    @classmethod
    def from_mapping(cls, other: typing.Mapping[KeyT, ValueT]) -> "OrderedMap":
        """
        Create an ordered map with the content of ``other``.

        The keys are inserted in the order returned by ``other.keys()``. If
        ``other`` does not preserve the order of its keys, the order of the
        resulting map is the order in which ``other`` enumerates its keys.
        """
        return cls(other)

    @classmethod
    def from_pairs(
        cls, pairs: typing.Iterable[typing.Tuple[KeyT, ValueT]]
    ) -> "OrderedMap":
        """
        Create an ordered map from an iterable of key-value pairs.
        """
        return cls(pairs)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __copy__(self) -> "OrderedMap":
        return self.duplicate()

    def __delitem__(self, key: KeyT) -> None:
        del self._data[key]
        self._keys.remove(key)

    def __eq__(self, other: object) -> bool:
        return self.equals(other)

    def __getitem__(self, key: KeyT) -> ValueT:
        return self._data[key]

    def __iter__(self) -> typing.Iterator[KeyT]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._data)

    @reprlib.recursive_repr()
    def __repr__(self) -> str:
        entries = ", ".join(
            "{0!r}: {1!r}".format(key, value) for key, value in self.entries()
        )
        return "<{0} at {1:#x} {{{2}}}>".format(
            type(self).__name__, id(self), entries
        )

    def __setitem__(self, key: KeyT, value: ValueT) -> None:
        if key not in self._data:
            self._keys.append(key)
        self._data[key] = value

    # An ordered map is mutable, so it must not be hashable.
    __hash__ = None  # type: ignore

    def clear(self) -> None:
        self._data = {}
        self._keys = []

    def copy(self) -> "OrderedMap":
        """
        Return a shallow copy of this map. This is the same as `duplicate`.
        """
        return self.duplicate()

    def delete(
        self, key: KeyT, default: typing.Optional[ValueT] = None
    ) -> typing.Optional[ValueT]:
        """
        Remove ``key`` from this map.

        Deleting a key that is not present is not an error.

        :param key:
            key to be removed.
        :param default:
            value returned if ``key`` is not present. The default is ``None``.
        :return:
            value that was associated with ``key`` or ``default`` if ``key``
            was not present.
        """
        if key not in self._data:
            return default
        value = self._data.pop(key)
        self._keys.remove(key)
        return value

    def delete_if(self, predicate: Predicate) -> "OrderedMap":
        """
        Remove all entries for which ``predicate`` returns ``True``.

        The keys are collected before the first entry is removed, so removing
        entries cannot cause other entries to be skipped or visited twice.
        Exceptions raised by ``predicate`` are not caught. In this case, the
        entries that have been removed before the exception was raised stay
        removed.

        :param predicate:
            callable that is called with the key and the value of each entry.
        :return:
            this map.
        """
        self._remove_matching(predicate)
        return self

    def duplicate(self) -> "OrderedMap":
        """
        Return a shallow copy of this map.

        The copy has the same keys (in the same order) and the same values.
        The values themselves are not copied. Adding or removing keys in the
        copy does not affect this map and vice versa.
        """
        result = self.__class__()
        result._data = dict(self._data)
        result._keys = list(self._keys)
        return result

    def each_pair(self) -> typing.Iterator[typing.Tuple[KeyT, ValueT]]:
        """
        Return an iterator over the ``(key, value)`` pairs of this map.

        This is the same as `entries`.
        """
        return self.entries()

    def entries(self) -> typing.Iterator[typing.Tuple[KeyT, ValueT]]:
        """
        Return an iterator over the ``(key, value)`` pairs of this map.

        The pairs are generated lazily in insertion order. Each call returns a
        new iterator that starts at the first entry.
        """
        for key in self._keys:
            yield key, self._data[key]

    def equals(self, other: object) -> bool:
        """
        Tell whether ``other`` is an ordered map with the same content.

        In contrast to the equality of regular ``dict``s, the order of the
        keys matters: ``other`` is only considered equal if it has the same
        keys in the same order and the same values for these keys. If
        ``other`` is not an `OrderedMap`, it is never considered equal.

        This method never raises an exception. If comparing the keys or
        values raises an exception, the maps are considered to be not equal.
        """
        if not isinstance(other, OrderedMap):
            return False
        try:
            return bool(
                self._keys == other._keys
                and self.values() == other.values()
            )
        except Exception:  # pylint: disable=broad-except
            return False

    def keys(self) -> typing.List[KeyT]:  # type: ignore
        """
        Return the keys of this map in insertion order.

        The returned list is a snapshot: Later changes to this map are not
        reflected in the list and changing the list does not affect this map.
        """
        return list(self._keys)

    def merge(self, other: Source) -> "OrderedMap":
        """
        Return a new map with the content of this map and of ``other``.

        This map is not modified. Please refer to `merge_in_place` for the
        rules that are used when merging.
        """
        result = self.duplicate()
        result.merge_in_place(other)
        return result

    def merge_in_place(self, other: Source) -> "OrderedMap":
        """
        Merge the content of ``other`` into this map.

        For keys that exist in both maps, the value from ``other`` is used,
        but the key keeps its position in this map. Keys that only exist in
        ``other`` are appended in the order in which ``other`` provides them.
        If ``other`` is a mapping that does not preserve the order of its
        keys, the appended keys are in the order in which ``other`` enumerates
        them.

        :param other:
            mapping or iterable of key-value pairs.
        :return:
            this map.
        """
        if isinstance(other, collections.abc.Mapping):
            for key in other.keys():
                self[key] = other[key]
        else:
            for key, value in other:
                self[key] = value
        return self

    def reject(self, predicate: Predicate) -> "OrderedMap":
        """
        Return a new map without the entries for which ``predicate`` returns
        ``True``.

        This map is not modified.
        """
        return self.duplicate().delete_if(predicate)

    def reject_in_place(self, predicate: Predicate) -> bool:
        """
        Remove all entries for which ``predicate`` returns ``True``.

        This works like `delete_if`, but tells whether any entries have been
        removed.

        :param predicate:
            callable that is called with the key and the value of each entry.
        :return:
            ``True`` if at least one entry has been removed, ``False`` if this
            map has not been changed.
        """
        return self._remove_matching(predicate) > 0

    def replace(self, other: Source) -> "OrderedMap":
        """
        Replace the content of this map with the content of ``other``.

        The new content is built completely before it replaces the old one,
        so this map is left unchanged if reading ``other`` fails.

        :param other:
            mapping or iterable of key-value pairs. The same rules regarding
            the order of keys as for the constructor apply.
        :return:
            this map.
        """
        replacement = OrderedMap(other)
        self._data = replacement._data
        self._keys = replacement._keys
        return self

    def set(self, key: KeyT, value: ValueT) -> None:
        """
        Set the value for ``key``. This is the same as ``self[key] = value``.
        """
        self[key] = value

    def to_list(self) -> typing.List[typing.Tuple[KeyT, ValueT]]:
        """
        Return a list of the ``(key, value)`` pairs in insertion order.
        """
        return list(self.entries())

    def values(self) -> typing.List[ValueT]:  # type: ignore
        """
        Return the values of this map in the order of their keys.
        """
        return [self._data[key] for key in self._keys]

    def _remove_matching(self, predicate: Predicate) -> int:
        """
        Remove the entries matching ``predicate`` and return their number.
        """
        removed = 0
        for key in list(self._keys):
            # The predicate might have removed this key already.
            if key not in self._data:
                continue
            if predicate(key, self._data[key]):
                self.delete(key)
                removed += 1
        return removed
