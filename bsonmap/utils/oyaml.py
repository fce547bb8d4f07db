"""
YAML library that preserves key order in mappings.

This module re-exports the API of the ``yaml`` module, so it can be used as a
drop-in replacement::

    from bsonmap.utils import oyaml as yaml

    document = yaml.safe_load(stream)

In contrast to the functions of the ``yaml`` module, `safe_load` and
`safe_load_all` construct every YAML mapping as an
`~bsonmap.utils.odict.OrderedMap`, so the fields of a loaded document keep the
order in which they appear in the file. `safe_dump` and `safe_dump_all` write
ordered maps in their insertion order instead of sorting their keys. The
loader and dumper classes used by these functions are available as
`OrderedLoader` and `OrderedDumper`. The names ``Loader`` and ``Dumper`` still
refer to the classes of the ``yaml`` module.

If a mapping contains the same key more than once, a warning is logged. The
value that appears last is used, but the key keeps the position of its first
occurrence.
"""

import collections.abc
import logging

# pylint: disable=unused-wildcard-import,wildcard-import
from yaml import *  # type: ignore

import yaml
import yaml.constructor

from bsonmap.utils.odict import OrderedMap

# Logger used by this module.
logger = logging.getLogger(__name__)


class OrderedLoader(yaml.SafeLoader):
    """
    Safe YAML loader that constructs mappings as ``OrderedMap`` objects.
    """


class OrderedDumper(yaml.SafeDumper):
    """
    Safe YAML dumper that writes ``OrderedMap`` objects in insertion order.
    """


def safe_dump(data, stream=None, **kwargs):
    """
    Serialize ``data`` into a YAML stream.

    This works like ``yaml.safe_dump``, but uses `OrderedDumper`.
    """
    return yaml.dump_all([data], stream, Dumper=OrderedDumper, **kwargs)


def safe_dump_all(documents, stream=None, **kwargs):
    """
    Serialize a sequence of documents into a YAML stream.

    This works like ``yaml.safe_dump_all``, but uses `OrderedDumper`.
    """
    return yaml.dump_all(documents, stream, Dumper=OrderedDumper, **kwargs)


def safe_load(stream):
    """
    Parse the first YAML document in ``stream``.

    This works like ``yaml.safe_load``, but uses `OrderedLoader`.
    """
    return yaml.load(stream, Loader=OrderedLoader)


def safe_load_all(stream):
    """
    Parse all YAML documents in ``stream``.

    This works like ``yaml.safe_load_all``, but uses `OrderedLoader`.
    """
    return yaml.load_all(stream, Loader=OrderedLoader)


def _construct_ordered_map(loader, node):
    # The empty map is yielded first, so that the constructor can resolve
    # references to this map (e.g. through anchors) before it is populated.
    data = OrderedMap()
    yield data
    if not isinstance(node, yaml.MappingNode):
        raise yaml.constructor.ConstructorError(
            None,
            None,
            "expected a mapping node, but found %s" % node.id,
            node.start_mark,
        )
    own_count = sum(
        1
        for key_node, _ in node.value
        if key_node.tag != "tag:yaml.org,2002:merge"
    )
    loader.flatten_mapping(node)
    # flatten_mapping puts the entries from merge keys (<<) first. These may
    # legitimately be overridden by the entries of the mapping itself.
    merged_count = len(node.value) - own_count
    first_lines = {}
    for index, (key_node, value_node) in enumerate(node.value):
        key = loader.construct_object(key_node)
        if not isinstance(key, collections.abc.Hashable):
            raise yaml.constructor.ConstructorError(
                "while constructing a mapping",
                node.start_mark,
                "found unhashable key",
                key_node.start_mark,
            )
        value = loader.construct_object(value_node)
        data[key] = value
        if index < merged_count:
            continue
        line = key_node.start_mark.line + 1
        if key in first_lines:
            logger.warning(
                'Duplicate key "%s" in line %d: Key is already specified in '
                "line %d. The value from line %d is used.",
                key,
                line,
                first_lines[key],
                line,
            )
        else:
            first_lines[key] = line


def _represent_ordered_map(dumper, data):
    # Passing a list of pairs (instead of the map) keeps the dumper from
    # sorting the keys.
    return dumper.represent_mapping("tag:yaml.org,2002:map", data.to_list())


OrderedLoader.add_constructor("tag:yaml.org,2002:map", _construct_ordered_map)
OrderedDumper.add_multi_representer(OrderedMap, _represent_ordered_map)
