"""
Order-preserving documents.

The central type of this package is `~bsonmap.utils.odict.OrderedMap`, a
mapping that remembers the order in which its keys were first inserted. It is
used for documents whose field order has to survive a round trip through a
serialization format.

`bsonmap.utils.oyaml` provides a YAML loader and dumper that use this type for
all mappings and `bsonmap.cli.merge` provides a command-line tool for merging
YAML documents without losing the order of their fields.
"""

from bsonmap.utils.odict import InvalidArgumentError, OrderedMap
