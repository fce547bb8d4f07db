"""
Merge YAML documents without losing the order of their fields.

If executed as a Python script, this module reads the YAML files specified on
the command line, merges them and writes the result to the standard output.
Each file must contain a mapping at its top level. Files are merged in the
order in which they are specified, so the values from later files take
precedence. A field that is already present keeps its position, while fields
that are new are appended in the order in which they appear in the file that
introduces them.

Instead of executing this module as a script, it can be imported and its
`run_merge` function can be used. In this case, the configuration is expected
to be passed to `run_merge` in the form of a dictionary.

Optionally, a configuration file can be specified through the
``--config-file`` command line argument. The configuration file uses the YAML
syntax and has the following keys (all of them are optional):

:``drop_keys``:
    List of top-level fields that are removed from the merged document. Fields
    specified through the ``--drop`` command line argument are added to this
    list.

:``explicit_start``:
    If ``True``, the output starts with an explicit document start marker
    (``---``). The default is ``False``.

:``logging_config_file``:
    Path to a logging configuration file. This file must be in the
    `format <https://docs.python.org/3/library/logging.config.html#logging-config-fileformat>`_
    expected by ``logging.config.fileConfig``. This configuration option cannot
    be used together with the ``logging_level`` option.

:``logging_level``:
    Logging level to be used. Can be one of ``CRITICAL``, ``ERROR``,
    ``WARNING`` (the default), ``INFO``, or ``DEBUG``. This configuration
    option cannot be used together with the ``logging_config_file`` option.
"""

import argparse
import collections.abc
import logging
import logging.config
import sys
import typing

import bsonmap.version

from bsonmap.utils import oyaml as yaml
from bsonmap.utils.odict import OrderedMap

# Logger used by this module.
logger = logging.getLogger(__name__)


def main():
    """
    Run the merge tool.

    This function parses the command-line arguments, calls
    `read_merge_config`, and subsequently calls `run_merge`.
    """
    parser = argparse.ArgumentParser(
        description='Merge YAML documents, preserving the order of fields.')
    parser.add_argument(
        'files',
        metavar='FILE',
        nargs='*',
        help='YAML file to be merged')
    parser.add_argument(
        '--config-file',
        dest='config_file',
        help='path to the configuration file')
    parser.add_argument(
        '--drop',
        action='append',
        default=[],
        dest='drop_keys',
        metavar='KEY',
        help='remove the top-level field KEY from the merged document')
    parser.add_argument(
        '--version',
        action='store_true',
        dest='version',
        help='show program\'s version number and exit')
    args = parser.parse_args()
    if args.version:
        print('bsonmap-merge %s' % bsonmap.version.VERSION_STRING)
        sys.exit(0)
    if not args.files:
        parser.error('at least one FILE is required')
    config = read_merge_config(args.config_file)
    run_merge(config, args.files, sys.stdout, args.drop_keys)


def read_merge_config(
        config_file: str = None) -> typing.MutableMapping[str, typing.Any]:
    """
    Read the configuration of the merge tool.

    If the configuration file cannot be read (because it does not exist,
    permissions are insufficient, or it is not a valid YAML file), an exception
    is raised.

    The returned object can then be passed to `run_merge`.

    :param config_file:
        path to the configuration file. If ``None`` an empty configuration is
        returned.
    :return:
        configuration read from the file.
    """
    if config_file is None:
        return OrderedMap()
    with open(config_file, mode='r', encoding='utf-8') as f:
        config = yaml.safe_load(f)
    if config is None:
        config = OrderedMap()
    if not isinstance(config, collections.abc.MutableMapping):
        raise TypeError(
            'Configuration object must be a mapping, but got an object of type '
            '\'%s\'.' % type(config).__name__)
    return config


def run_merge(
        config: typing.Mapping[str, typing.Any],
        files: typing.Sequence[str],
        output: typing.TextIO,
        extra_drop_keys: typing.Sequence[str] = ()) -> OrderedMap:
    """
    Merge the YAML documents in ``files`` and write the result to ``output``.

    This function raises an exception if the configuration object is invalid,
    if one of the files cannot be read, or if one of the files does not
    contain a mapping.

    :param config:
        configuration object. Please refer to the
        `module documentation <bsonmap.cli.merge>` for a description of the
        structure of the configuration object.
    :param files:
        paths of the YAML files that shall be merged.
    :param output:
        text stream to which the merged document is written.
    :param extra_drop_keys:
        top-level fields that are removed in addition to the ones listed in
        the ``drop_keys`` option (e.g. from the command line).
    :return:
        merged document.
    """
    # We configure the logging first. This way, we can log any error that
    # occurs while reading the files.
    _configure_logging(config)
    try:
        return _run_merge_internal(config, files, output, extra_drop_keys)
    except Exception:
        logger.exception('Merging the documents failed.')
        # We still raise the exception so that it is printed to the output.
        raise


def _configure_logging(config):
    """
    Configure logging according to the ``logging_config_file`` and
    ``logging_level`` options.
    """
    if 'logging_config_file' in config:
        if 'logging_level' in config:
            raise ValueError(
                'Only one of the logging_config_file and logging_level option '
                'can be used.')
        logging.config.fileConfig(
            config['logging_config_file'], disable_existing_loggers=False)
    else:
        logging_level = config.get('logging_level', 'WARNING')
        if logging_level not in (
                'CRITICAL', 'DEBUG', 'ERROR', 'INFO', 'WARNING'):
            raise ValueError(
                'Invalid logging_level "%s". Must be one of CRITICAL, DEBUG, '
                'ERROR, INFO, WARNING.' % logging_level)
        logging.basicConfig(level=getattr(logging, logging_level))


def _run_merge_internal(config, files, output, extra_drop_keys):
    """
    Actually merges the documents.

    This has been separated into its own function called by run_merge so that
    exceptions can be caught and logged.
    """
    drop_keys = config.get('drop_keys', [])
    if not isinstance(drop_keys, collections.abc.Sequence) \
            or isinstance(drop_keys, str):
        raise TypeError(
            'Expected a list for the drop_keys key, but found an object of '
            'type \'%s\'.' % type(drop_keys).__name__)
    drop_keys = list(drop_keys) + list(extra_drop_keys)
    explicit_start = config.get('explicit_start', False)
    document = OrderedMap()
    for file_name in files:
        logger.info('Merging file %s.', file_name)
        with open(file_name, mode='r', encoding='utf-8') as f:
            file_data = yaml.safe_load(f)
        if file_data is None:
            continue
        if not isinstance(file_data, OrderedMap):
            raise TypeError(
                'Expected a mapping at the top level of file %s, but found an '
                'object of type \'%s\'.'
                % (file_name, type(file_data).__name__))
        document = document.merge(file_data)

    def drop(key, value):
        if key in drop_keys:
            logger.debug('Dropping field "%s".', key)
            return True
        return False

    document.delete_if(drop)
    yaml.safe_dump(
        document,
        output,
        default_flow_style=False,
        explicit_start=explicit_start)
    return document


if __name__ == '__main__':
    main()
