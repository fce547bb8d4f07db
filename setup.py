#!/usr/bin/env python3

from setuptools import setup, find_packages

from bsonmap.version import VERSION_STRING

setup(
    name="bsonmap",
    version=VERSION_STRING,
    packages=find_packages(
        include=['bsonmap', 'bsonmap.*'],
    ),
    zip_safe=True,

    install_requires=['PyYAML'],
    python_requires='>=3.7',

    entry_points={
        'console_scripts': [
            'bsonmap-merge = bsonmap.cli.merge:main',
        ],
        'gui_scripts': [
        ]
    },
    test_suite='tests.unit',

    description='Insertion-order preserving map for order-sensitive documents',
)
