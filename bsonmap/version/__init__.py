"""
Provides the version of the bsonmap distribution.

The version is kept as a tuple of integers, so that versions can be compared
easily. A pre-release is marked by a negative last component: ``-1`` is the
first beta release of the version formed by the other components, ``-2`` the
second one, and so on. For example, ``(1, 0, -1)`` results in the version
string ``"1.0b1"`` and compares less than ``(1, 0, 0)``.
"""

#: Version (as a tuple).
VERSION = (1, 0, -1)


def _version_string():
    """
    Generate the version string based on the version number.
    """
    release = [component for component in VERSION if component >= 0]
    pre_release = [component for component in VERSION if component < 0]
    version_string = ".".join(str(component) for component in release)
    if pre_release:
        version_string += f"b{-pre_release[0]}"
    return version_string


#: Version (as a string)
VERSION_STRING = _version_string()
