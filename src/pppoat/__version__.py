"""
Installed version of the 'pppoat' package.

Attributes
----------
__version__ : str
    The version string as recorded in the package metadata.

Raises
------
PackageNotFoundError
    If the 'pppoat' package is not installed.
"""
from importlib.metadata import version

__version__: str = version("pppoat")
