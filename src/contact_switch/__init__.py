"""
Contact switch package.

Kept lightweight so that `import contact_switch` and
`contact-switch --help` work without pulling in the numerical core.
"""

from importlib.metadata import version, PackageNotFoundError

try:
    __version__ = version("contact-switch")
except PackageNotFoundError:  # during editable installs
    __version__ = "0.0.0"

__all__ = ["__version__"]
