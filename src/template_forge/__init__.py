"""Top-level package for Template Forge.

Provides subpackages:
- template_forge.core – spec models, validation and serialization
- template_forge.engine – layout, enumeration, composition, text fill, rendering
- template_forge.cli – command line entry point
"""

from importlib.metadata import PackageNotFoundError, version as _pkg_version


def _get_version() -> str:
    """Installed distribution version, or 0.0.0 when running from a checkout."""
    try:
        return _pkg_version("template-forge")
    except PackageNotFoundError:
        return "0.0.0"


__version__ = _get_version()
