"""Top-level package for the Page Grid toolkit.

Provides subpackages:
- pagegrid_toolkit.layout – page-grid geometry (slots, canvas size, inference)
- pagegrid_toolkit.payload – compact layout metadata carried by the payload code
- pagegrid_toolkit.composer – composite sheet generation with markers and payload
- pagegrid_toolkit.registration – code search, affine registration and rectification
- pagegrid_toolkit.extraction – per-page cropping and export
"""

def _get_version() -> str:
    """Get version from pyproject.toml (dev) or importlib.metadata (installed)."""
    from pathlib import Path
    
    # In dev mode, read directly from pyproject.toml
    pyproject = Path(__file__).resolve().parent.parent.parent / "pyproject.toml"
    
    if pyproject.exists():
        try:
            content = pyproject.read_text()
            for line in content.splitlines():
                if line.strip().startswith("version"):
                    # Parse: version = "1.2.0"
                    return line.split("=")[1].strip().strip('"').strip("'")
        except OSError:
            pass
    
    # Fallback to importlib.metadata for installed package
    try:
        from importlib.metadata import version as pkg_version
        return pkg_version("pagegrid-toolkit")
    except Exception:
        return "0.0.0"

__version__ = _get_version()
__all__: list[str] = ["__version__"]
