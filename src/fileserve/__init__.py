"""FileServe - read-only file and image API.

Serves files from a single storage root with path-safe resolution,
extension auto-detection and on-the-fly image derivatives.
"""

__version__ = "0.1.0"

__all__ = ["__version__"]
