"""
Declarative manifests.

- ManifestLoader: JSON file or URL -> Manifest
- Manifest: types, entities, contracts and routes as descriptors
"""

from .loader import Manifest, ManifestLoader

__all__ = ["Manifest", "ManifestLoader"]
