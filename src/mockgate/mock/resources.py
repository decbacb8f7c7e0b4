"""
MockGate Resource Loader

Loads the bytes of mock payloads. Named resources are looked up in the
test resource directories first, then in the application resource
directories; direct locations are read as-is.
"""

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union
from urllib.parse import unquote, urlparse

from ..common.errors import MockDataUnavailable
from .models import DirectLocation, NamedResource, PayloadSource

logger = logging.getLogger("mockgate.resources")


class ResourceLoader:
    """
    Loader for mock payload files.

    A NamedResource("users_success") is searched as ``users_success`` and
    then ``users_success.json`` in every test directory, then in every
    application directory. The first existing file wins.

    Example:
        loader = ResourceLoader(
            resource_dirs=["app/fixtures"],
            test_resource_dirs=["tests/fixtures"]
        )
        data = loader.load(NamedResource("users_success"))
    """

    def __init__(
        self,
        resource_dirs: Optional[Iterable[Union[str, Path]]] = None,
        test_resource_dirs: Optional[Iterable[Union[str, Path]]] = None,
        extension: str = ".json"
    ):
        """
        Initialize resource loader.

        Args:
            resource_dirs: Application resource directories
            test_resource_dirs: Test-scoped resource directories, searched first
            extension: Extension appended to names that are not found as-is
        """
        self.resource_dirs = [Path(p) for p in (resource_dirs or [])]
        self.test_resource_dirs = [Path(p) for p in (test_resource_dirs or [])]
        self.extension = extension

    def load(self, source: PayloadSource) -> bytes:
        """
        Load the bytes for a payload source.

        Args:
            source: NamedResource or DirectLocation

        Returns:
            Payload bytes

        Raises:
            MockDataUnavailable: If the payload cannot be found or read
        """
        if isinstance(source, DirectLocation):
            return self._read(source, self._direct_path(source.path))

        if isinstance(source, NamedResource):
            candidates = self.candidates(source.name)
            for candidate in candidates:
                if candidate.is_file():
                    return self._read(source, candidate)

            logger.warning(f"Could not find mock resource '{source.name}' in any resource directory")
            raise MockDataUnavailable(
                source,
                searched=[str(c) for c in candidates],
                reason="resource not found"
            )

        raise MockDataUnavailable(source, reason="unsupported payload source")

    def candidates(self, name: str) -> List[Path]:
        """List the paths tried for a named resource, in search order."""
        names = [name]
        if self.extension and not name.endswith(self.extension):
            names.append(name + self.extension)

        paths = []
        for directory in self.test_resource_dirs + self.resource_dirs:
            for candidate_name in names:
                paths.append(directory / candidate_name)
        return paths

    @staticmethod
    def _direct_path(location: str) -> Path:
        parsed = urlparse(location)
        if parsed.scheme == 'file':
            return Path(unquote(parsed.path))
        return Path(location)

    @staticmethod
    def _read(source, path: Path) -> bytes:
        try:
            return path.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to load mock data from {path}: {e}")
            raise MockDataUnavailable(source, searched=[str(path)], reason=str(e)) from e
