"""
MockGate Common Utilities

Small JSON, URL and environment helpers shared across MockGate modules.
"""

import json
import os
from typing import Any, List, Optional, Union

from urllib3.exceptions import LocationParseError
from urllib3.util import Url, parse_url

DEFAULT_PORTS = {"http": 80, "https": 443}


def safe_json_parse(raw: Union[str, bytes, None], default: Any = None) -> Any:
    """
    Safely parse a JSON document with error handling.

    Args:
        raw: JSON text or UTF-8 bytes
        default: Default value to return if parsing fails

    Returns:
        Parsed JSON object, or default if parsing fails

    Example:
        body = safe_json_parse(request.body, default={})
    """
    if not raw:
        return default

    try:
        if isinstance(raw, (bytes, bytearray)):
            raw = raw.decode('utf-8')
        return json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError, TypeError, ValueError):
        return default


def extract_operation_name(body: Optional[bytes]) -> Optional[str]:
    """
    Extract the GraphQL operation name from a request body.

    Only a JSON object with a string ``operationName`` field yields a name.

    Args:
        body: Raw request body

    Returns:
        The operation name, or None
    """
    payload = safe_json_parse(body)
    if not isinstance(payload, dict):
        return None

    name = payload.get('operationName')
    if isinstance(name, str) and name:
        return name
    return None


def split_env_paths(name: str) -> List[str]:
    """
    Read an os.pathsep-separated list of paths from an environment variable.

    Args:
        name: Environment variable name

    Returns:
        List of non-empty path strings (empty if the variable is unset)
    """
    value = os.environ.get(name, '')
    return [part for part in value.split(os.pathsep) if part]


def canonical_url(url: str) -> str:
    """
    Normalize an absolute URL so that equivalent spellings compare equal.

    Scheme and host are lowercased, a default port is dropped, an empty path
    becomes ``/``, characters not allowed in the path or query are
    percent-encoded and the fragment is removed. This is the form both
    ``requests`` (PreparedRequest.url) and ``httpx`` send on the wire.

    Args:
        url: Absolute URL as registered or as seen by a transport

    Returns:
        Canonical URL string, or ``url`` unchanged if it cannot be parsed

    Example:
        canonical_url('HTTPS://API.example.com:443?q=a b')
        # 'https://api.example.com/?q=a%20b'
    """
    try:
        parsed = parse_url(url)
    except LocationParseError:
        return url

    if not parsed.host:
        return url

    port = parsed.port
    if port is not None and DEFAULT_PORTS.get(parsed.scheme) == port:
        port = None

    return Url(
        scheme=parsed.scheme,
        auth=parsed.auth,
        host=parsed.host,
        port=port,
        path=parsed.path or '/',
        query=parsed.query
    ).url
