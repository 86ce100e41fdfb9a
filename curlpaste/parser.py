"""Parser for curl commands pasted from a browser or from API docs.

Heuristics:
- Joins line continuations and collapses whitespace into one flat command line.
- Takes the URL from the first token after ``curl``; falls back to the first http(s) URL anywhere.
- Reads method, headers and payload with regular expressions over the flat line.
- Never raises: any unexpected fault becomes a ``ParseFailure``.

It is not a shell lexer. Values with embedded quotes, variables and pipelines are
outside what these patterns understand.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union
import json
import logging
import re

logger = logging.getLogger(__name__)

DEFAULT_METHOD = "GET"

URL_AFTER_CURL = re.compile(r"curl\s+(?:'([^']+)'|\"([^\"]+)\"|([^\s]+))")
URL_ANYWHERE = re.compile(r"(?:--url\s+|'|\")?(https?://[^\s'\"]+)", re.I)
METHOD_PATTERNS = [
    re.compile(r"-X\s+(['\"]?)(\w+)\1", re.I),
    re.compile(r"--request\s+(['\"]?)(\w+)\1", re.I),
]
# header values stop at the first quote, so a value with an embedded quote is truncated
HEADER_PATTERNS = [
    re.compile(r"-H\s+['\"]([^:]+):\s*([^'\"]+)['\"]"),
    re.compile(r"--header\s+['\"]([^:]+):\s*([^'\"]+)['\"]"),
]
BODY_PATTERN = re.compile(
    r"(?:-d|--data|--data-raw|--data-binary)\s+(['\"])(.*?)\1(?=\s|$)", re.S
)


@dataclass
class ParseResult:
    """Request description recovered from a curl command."""
    url: str = ""
    full_url: str = ""
    method: str = DEFAULT_METHOD
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None
    query_params: str = ""
    success: bool = field(default=True, init=False)

    def __bool__(self) -> bool:
        return True

    def to_dict(self) -> Dict[str, Any]:
        """Shape consumed by the dashboard's request form."""
        return {
            "success": True,
            "url": self.url,
            "fullUrl": self.full_url,
            "method": self.method,
            "headers": dict(self.headers),
            "body": self.body,
            "queryParams": self.query_params,
        }


@dataclass
class ParseFailure:
    error: str
    success: bool = field(default=False, init=False)

    def __bool__(self) -> bool:
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {"success": False, "error": self.error}


def normalize_command(curl_command: str) -> str:
    """Flatten a (possibly multi-line) command into one single-spaced line."""
    cmd = curl_command.strip()
    cmd = re.sub(r"\\\n", " ", cmd)
    return re.sub(r"\s+", " ", cmd).strip()


def extract_url(cmd: str) -> str:
    """Return the target URL, or an empty string when none can be found.

    The first token after ``curl`` wins unless it is missing or looks like a flag,
    in which case the first http(s) URL anywhere in the command is used.
    """
    url = ""
    m = URL_AFTER_CURL.search(cmd)
    if m:
        url = m.group(1) or m.group(2) or m.group(3) or ""

    if not url or url.startswith("-"):
        m = URL_ANYWHERE.search(cmd)
        if m:
            logger.debug("URL not right after curl, using %s", m.group(1))
            url = m.group(1)
        else:
            url = ""
    return url


def extract_method(cmd: str) -> str:
    for pattern in METHOD_PATTERNS:
        m = pattern.search(cmd)
        if m:
            return m.group(2).upper()
    return DEFAULT_METHOD


def extract_headers(cmd: str) -> Dict[str, str]:
    """Collect ``-H`` and ``--header`` values; a repeated name keeps the last value."""
    headers: Dict[str, str] = {}
    for pattern in HEADER_PATTERNS:
        for m in pattern.finditer(cmd):
            headers[m.group(1).strip()] = m.group(2).strip()
    return headers


def _reject_constant(name: str):
    # NaN and Infinity are not JSON
    raise ValueError(f"invalid JSON constant {name}")


def extract_body(cmd: str) -> Any:
    """Return the first data payload, JSON-decoded when possible.

    Returns None when the command carries no data flag.
    """
    m = BODY_PATTERN.search(cmd)
    if not m:
        return None
    raw = m.group(2)
    try:
        return json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        logger.debug("payload is not JSON, keeping it as text")
        return raw


def split_query(url: str) -> Tuple[str, str]:
    """Split on the first ``?`` into (base url, raw query string)."""
    base, sep, query = url.partition("?")
    if not sep:
        return url, ""
    return base, query


def parse_curl_command(curl_command: Optional[str]) -> Union[ParseResult, ParseFailure]:
    """Parse a curl command into a ``ParseResult``.

    Extraction is best effort: a command without a recognizable URL still parses,
    with empty URL fields. Any unexpected error is reported as a ``ParseFailure``
    instead of being raised, so callers must check ``success``.
    """
    try:
        cmd = normalize_command(curl_command)
        full_url = extract_url(cmd)
        base_url, query_params = split_query(full_url)
        return ParseResult(
            url=base_url,
            full_url=full_url,
            method=extract_method(cmd),
            headers=extract_headers(cmd),
            body=extract_body(cmd),
            query_params=query_params,
        )
    except Exception as e:
        logger.warning("could not parse curl command", exc_info=True)
        return ParseFailure(error=f"Failed to parse curl command: {e}")
