"""Replay parsed curl commands and turn them into scrape configs.

- Builds keyword arguments for ``requests`` from a ``ParseResult``.
- Sends the request and renders the response as readable text (HTML -> text).
- Builds the full "generic company" scrape config (request, pagination key, JSON paths).
"""
from typing import Any, Dict, Optional, Union
import json
import logging
import re

import requests
from bs4 import BeautifulSoup

from .parser import ParseFailure, ParseResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10
DEFAULT_USER_AGENT = "JobScraper/1.0"
ALLOWED_SCRAPE_METHODS = ("GET", "POST")
REQUIRED_SCRAPE_FIELDS = (
    "pagination_key",
    "response_json_path",
    "job_id_json_path",
    "job_title_json_path",
    "job_link_json_path",
)
SCRAPE_PATH_FIELDS = REQUIRED_SCRAPE_FIELDS + (
    "job_details_json_path",
    "job_link_template",
    "job_date_json_path",
)


class RequestBuildError(ValueError):
    """A parse result cannot be turned into a request or scrape config."""


def _require_result(result: Union[ParseResult, ParseFailure]) -> ParseResult:
    if not result.success:
        raise RequestBuildError(f"curl command did not parse: {result.error}")
    if not result.full_url:
        raise RequestBuildError("no URL found in curl command")
    return result


def _has_header(headers: Dict[str, str], name: str) -> bool:
    return any(k.lower() == name.lower() for k in headers)


def build_request_kwargs(result: Union[ParseResult, ParseFailure], timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    """Keyword arguments for ``requests.Session.request``.

    Mapping and list bodies go out as JSON, text bodies as raw data. A GET with a
    mapping body sends it as query params instead, the way the scraper does.
    """
    result = _require_result(result)
    headers = dict(result.headers)
    if not _has_header(headers, "User-Agent"):
        headers["User-Agent"] = DEFAULT_USER_AGENT

    kwargs: Dict[str, Any] = {
        "method": result.method,
        "url": result.full_url,
        "headers": headers,
        "timeout": timeout,
    }
    body = result.body
    if body is None:
        return kwargs
    if result.method == "GET" and isinstance(body, dict):
        kwargs["params"] = {k: v if isinstance(v, str) else json.dumps(v) for k, v in body.items()}
    elif isinstance(body, str):
        kwargs["data"] = body
    else:
        kwargs["json"] = body
    return kwargs


def send_parsed_request(result: Union[ParseResult, ParseFailure], timeout: float = DEFAULT_TIMEOUT,
                        session: Optional[requests.Session] = None) -> requests.Response:
    """Send the parsed request and return the response.

    HTTP error statuses are returned as-is; connection problems raise
    ``requests.RequestException``.
    """
    kwargs = build_request_kwargs(result, timeout=timeout)
    owns_session = session is None
    if owns_session:
        session = requests.Session()
    try:
        logger.info("sending %s %s", kwargs["method"], kwargs["url"])
        resp = session.request(**kwargs)
        logger.info("got status %s from %s", resp.status_code, kwargs["url"])
        return resp
    finally:
        if owns_session:
            session.close()


def html_to_text(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    # drop scripts and styles
    for s in soup(["script", "style", "noscript"]):
        s.decompose()
    text = soup.get_text(separator="\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n\s*\n+", "\n\n", text)
    return text.strip()


def response_to_text(resp: requests.Response) -> str:
    """Readable text for a response: pretty JSON, visible HTML text, or the raw body."""
    content_type = resp.headers.get("Content-Type", "").lower()
    if "json" in content_type:
        try:
            return json.dumps(resp.json(), indent=2, ensure_ascii=False)
        except ValueError:
            logger.debug("response says JSON but does not decode")
            return resp.text
    if "html" in content_type:
        return html_to_text(resp.text)
    return resp.text


def to_scrape_config(result: Union[ParseResult, ParseFailure], name: str, *,
                     pagination_key: str = "",
                     response_json_path: str = "",
                     job_id_json_path: str = "",
                     job_title_json_path: str = "",
                     job_link_json_path: str = "",
                     job_details_json_path: str = "",
                     job_link_template: str = "",
                     job_date_json_path: str = "",
                     dry_run: bool = False) -> Dict[str, Any]:
    """Payload for adding a generic company to the scrape list.

    The request part comes from the parsed curl command; the pagination key and
    the JSON paths tell the scraper how to page through and read the listing.

    Raises RequestBuildError when the backend would reject it: missing name, URL
    or required path, a method other than GET/POST, or a body that is not a JSON object.
    """
    if not name or not name.strip():
        raise RequestBuildError("company name is required")
    result = _require_result(result)
    if result.method not in ALLOWED_SCRAPE_METHODS:
        raise RequestBuildError(
            f"method {result.method} not supported, use one of {', '.join(ALLOWED_SCRAPE_METHODS)}"
        )
    if result.body is not None and not isinstance(result.body, dict):
        raise RequestBuildError("request body must be a JSON object")

    fields = {
        "pagination_key": pagination_key,
        "response_json_path": response_json_path,
        "job_id_json_path": job_id_json_path,
        "job_title_json_path": job_title_json_path,
        "job_link_json_path": job_link_json_path,
        "job_details_json_path": job_details_json_path,
        "job_link_template": job_link_template,
        "job_date_json_path": job_date_json_path,
    }
    fields = {k: (v or "").strip() for k, v in fields.items()}
    missing = [k for k in REQUIRED_SCRAPE_FIELDS if not fields[k]]
    if missing:
        raise RequestBuildError(f"missing required fields: {', '.join(missing)}")

    config: Dict[str, Any] = {
        "name": name.strip(),
        "base_url": result.url,
        "method": result.method,
        "headers": dict(result.headers),
        "body": result.body,
        "query_params": result.query_params,
    }
    config.update(fields)
    config["dry_run"] = bool(dry_run)
    return config
