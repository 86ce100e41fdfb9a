"""curlpaste: turn pasted curl commands into structured HTTP requests.

Small module with helpers to:
- parse a curl command (copied from the browser or from API docs) into URL, method, headers, body and query string
- replay the parsed request with requests and show the response as text
- build the "generic company" scrape config that the job board backend stores

The parser is best-effort and transparent: plain regular expressions over a normalized command line.
"""

from . import client, parser
from .parser import ParseFailure, ParseResult, parse_curl_command

__all__ = ["client", "parser", "ParseFailure", "ParseResult", "parse_curl_command"]
