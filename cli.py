#!/usr/bin/env python3
"""CLI for curlpaste.

Examples:
  python cli.py --command "curl 'https://api.example.com/jobs?limit=20' -H 'Accept: application/json'"
  python cli.py --file request.sh --send
  pbpaste | python cli.py --scrape-name "Example Corp" --pagination-key offset --response-json-path jobPostings
      --job-id-json-path bulletFields.0 --job-title-json-path title --job-link-json-path externalPath

Output: prints the parsed request as JSON, optionally the scrape config and the response.
"""
import argparse
import json
import logging
import sys

import requests

from curlpaste import client
from curlpaste.parser import parse_curl_command


def read_text_file(path: str) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


def main(argv=None):
    parser = argparse.ArgumentParser(description="curlpaste: parse a curl command into a structured request")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--command", help="curl command text")
    group.add_argument("--file", help="File containing the curl command (stdin if neither is given)")
    parser.add_argument("--send", action="store_true", help="Send the parsed request and print the response")
    parser.add_argument("--timeout", type=float, default=client.DEFAULT_TIMEOUT, help="Request timeout in seconds")
    parser.add_argument("--scrape-name", help="Company name; also print the generic scrape config")
    for field in client.SCRAPE_PATH_FIELDS:
        parser.add_argument("--" + field.replace("_", "-"), dest=field, default="",
                            help=f"Scrape config {field}" + (" (required with --scrape-name)" if field in client.REQUIRED_SCRAPE_FIELDS else ""))
    parser.add_argument("--dry-run", action="store_true", help="Mark the scrape config as a dry run")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
    )

    if args.command is not None:
        text = args.command
    elif args.file:
        text = read_text_file(args.file)
    else:
        text = sys.stdin.read()

    result = parse_curl_command(text)
    print(json.dumps(result.to_dict(), indent=2, ensure_ascii=False))
    if not result.success:
        return 1

    if args.scrape_name:
        try:
            paths = {field: getattr(args, field) for field in client.SCRAPE_PATH_FIELDS}
            config = client.to_scrape_config(result, args.scrape_name, dry_run=args.dry_run, **paths)
        except client.RequestBuildError as e:
            print(f"Invalid scrape config: {e}", file=sys.stderr)
            return 1
        print("\n--- Scrape config ---\n")
        print(json.dumps(config, indent=2, ensure_ascii=False))

    if args.send:
        try:
            resp = client.send_parsed_request(result, timeout=args.timeout)
        except client.RequestBuildError as e:
            print(f"Cannot send request: {e}", file=sys.stderr)
            return 2
        except requests.RequestException as e:
            print(f"Request failed: {e}", file=sys.stderr)
            return 2
        print(f"\n--- Response ({resp.status_code}) ---\n")
        print(client.response_to_text(resp))

    return 0


if __name__ == "__main__":
    sys.exit(main())
