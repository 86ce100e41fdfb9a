import io
import json

import requests

import cli
from curlpaste import client
from curlpaste.parser import ParseFailure


def test_prints_parse_as_json(capsys):
    rc = cli.main(["--command", "curl 'https://x.test/a?b=1' -H 'A: 1'"])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["url"] == "https://x.test/a"
    assert out["queryParams"] == "b=1"
    assert out["headers"] == {"A": "1"}


def test_reads_file(tmp_path, capsys):
    path = tmp_path / "request.sh"
    path.write_text("curl 'https://x.test/jobs' \\\n  -X POST \\\n  -d '{\"page\": 1}'\n", encoding="utf-8")
    rc = cli.main(["--file", str(path)])
    assert rc == 0
    out = json.loads(capsys.readouterr().out)
    assert out["method"] == "POST"
    assert out["body"] == {"page": 1}


def test_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("curl https://x.test/stdin"))
    assert cli.main([]) == 0
    assert json.loads(capsys.readouterr().out)["fullUrl"] == "https://x.test/stdin"


def test_parse_failure_exit_code(monkeypatch, capsys):
    monkeypatch.setattr(cli, "parse_curl_command", lambda text: ParseFailure(error="Failed to parse curl command: x"))
    assert cli.main(["--command", "curl"]) == 1
    assert json.loads(capsys.readouterr().out)["success"] is False


SCRAPE_FLAGS = [
    "--pagination-key", "offset",
    "--response-json-path", "jobPostings",
    "--job-id-json-path", "id",
    "--job-title-json-path", "title",
    "--job-link-json-path", "externalPath",
]


def test_scrape_config_printed(capsys):
    rc = cli.main(["--command", "curl https://x.test/api -X POST -d '{\"offset\": 0}'", "--scrape-name", "Acme", "--dry-run"]
                  + SCRAPE_FLAGS)
    assert rc == 0
    out = capsys.readouterr().out
    assert "--- Scrape config ---" in out
    assert '"base_url": "https://x.test/api"' in out
    assert '"response_json_path": "jobPostings"' in out
    assert '"dry_run": true' in out


def test_invalid_scrape_config(capsys):
    rc = cli.main(["--command", "curl https://x.test/api -X DELETE", "--scrape-name", "Acme"] + SCRAPE_FLAGS)
    assert rc == 1
    assert "Invalid scrape config" in capsys.readouterr().err


def test_send(monkeypatch, capsys):
    def fake_send(result, timeout):
        resp = requests.Response()
        resp.status_code = 200
        resp._content = b"hello"
        resp.headers["Content-Type"] = "text/plain"
        return resp

    monkeypatch.setattr(client, "send_parsed_request", fake_send)
    rc = cli.main(["--command", "curl https://x.test", "--send"])
    assert rc == 0
    out = capsys.readouterr().out
    assert "--- Response (200) ---" in out
    assert "hello" in out


def test_send_failure(monkeypatch, capsys):
    def fake_send(result, timeout):
        raise requests.ConnectionError("refused")

    monkeypatch.setattr(client, "send_parsed_request", fake_send)
    assert cli.main(["--command", "curl https://x.test", "--send"]) == 2
    assert "Request failed" in capsys.readouterr().err


def test_scrape_config_missing_paths(capsys):
    rc = cli.main(["--command", "curl https://x.test/api", "--scrape-name", "Acme", "--pagination-key", "page"])
    assert rc == 1
    err = capsys.readouterr().err
    assert "missing required fields" in err
    assert "response_json_path" in err
