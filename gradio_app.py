"""Gradio app to paste a curl command, check what was parsed and try the request.

Flow:
- User pastes a curl command (multi-line with trailing backslashes is fine).
- Parse -> shows URL, method, query string, headers and body.
- Send -> replays the request and shows status and response text.
- Optional company name -> shows the generic scrape config to store.

Note: the parser is best-effort; always check the fields before saving a config.
"""
import json

import gradio as gr
import requests

from curlpaste import client
from curlpaste.parser import parse_curl_command


def _format_body(body) -> str:
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    return json.dumps(body, indent=2, ensure_ascii=False)


def analyze(curl_text, company_name, dry_run=False, *paths):
    # paths arrive in client.SCRAPE_PATH_FIELDS order, one per textbox
    result = parse_curl_command(curl_text or "")
    if not result.success:
        return "", "", "", "", "", "", result.error

    headers_text = json.dumps(result.headers, indent=2, ensure_ascii=False)
    status = "Parsed" if result.full_url else "Parsed, but no URL found"

    config_text = ""
    if company_name and company_name.strip():
        try:
            fields = dict(zip(client.SCRAPE_PATH_FIELDS, paths))
            config = client.to_scrape_config(result, company_name, dry_run=bool(dry_run), **fields)
            config_text = json.dumps(config, indent=2, ensure_ascii=False)
        except client.RequestBuildError as e:
            status = f"{status}. Scrape config not valid: {e}"

    return (result.url, result.method, result.query_params, headers_text,
            _format_body(result.body), config_text, status)


def send(curl_text, timeout):
    result = parse_curl_command(curl_text or "")
    try:
        resp = client.send_parsed_request(result, timeout=float(timeout or client.DEFAULT_TIMEOUT))
    except client.RequestBuildError as e:
        return f"Cannot send: {e}", ""
    except requests.RequestException as e:
        return f"Request failed: {e}", ""
    return f"HTTP {resp.status_code}", client.response_to_text(resp)


def build_app() -> gr.Blocks:
    with gr.Blocks(title="curlpaste") as demo:
        gr.Markdown("## Paste a curl command")
        curl_box = gr.Textbox(label="curl command", lines=8)
        company = gr.Textbox(label="Company name (optional, for the scrape config)")
        with gr.Accordion("Scrape config fields", open=False):
            path_boxes = [gr.Textbox(label=field + (" *" if field in client.REQUIRED_SCRAPE_FIELDS else ""))
                          for field in client.SCRAPE_PATH_FIELDS]
            dry_run = gr.Checkbox(label="dry_run")
        with gr.Row():
            parse_btn = gr.Button("Parse")
            send_btn = gr.Button("Send")
            timeout = gr.Number(value=client.DEFAULT_TIMEOUT, label="Timeout (s)")
        status = gr.Textbox(label="Status", interactive=False)
        with gr.Row():
            url = gr.Textbox(label="URL", interactive=False)
            method = gr.Textbox(label="Method", interactive=False)
            query = gr.Textbox(label="Query params", interactive=False)
        headers = gr.Code(label="Headers", language="json")
        body = gr.Textbox(label="Body", lines=6, interactive=False)
        config = gr.Code(label="Scrape config", language="json")
        response = gr.Textbox(label="Response", lines=12, interactive=False)

        parse_btn.click(analyze, inputs=[curl_box, company, dry_run] + path_boxes,
                        outputs=[url, method, query, headers, body, config, status])
        send_btn.click(send, inputs=[curl_box, timeout], outputs=[status, response])
    return demo


if __name__ == "__main__":
    build_app().launch()
