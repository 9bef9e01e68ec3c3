"""Command-line client for the summarization service.

Posts text to a running server, keeps a local history of results and
prints it newest first.
"""
from __future__ import annotations
import argparse
import logging
import os
import sys
from typing import Any

import httpx

from prompt_summarizer.client.store import SummaryStore
from prompt_summarizer.common.logging_setup import setup_logging
from prompt_summarizer.common.schema import QUOTA_EXCEEDED_CODE, SummaryRecord

LOGGER = logging.getLogger("prompt_summarizer.client")

QUOTA_HELP = (
    "OpenAI API quota exceeded. Add credits or raise your limits at "
    "https://platform.openai.com/account/billing"
)


class SummarizeFailed(Exception):
    """Server answered with an error envelope."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.code = code


def request_summary(text: str, server_url: str, client: httpx.Client | None = None) -> str:
    """
    Ask the server for a summary of ``text``.

    Raises:
        SummarizeFailed: The server returned a non-2xx status.
        httpx.HTTPError: The server could not be reached.
    """
    owned = client is None
    client = client or httpx.Client(timeout=120.0)
    try:
        r = client.post(f"{server_url.rstrip('/')}/api/summarize", json={"text": text})
    finally:
        if owned:
            client.close()
    try:
        data: Any = r.json()
    except ValueError:
        data = None
    if not isinstance(data, dict):
        data = {}
    if r.is_error:
        raise SummarizeFailed(
            data.get("message") or data.get("error") or f"HTTP {r.status_code}",
            code=data.get("code"),
        )
    if not isinstance(data.get("summary"), str):
        raise SummarizeFailed("Server response has no summary")
    return data["summary"]


def format_error(exc: SummarizeFailed) -> str:
    if exc.code == QUOTA_EXCEEDED_CODE:
        return QUOTA_HELP
    return f"Error: {exc}"


def format_record(record: SummaryRecord) -> str:
    return f"#{record.id} [{record.timestamp}]\n{record.summary}\n"


def main(argv: list[str] | None = None) -> int:
    setup_logging(os.getenv("LOG_LEVEL", "WARNING"))
    ap = argparse.ArgumentParser(description="Summarize text with a prompt-summarizer server")
    ap.add_argument("--server", default=os.getenv("SUMMARIZER_URL", "http://localhost:3000"))
    ap.add_argument("--db", default=os.getenv("SUMMARY_DB_URL", "sqlite:///summaries.db"), help="History database URL")
    sub = ap.add_subparsers(dest="command", required=True)
    p_sum = sub.add_parser("summarize", help="Summarize text and store the result")
    p_sum.add_argument("--text", help="Input text; read from stdin when omitted")
    sub.add_parser("history", help="Print stored summaries, newest first")
    args = ap.parse_args(argv)

    store = SummaryStore(args.db)
    try:
        if args.command == "summarize":
            text = args.text if args.text is not None else sys.stdin.read()
            try:
                summary = request_summary(text, args.server)
            except SummarizeFailed as e:
                print(format_error(e), file=sys.stderr)
                return 1
            except httpx.HTTPError as e:
                LOGGER.error("Request to %s failed: %s", args.server, e)
                print(f"Error: could not reach {args.server}", file=sys.stderr)
                return 1
            record = store.add(text, summary)
            print(format_record(record))
        else:
            for record in store.newest_first():
                print(format_record(record))
    finally:
        store.close()
    return 0

if __name__ == "__main__":
    sys.exit(main())
