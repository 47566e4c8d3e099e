"""Terminal chat client for the AyurBot API."""
from __future__ import annotations

import argparse
import re
from typing import Iterable, List, Mapping, Optional

import httpx
from rich.console import Console

CONNECTION_NOTICE = "Sorry, I'm having trouble connecting right now. Please try again later."
API_KEY_NOTICE = "Configuration issue detected. Please check your AI API key."
QUOTA_NOTICE = "Service temporarily unavailable due to quota limits."
EMPTY_ANSWER_NOTICE = "I’m not sure, but I can offer general Ayurvedic insight."
GREETING = (
    "Namaste! I'm AyurBot, your AI assistant for Ayurveda, yoga, and holistic wellness. "
    "I can help you understand doshas, herbs, treatments, meditation, and natural health practices. "
    "How can I support your wellness journey today?"
)

_HEADING_RE = re.compile(r"#+\s?")
_BULLET_RE = re.compile(r"^\s*[-*]\s*", re.MULTILINE)


def clean_text(text: str) -> str:
    """Strip Markdown headings, bold markers and bullet prefixes."""

    text = _HEADING_RE.sub("", text)
    text = text.replace("**", "")
    text = _BULLET_RE.sub("", text)
    return text.strip()


def to_history(messages: Iterable[Mapping[str, str]]) -> List[dict]:
    """Map local ``{sender, text}`` messages to the API's ``{role, parts}`` shape."""

    return [
        {
            "role": "model" if msg.get("sender") == "bot" else "user",
            "parts": [{"text": msg.get("text", "")}],
        }
        for msg in messages
    ]


def error_message(detail: str) -> str:
    if "API key" in detail:
        return API_KEY_NOTICE
    if "quota" in detail:
        return QUOTA_NOTICE
    return CONNECTION_NOTICE


def _failure_detail(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return f"API error: {response.status_code}"
    if not isinstance(body, dict):
        return f"API error: {response.status_code}"
    return " ".join(str(body[key]) for key in ("error", "details") if body.get(key))


def ask(
    client: httpx.Client,
    api_base: str,
    question: str,
    messages: List[dict],
) -> str:
    """Send one question and record both sides of the exchange in ``messages``."""

    payload = {"question": question, "history": to_history(messages)}
    messages.append({"sender": "user", "text": question})
    try:
        response = client.post(f"{api_base}/api/chat", json=payload)
        if response.status_code >= 400:
            reply = error_message(_failure_detail(response))
        else:
            data = response.json()
            if data.get("error"):
                reply = error_message(str(data["error"]))
            else:
                reply = clean_text(str(data.get("answer") or EMPTY_ANSWER_NOTICE))
    except (httpx.HTTPError, ValueError) as exc:
        reply = error_message(str(exc))
    messages.append({"sender": "bot", "text": reply})
    return reply


def _command_chat(args: argparse.Namespace) -> int:
    console = Console()
    api_base = args.api.rstrip("/")
    messages: List[dict] = [{"sender": "bot", "text": GREETING}]

    with httpx.Client(timeout=args.timeout) as client:
        if args.question:
            console.print(ask(client, api_base, args.question, messages), markup=False)
            return 0

        console.print("AyurBot chat. Empty line or Ctrl-D to quit.", style="bold green")
        console.print(GREETING, markup=False)
        while True:
            try:
                question = console.input("[yellow]you>[/] ").strip()
            except EOFError:
                break
            if not question:
                break
            reply = ask(client, api_base, question, messages)
            console.print("[green]ayurbot>[/] ", end="")
            console.print(reply, markup=False)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ayurbot",
        description="Chat with the AyurBot API from a terminal.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    chat_parser = subparsers.add_parser("chat", help="Ask questions via /api/chat.")
    chat_parser.add_argument(
        "--question",
        "-q",
        default=None,
        help="Ask a single question and exit instead of starting a session.",
    )
    chat_parser.add_argument(
        "--api",
        default="http://localhost:8000",
        help="AyurBot API base URL (default: http://localhost:8000).",
    )
    chat_parser.add_argument(
        "--timeout",
        type=float,
        default=120.0,
        help="HTTP timeout per request in seconds (default: 120).",
    )
    chat_parser.set_defaults(func=_command_chat)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
