#!/usr/bin/env python
"""
Interactive terminal client for the Counsel API

Commands:
    /mode chat|research|paralegal|examine   switch the operating mode
    /upload <path-to-pdf>                   index a PDF
    /quit                                   exit

Anything else is sent to /api/counsel/query with the current mode and the
conversation so far.

Usage:
    python scripts/counsel_cli.py [--base-url http://localhost:8001]
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

import httpx

MODES = {
    "chat": "None",
    "research": "DeepResearch",
    "paralegal": "Paralegal",
    "examine": "CrossExamine",
}


# Color codes for output
class Colors:
    HEADER = '\033[95m'
    OKCYAN = '\033[96m'
    OKGREEN = '\033[92m'
    WARNING = '\033[93m'
    FAIL = '\033[91m'
    ENDC = '\033[0m'
    BOLD = '\033[1m'


def print_header(text: str):
    print(f"\n{Colors.HEADER}{Colors.BOLD}{text}{Colors.ENDC}")


def print_error(text: str):
    print(f"{Colors.FAIL}✗ {text}{Colors.ENDC}")


def print_info(text: str):
    print(f"{Colors.OKCYAN}ℹ {text}{Colors.ENDC}")


class CounselClient:
    """Thin wrapper over the Counsel HTTP API that keeps chat history."""

    def __init__(self, http: httpx.Client, mode: str = "chat"):
        self.http = http
        self.mode = mode
        self.history: List[str] = []

    def set_mode(self, name: str) -> str:
        name = name.strip().lower()
        if name not in MODES:
            raise ValueError(f"Unknown mode '{name}'. Choose one of: {', '.join(MODES)}")
        self.mode = name
        return name

    def ask(self, query: str) -> dict:
        response = self.http.post(
            "/api/counsel/query",
            json={"query": query, "mode": MODES[self.mode], "chatHistory": self.history},
        )
        response.raise_for_status()
        body = response.json()
        self.history.append(f"User: {query}")
        self.history.append(f"Assistant: {body.get('response', '')}")
        return body

    def upload(self, path: Path) -> dict:
        with path.open("rb") as fh:
            response = self.http.post(
                "/api/counsel/documents/upload",
                files={"file": (path.name, fh, "application/pdf")},
            )
        response.raise_for_status()
        return response.json()


def handle_line(client: CounselClient, line: str) -> bool:
    """Process one line of input. Returns False when the session should end."""
    line = line.strip()
    if not line:
        return True

    if line in ("/quit", "/exit"):
        return False

    if line.startswith("/mode"):
        parts = line.split(maxsplit=1)
        if len(parts) < 2:
            print_info(f"Current mode: {client.mode}")
            return True
        try:
            mode = client.set_mode(parts[1])
            print_info(f"Switched to {mode} mode")
        except ValueError as e:
            print_error(str(e))
        return True

    if line.startswith("/upload"):
        parts = line.split(maxsplit=1)
        if len(parts) < 2:
            print_error("Usage: /upload <path-to-pdf>")
            return True
        path = Path(parts[1]).expanduser()
        if not path.is_file():
            print_error(f"File not found: {path}")
            return True
        try:
            result = client.upload(path)
            print_info(f"{result.get('message')} ({result.get('chunks', 0)} chunks)")
        except httpx.HTTPStatusError as e:
            print_error(f"Upload failed: {e.response.status_code} {e.response.text}")
        except httpx.HTTPError as e:
            print_error(f"Upload failed: {e}")
        return True

    try:
        body = client.ask(line)
    except httpx.HTTPStatusError as e:
        print_error(f"Request failed: {e.response.status_code} {e.response.text}")
        return True
    except httpx.HTTPError as e:
        print_error(f"Request failed: {e}")
        return True

    print(f"{Colors.OKGREEN}Counsel:{Colors.ENDC} {body.get('response', '')}")
    if body.get("canvasContent"):
        print_header(body.get("canvasTitle") or "Canvas")
        print(body["canvasContent"])
    return True


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Terminal client for the Counsel API")
    parser.add_argument("--base-url", default="http://localhost:8001", help="API base URL")
    parser.add_argument("--mode", choices=sorted(MODES), default="chat", help="Initial mode")
    parser.add_argument("--timeout", type=float, default=120.0, help="Request timeout in seconds")
    args = parser.parse_args(argv)

    print_header("Counsel - Terminal Client")
    print_info(f"API: {args.base_url}  Mode: {args.mode}")
    print_info("Commands: /mode <chat|research|paralegal|examine>, /upload <pdf>, /quit")

    with httpx.Client(base_url=args.base_url, timeout=args.timeout) as http:
        client = CounselClient(http, mode=args.mode)
        while True:
            try:
                line = input(f"[{client.mode}] > ")
            except EOFError:
                break
            if not handle_line(client, line):
                break
    return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nBye")
        sys.exit(0)
