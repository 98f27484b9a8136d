#!/usr/bin/env python3
"""
End-to-end smoke demo for the knowledge base proxy.

Steps:
1. Health check
2. List knowledge bases
3. Ask one question through /api/chat
4. Show relay metrics

Usage:
    # Start the proxy first (kb-proxy, or python -m kb_proxy.main), then run:
    python scripts/demo_e2e.py

    # Or with custom URL and question:
    python scripts/demo_e2e.py --url http://localhost:5000 --query "What is the refund policy?"

Requires API_KEY, KNOWLEDGE_BASE_ID and GEMINI_API_KEY to be set for the proxy.
"""

import argparse
import json
import sys

import httpx


DEFAULT_QUERY = "What topics does this knowledge base cover?"


def print_step(title: str) -> None:
    print(f"\n=== {title} ===")


def show(response: httpx.Response) -> None:
    try:
        body = json.dumps(response.json(), indent=2)
    except ValueError:
        body = response.text
    print(f"[{response.status_code}] {body}")


def main() -> int:
    parser = argparse.ArgumentParser(description="Knowledge base proxy smoke demo")
    parser.add_argument("--url", default="http://localhost:5000", help="Proxy base URL")
    parser.add_argument("--query", default=DEFAULT_QUERY, help="Question to ask")
    args = parser.parse_args()

    # Chat waits on two upstream calls
    with httpx.Client(base_url=args.url.rstrip("/"), timeout=120.0) as client:
        try:
            print_step("Health")
            show(client.get("/health"))
        except httpx.RequestError as e:
            print(f"Proxy not reachable at {args.url}: {e}")
            return 1

        print_step("Knowledge bases")
        show(client.get("/api/knowledgebase"))

        print_step(f"Chat: {args.query}")
        chat = client.post("/api/chat", json={"query": args.query})
        show(chat)

        print_step("Relay metrics")
        show(client.get("/metrics/relay"))

    return 0 if chat.status_code == 200 else 1


if __name__ == "__main__":
    sys.exit(main())
