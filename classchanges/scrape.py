"""
Scraping (form page -> announcement texts).

- Fetches the public form page that lists the schedule changes
- Pulls the heading text of every question/list item
- Returns them in page order as plain strings

Each list item heading is one announcement, e.g. "2月18日 1F 3h 自宅学習".
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, field
from typing import List

import requests
from bs4 import BeautifulSoup

from classchanges.config import form_url

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

HEADERS = {
    "User-Agent": "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36",
}

UNKNOWN_TITLE = "(untitled form)"


class FetchError(RuntimeError):
    """The form page could not be downloaded."""


@dataclass
class FormPage:
    title: str
    items: List[str] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def fetch_form_page(url: str, timeout: float = 30) -> str:
    """
    Download the form page and return its HTML.

    Raises FetchError for network errors and non-2xx responses.
    """
    try:
        resp = requests.get(url, headers=HEADERS, timeout=timeout)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"Could not fetch form page {url}: {e}") from e
    return resp.text


def parse_form_html(html: str) -> FormPage:
    """
    Extract the form title and every list item heading.
    """
    soup = BeautifulSoup(html, "html.parser")

    title = ""
    heading = soup.select_one("div[role='heading']")
    if heading:
        title = heading.get_text(strip=True)
    if not title:
        meta = soup.select_one("meta[property='og:title']")
        if meta and meta.get("content"):
            title = str(meta["content"]).strip()

    items: List[str] = []
    for item in soup.select("div[role='listitem']"):
        q = item.select_one("div[role='heading']")
        if not q:
            continue
        text = q.get_text(strip=True)
        if text:
            items.append(text)

    return FormPage(title=title or UNKNOWN_TITLE, items=items)


def fetch_announcements(url: str | None = None, timeout: float = 30) -> FormPage:
    return parse_form_html(fetch_form_page(url or form_url(), timeout=timeout))


# ---------------------------------------------------------------------------
# CLI entry
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="classchanges.scrape", description="Print the announcements on the form page")
    p.add_argument("--url", type=str, default=None, help="Form page URL (default: $FORM_URL)")
    return p


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        page = fetch_announcements(args.url)
    except FetchError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1)

    print(f"Form: {page.title}")
    print(f"Found {len(page.items)} items")
    for text in page.items:
        print(text)


if __name__ == "__main__":
    main()
