from __future__ import annotations

import argparse
from contextlib import contextmanager
import json
from pathlib import Path
import sys
from typing import Iterator, Sequence

from .anchoring import capture_anchor, resolve_anchor
from .config import load_engine_config
from .dom import DomDocument, InvalidSelectorError
from .engine import SelectorEngine
from .logging_setup import build_logger
from .soup_dom import SoupDocument
from .validation import validate_selector

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_SOURCE = 2

_MISSING_BROWSER_ERROR_HINTS = (
    "executable doesn't exist",
    "executable does not exist",
    "download new browsers",
    "playwright install",
    "could not find browser",
    "failed to launch chromium because executable",
)


class SourceError(Exception):
    pass


def _is_missing_browser_error(exc: Exception) -> bool:
    message = str(exc).lower()
    return any(hint in message for hint in _MISSING_BROWSER_ERROR_HINTS)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


@contextmanager
def open_document(source: str) -> Iterator[DomDocument]:
    if not _is_url(source):
        try:
            document = SoupDocument.from_file(Path(source))
        except OSError as exc:
            raise SourceError(f"Could not read {source}: {exc}") from exc
        yield document
        return

    from playwright.sync_api import Error as PlaywrightError, sync_playwright

    from .page_dom import PageDocument

    with sync_playwright() as playwright:
        try:
            browser = playwright.chromium.launch(headless=True)
        except PlaywrightError as exc:
            if _is_missing_browser_error(exc):
                raise SourceError("Chromium is not installed. Run `playwright install chromium`.") from exc
            raise SourceError(f"Could not launch browser: {exc}") from exc
        try:
            page = browser.new_page()
            try:
                page.goto(source, wait_until="domcontentloaded")
            except PlaywrightError as exc:
                raise SourceError(f"Could not load {source}: {exc}") from exc
            yield PageDocument(page)
        finally:
            browser.close()


def _emit(payload: dict) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2))


def _element_summary(element) -> dict[str, str | None]:
    if element is None:
        return {"tag": None, "text": None}
    return {"tag": element.tag, "text": element.text.strip()[:100]}


def _cmd_generate(args: argparse.Namespace) -> int:
    config = load_engine_config()
    with open_document(args.source) as document:
        try:
            element = document.query_first(args.target)
        except InvalidSelectorError as exc:
            print(f"Target selector is invalid: {exc.reason or exc}", file=sys.stderr)
            return EXIT_SOURCE
        if element is None:
            print(f"No element matches {args.target!r}.", file=sys.stderr)
            return EXIT_SOURCE
        record = capture_anchor(SelectorEngine(document, config), element)
    if record is None:
        print("Could not generate a selector.", file=sys.stderr)
        return EXIT_INVALID
    _emit(
        {
            "selector": record.selector,
            "confidence": record.confidence,
            "fallbacks": record.fallbacks,
            "anchor_text": record.anchor_text,
        }
    )
    return EXIT_OK


def _cmd_resolve(args: argparse.Namespace) -> int:
    config = load_engine_config()
    with open_document(args.source) as document:
        engine = SelectorEngine(document, config)
        resolution = resolve_anchor(engine, args.selector, args.text or "", trusted=args.trusted)
        payload = {"status": resolution.status, "selector": resolution.selector, "error": resolution.error}
        payload.update(_element_summary(resolution.element))
    _emit(payload)
    return EXIT_INVALID if resolution.status == "orphaned" else EXIT_OK


def _cmd_check(args: argparse.Namespace) -> int:
    config = load_engine_config()
    result = validate_selector(args.selector, max_length=config.max_selector_length)
    _emit(
        {
            "valid": result.valid,
            "error": result.error,
            "confidence": SelectorEngine.get_confidence_score(args.selector.strip()) if result.valid else 0,
        }
    )
    return EXIT_OK if result.valid else EXIT_INVALID


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pinanchor", description="Generate and re-resolve element anchors.")
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate = subparsers.add_parser("generate", help="Generate a selector for one element.")
    generate.add_argument("source", help="HTML file or http(s) URL.")
    generate.add_argument("target", help="CSS selector picking the element to anchor.")
    generate.set_defaults(handler=_cmd_generate)

    resolve = subparsers.add_parser("resolve", help="Resolve a stored selector, re-anchoring if needed.")
    resolve.add_argument("source", help="HTML file or http(s) URL.")
    resolve.add_argument("selector", help="Stored selector.")
    resolve.add_argument("--text", default="", help="Stored anchor text hint.")
    resolve.add_argument("--trusted", action="store_true", help="Skip sanitization for selectors from this session.")
    resolve.set_defaults(handler=_cmd_resolve)

    check = subparsers.add_parser("check", help="Validate selector text without a document.")
    check.add_argument("selector")
    check.set_defaults(handler=_cmd_check)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    if sys.version_info < (3, 11):
        raise SystemExit(
            "pinanchor requires Python 3.11+. "
            f"Current interpreter: {sys.executable} (Python {sys.version.split()[0]})"
        )
    logger = build_logger()
    args = build_parser().parse_args(argv)
    logger.info("Command %s started.", args.command)
    try:
        return args.handler(args)
    except SourceError as exc:
        logger.warning("Command %s failed: %s", args.command, exc)
        print(str(exc), file=sys.stderr)
        return EXIT_SOURCE


if __name__ == "__main__":
    raise SystemExit(main())
