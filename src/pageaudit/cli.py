"""Command-line interface for the page auditor."""

import asyncio
import json
import sys

from pageaudit.checks import CHECKS
from pageaudit.config import Config, settings
from pageaudit.fetcher import Fetcher
from pageaudit.logging_config import get_logger, setup_logging
from pageaudit.orchestrator import AuditOrchestrator
from pageaudit.serp import SerpResolver
from pageaudit.suggestions import KeywordSuggester

logger = get_logger(__name__)


def _fetcher(config: Config) -> Fetcher:
    return Fetcher(
        user_agent=config.user_agent,
        timeout=config.timeout,
        probe_timeout=config.probe_timeout,
        max_redirects=config.max_redirects,
    )


async def _run_audit(url: str, config: Config):
    async with _fetcher(config) as fetcher:
        return await AuditOrchestrator(fetcher, config).run_full_audit(url)


async def _run_check(name: str, url: str, config: Config) -> dict:
    async with _fetcher(config) as fetcher:
        return await AuditOrchestrator(fetcher, config).run_check(name, url)


async def _run_serp(keyword: str, config: Config):
    async with _fetcher(config) as fetcher:
        return await SerpResolver(fetcher, max_results=config.max_serp_results).fetch_serp(keyword)


async def _run_suggest(keyword: str, config: Config) -> dict:
    async with _fetcher(config) as fetcher:
        suggester = KeywordSuggester(fetcher)
        return {
            "suggestions": await suggester.suggestions(keyword),
            "questions": await suggester.questions(keyword),
        }


def _write(output: str, output_file=None) -> None:
    if output_file:
        with open(output_file, "w") as f:
            f.write(output)
        print(f"\nReport written to {output_file}")
    else:
        print(output)


def print_report(report) -> None:
    """Print an audit report in a readable layout.

    Args:
        report: AuditReport to print
    """
    if report.failed:
        print(f"\n❌ Failed to audit {report.url}: {report.details}")
        return

    print(f"\n{'=' * 60}")
    print(f"Page Audit for: {report.url}")
    print(f"{'=' * 60}")

    seo = report.sections.get("seo", {})
    if "error" not in seo:
        print(f"\n📄 Title: {seo.get('title')}")
        print(f"   Description: {seo.get('description')}")
        print(f"   H1: {seo.get('h1')}")

    words = report.sections.get("wordcount", {})
    if "error" not in words:
        print(f"\n📊 Words: {words.get('words')}  Sentences: {words.get('sentences')}")
        print(f"   Readability: {words.get('flesch_reading_score')}/100 ({words.get('readability_grade')})  Read time: {words.get('read_time_min')} min")

    keywords = report.sections.get("keywords", {})
    if "error" not in keywords and keywords.get("keywords"):
        print("\n🔑 Top keywords:")
        for term, frequency in keywords["keywords"]:
            print(f"  • {term} ({frequency})")

    links = report.sections.get("broken_links", {})
    if "error" not in links:
        print(f"\n🔗 Links checked: {links.get('total')}  Broken: {len(links.get('broken', []))}")
        for url in links.get("broken", []):
            print(f"  • {url}")

    tech = report.sections.get("tech", {})
    if "error" not in tech:
        stack = tech.get("tech", {})
        print(f"\n🧰 CMS: {stack.get('cms')}  Server: {stack.get('hosting')}")
        if stack.get("frameworks"):
            print(f"   Frameworks: {', '.join(stack['frameworks'])}")

    failed = report.failed_checks()
    if failed:
        print("\n⚠️  Failed checks:")
        for name in failed:
            print(f"  • {name}: {report.sections[name].get('details')}")

    print(f"\n{'=' * 60}\n")


def audit_command(args, config: Config):
    """Run a full audit of one URL."""
    logger.info(f"Auditing {args.url}")
    report = asyncio.run(_run_audit(args.url, config))
    if args.output == "json":
        _write(json.dumps(report.to_dict(), indent=2, default=str), args.output_file)
    else:
        print_report(report)
    if report.failed:
        sys.exit(1)


def check_command(args, config: Config):
    """Run a single named check."""
    check = CHECKS[args.name]
    try:
        payload = {**asyncio.run(_run_check(args.name, args.url, config)), "status": "success"}
    except Exception as e:
        payload = check.failure_payload(e)
    print(json.dumps(payload, indent=2, default=str))


def serp_command(args, config: Config):
    """Print search results for a keyword."""
    entries = asyncio.run(_run_serp(args.keyword, config))
    if args.output == "json":
        print(json.dumps([e.to_dict() for e in entries], indent=2))
        return
    for entry in entries:
        print(f"{entry.rank:>2}. {entry.title}\n    {entry.link}")


def suggest_command(args, config: Config):
    """Print keyword suggestions and questions."""
    print(json.dumps(asyncio.run(_run_suggest(args.keyword, config)), indent=2))


def serve_command(args, config: Config):
    """Start the HTTP API."""
    logger.info(f"Serving page audit API on {args.host}:{args.port}")
    import uvicorn

    from pageaudit.api import create_app

    uvicorn.run(create_app(config), host=args.host, port=args.port)


def main():
    """Main CLI entry point."""
    import argparse

    parser = argparse.ArgumentParser(
        description="Page Audit - Audit pages, probe links and research keywords"
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL,
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        default=settings.LOG_FILE,
        help="Write logs to file in addition to console",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    audit_parser = subparsers.add_parser("audit", help="Run a full audit of a URL.")
    audit_parser.add_argument("url", help="URL to audit")
    audit_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    audit_parser.add_argument(
        "--output-file",
        "-f",
        help="Write output to file (only for json format)",
    )
    audit_parser.set_defaults(func=audit_command)

    check_parser = subparsers.add_parser("check", help="Run a single check against a URL.")
    check_parser.add_argument("name", choices=sorted(CHECKS), help="Check to run")
    check_parser.add_argument("url", help="URL to check")
    check_parser.set_defaults(func=check_command)

    serp_parser = subparsers.add_parser("serp", help="Fetch search results for a keyword.")
    serp_parser.add_argument("keyword", help="Search query")
    serp_parser.add_argument(
        "--output",
        "-o",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    serp_parser.set_defaults(func=serp_command)

    suggest_parser = subparsers.add_parser("suggest", help="Keyword suggestions and questions.")
    suggest_parser.add_argument("keyword", help="Seed keyword")
    suggest_parser.set_defaults(func=suggest_command)

    serve_parser = subparsers.add_parser("serve", help="Run the HTTP API.")
    serve_parser.add_argument("--host", default=settings.HOST, help="Bind address")
    serve_parser.add_argument("--port", type=int, default=settings.PORT, help="Bind port")
    serve_parser.set_defaults(func=serve_command)

    args = parser.parse_args()

    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if hasattr(args, "func"):
        args.func(args, Config.from_env())
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
