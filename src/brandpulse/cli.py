"""Command-line interface for BrandPulse."""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .artifacts import Artifact, ArtifactCategorizer
from .core.config import settings
from .core.constants import FileConstants
from .core.errors import InputValidationError
from .services.analysis import BrandAnalysisService
from .services.providers import build_provider_capabilities
from .services.sources import build_source_capabilities
from .utils.data_prep import export_to_json, to_jsonable

logger = logging.getLogger(__name__)


def setup_logging():
    """Setup logging configuration."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format=FileConstants.LOG_FORMAT,
    )


def build_service(source_names: Optional[List[str]] = None) -> BrandAnalysisService:
    """Analysis service wired to every provider and source that has credentials."""
    return BrandAnalysisService(
        providers=build_provider_capabilities(settings),
        sources=build_source_capabilities(settings, source_names),
    )


def _print_report(report, out: Optional[str]) -> None:
    data = report.to_dict()
    print(f"\n📊 {report.metadata.get('category', 'report')} for '{report.brand_name or 'content'}'")
    for insight in report.insights:
        print(f"  • {insight}")
    if report.recommendations:
        print("\nRecommendations:")
        for rec in report.recommendations:
            print(f"  - {rec}")
    if out:
        export_to_json(data, out)
        print(f"\nResults saved to {out}")


def cmd_visibility(args):
    """Visibility command."""
    service = build_service()
    report = service.analyze_visibility(
        args.brand,
        queries=args.query,
        timeframe=args.timeframe,
        include_recommendations=not args.no_recommendations,
    )
    print(f"Overall visibility: {report.overall_score}/100 ({report.success_rate}% of providers answered)")
    _print_report(report, args.out)


def cmd_monitor(args):
    """Monitor command."""
    service = build_service(args.sources)
    report = service.monitor_brand(
        args.brand,
        sources=args.sources,
        timeframe=args.timeframe,
        limit=args.limit,
        include_recommendations=not args.no_recommendations,
    )
    print(f"Found {report.mention_count} mentions, credibility {report.credibility_score}")
    _print_report(report, args.out)


def cmd_compete(args):
    """Competitive analysis command."""
    service = build_service()
    report = service.analyze_competition(
        args.brand,
        args.competitors,
        industry=args.industry,
        timeframe=args.timeframe,
        include_recommendations=not args.no_recommendations,
    )
    position = report.market_position
    print(f"Rank {position.rank}/{position.total_brands}, market share {position.market_share}%")
    _print_report(report, args.out)


def cmd_optimize(args):
    """Content optimization command."""
    if args.file:
        with open(args.file, "r", encoding="utf-8") as f:
            content = f.read()
    else:
        content = args.content or ""
    service = build_service()
    report = service.optimize_content(
        content,
        args.keywords,
        industry=args.industry,
        content_type=args.content_type,
        include_recommendations=not args.no_recommendations,
    )
    print(f"Average optimization score: {report.overall_optimization.get('average_score', 0)}/100")
    _print_report(report, args.out)


def _load_artifacts(path: str) -> List[Artifact]:
    with open(path, "r", encoding="utf-8") as f:
        data: Any = json.load(f)
    if isinstance(data, dict):
        data = data.get("artifacts", [data])
    if not isinstance(data, list):
        raise InputValidationError([f"{path}: expected a list of artifacts"])
    return [Artifact.from_dict(item) for item in data if isinstance(item, dict)]


def cmd_categorize(args):
    """Categorize command."""
    artifacts = _load_artifacts(args.input_file)
    categorizer = ArtifactCategorizer()
    if args.graph:
        payload = categorizer.build_relationship_graph(artifacts)
    else:
        categorized = categorizer.categorize_many(artifacts)
        payload = {
            "artifacts": categorized,
            "stats": categorizer.get_categorization_stats(categorized),
        }
    print(json.dumps(to_jsonable(payload), indent=2, ensure_ascii=False))


def cmd_export(args):
    """Export command."""
    try:
        with open(args.input_file, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise InputValidationError([f"Input file {args.input_file} not found"])
    except json.JSONDecodeError as e:
        raise InputValidationError([f"Invalid JSON in input file: {e}"])

    if args.pretty:
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        output_file = args.output or args.input_file.replace(".json", "_export.json")
        export_to_json(data, output_file)
        print(f"Exported to {output_file}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="BrandPulse - Brand Signal Aggregation & Scoring")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    def add_common(sub, timeframe=True):
        if timeframe:
            sub.add_argument("--timeframe", default="week", choices=["day", "week", "month"], help="Lookback window")
        sub.add_argument("--no-recommendations", action="store_true", help="Skip recommendations")
        sub.add_argument("--out", help="Output JSON file")

    # Visibility command
    visibility_parser = subparsers.add_parser("visibility", help="Brand visibility across AI providers")
    visibility_parser.add_argument("brand", help="Brand name")
    visibility_parser.add_argument("--query", action="append", help="Custom prompt (repeatable)")
    add_common(visibility_parser)

    # Monitor command
    monitor_parser = subparsers.add_parser("monitor", help="Brand mentions across content sources")
    monitor_parser.add_argument("brand", help="Brand name")
    monitor_parser.add_argument("--sources", nargs="+", help="Sources to crawl (reddit, hackernews, youtube)")
    monitor_parser.add_argument("--limit", type=int, default=10, help="Items per source")
    add_common(monitor_parser)

    # Compete command
    compete_parser = subparsers.add_parser("compete", help="Competitive analysis")
    compete_parser.add_argument("brand", help="Primary brand")
    compete_parser.add_argument("--competitors", nargs="+", required=True, help="Competitor brands")
    compete_parser.add_argument("--industry", default="general", help="Industry")
    add_common(compete_parser)

    # Optimize command
    optimize_parser = subparsers.add_parser("optimize", help="Content optimization for AI platforms")
    source = optimize_parser.add_mutually_exclusive_group(required=True)
    source.add_argument("--content", help="Content text")
    source.add_argument("--file", help="File holding the content")
    optimize_parser.add_argument("--keywords", nargs="+", required=True, help="Target keywords")
    optimize_parser.add_argument("--industry", help="Industry")
    optimize_parser.add_argument("--content-type", dest="content_type", help="Content type")
    add_common(optimize_parser, timeframe=False)

    # Categorize command
    categorize_parser = subparsers.add_parser("categorize", help="Categorize artifacts from a JSON file")
    categorize_parser.add_argument("input_file", help="JSON list of artifacts")
    categorize_parser.add_argument("--graph", action="store_true", help="Print the relationship graph")

    # Export command
    export_parser = subparsers.add_parser("export", help="Export analysis results")
    export_parser.add_argument("--in", dest="input_file", required=True, help="Input JSON file")
    export_parser.add_argument("--out", dest="output", help="Output file (optional)")
    export_parser.add_argument("--pretty", action="store_true", help="Pretty print to stdout")

    return parser


COMMANDS = {
    "visibility": cmd_visibility,
    "monitor": cmd_monitor,
    "compete": cmd_compete,
    "optimize": cmd_optimize,
    "categorize": cmd_categorize,
    "export": cmd_export,
}


def main(argv: Optional[List[str]] = None):
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return

    setup_logging()

    try:
        COMMANDS[args.command](args)
    except InputValidationError as e:
        print(f"Invalid input: {e}", file=sys.stderr)
        sys.exit(2)
    except KeyboardInterrupt:
        print("\nOperation cancelled by user")
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
