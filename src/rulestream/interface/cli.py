"""CLI commands for evaluating scenarios and managing the rule catalog."""

import argparse
import json
import sys
from datetime import date
from pathlib import Path

from pydantic import ValidationError

from ..config.runtime import get_settings
from ..models.requests import ScenarioRequest
from ..services.validation import validate_scenario
from ..wiring import build_catalog_service, build_evaluation_service
from .mcp.observability import configure_logging


def _split_codes(value: str | None) -> list[str]:
    if not value:
        return []
    return [code for code in (part.strip() for part in value.split(",")) if code]


def load_catalog_from_file(path: Path) -> dict:
    """Load a catalog JSON document. Exits on missing file or invalid JSON."""
    if not path.exists():
        print(f"Error: catalog file not found: {path}", file=sys.stderr)
        print("Create data/catalog.json or pass --file <path>.", file=sys.stderr)
        sys.exit(1)
    with open(path, encoding="utf-8") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as e:
            print(f"Error: invalid JSON in {path}: {e}", file=sys.stderr)
            sys.exit(1)
    if not isinstance(raw, dict):
        print(
            'Error: catalog file must be a JSON object with "recommendations", "productGroups" and "rules".',
            file=sys.stderr,
        )
        sys.exit(1)
    return raw


def seed_catalog(file_path: Path | None = None) -> None:
    """Load a catalog JSON file and save its records via CatalogService."""
    path = file_path if file_path is not None else Path(get_settings().seed_file_path)
    catalog = load_catalog_from_file(path)
    print(f"Loading catalog from {path}...")
    result = build_catalog_service().seed(catalog)
    saved = result["saved"]
    print(
        f"Saved {saved['recommendations']} recommendations, "
        f"{saved['product_groups']} product groups, {saved['rules']} rules."
    )
    for error in result["errors"]:
        print(f"Skipped {error['section']}[{error.get('index', '-')}]: {error['error']}", file=sys.stderr)


def _scenario_from_args(args: argparse.Namespace) -> ScenarioRequest:
    try:
        return ScenarioRequest(
            held_codes=_split_codes(args.held),
            renewal_codes=_split_codes(args.renewal),
            as_of=args.as_of,
        )
    except ValidationError as e:
        print(f"Error: invalid scenario: {e}", file=sys.stderr)
        sys.exit(1)


def _print_evaluation(args: argparse.Namespace, explain: bool) -> None:
    request = _scenario_from_args(args)
    validation = validate_scenario(request, max_codes=get_settings().max_codes_per_scenario)
    if not validation.is_valid:
        for error in validation.errors:
            print(f"Error: {error}", file=sys.stderr)
        sys.exit(1)
    response, trace = build_evaluation_service().evaluate(request)
    if explain:
        print(json.dumps(trace, indent=2))
        return
    if args.json:
        print(response.model_dump_json(indent=2))
        return

    print(f"As of: {response.as_of.isoformat()}")
    print("Computed code groups:")
    for group, codes in response.code_sets.items():
        print(f"  {group}: {', '.join(codes)}")
    if not response.fired:
        print("No rules fired.")
    else:
        print("Fired rules:")
        for fired in response.fired:
            print(f"  {fired.rule_name}\t{fired.marketing_url}")
    for diagnostic in response.diagnostics:
        print(f"Warning: {diagnostic.message}", file=sys.stderr)


def main():
    parser = argparse.ArgumentParser(description="Evaluate marketing rules and manage the rule catalog")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    for name, help_text in (
        ("evaluate", "Show which rules fire for a customer scenario"),
        ("explain", "Print the per-rule audit trace for a customer scenario"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("--held", type=str, default="", help="Comma-separated held product codes")
        sub.add_argument("--renewal", type=str, default="", help="Comma-separated renewal product codes")
        sub.add_argument(
            "--as-of",
            type=date.fromisoformat,
            default=None,
            help="Evaluation date YYYY-MM-DD (default: today)",
        )
        if name == "evaluate":
            sub.add_argument("--json", action="store_true", help="Print the full JSON response")

    seed_parser = subparsers.add_parser("seed", help="Load recommendations, product groups and rules from JSON")
    seed_parser.add_argument(
        "--file",
        type=Path,
        default=None,
        help="Path to catalog JSON file (default: SEED_FILE_PATH setting)",
    )

    list_parser = subparsers.add_parser("list", help="List catalog records")
    list_parser.add_argument("kind", choices=["rules", "groups", "recommendations"])

    args = parser.parse_args()
    configure_logging(get_settings().log_level)

    if args.command == "evaluate":
        _print_evaluation(args, explain=False)
    elif args.command == "explain":
        _print_evaluation(args, explain=True)
    elif args.command == "seed":
        seed_catalog(args.file)
    elif args.command == "list":
        svc = build_catalog_service()
        if args.kind == "rules":
            records = svc.list_rules()
        elif args.kind == "groups":
            records = svc.list_product_groups()
        else:
            records = svc.list_recommendations()
        print(json.dumps([r.to_document() for r in records], indent=2))
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
