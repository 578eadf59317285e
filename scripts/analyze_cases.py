#!/usr/bin/env python3
"""
Analyze candidate precedents for a legal issue from the command line.

Cases come from a JSON file (an array of case records) or from the bundled
catalog; the issue comes from a JSON file or from flags. The comparative
analysis (or strategic advice) is printed as JSON.

    python scripts/analyze_cases.py --category PTSD \
        --key-issue "stressor verification for combat veterans" --strategy
"""

import argparse
import json
from pathlib import Path
import sys

# Allow running from a checkout without installing the package
sys.path.append(str(Path(__file__).parent.parent))

from precedent_engine.core.config import EngineConfig, settings
from precedent_engine.core.exceptions import ConfigurationError, ValidationError
from precedent_engine.core.log_config import configure_logging
from precedent_engine.services.case_catalog import CaseCatalog
from precedent_engine.services.precedent_engine import PrecedentEngine


def load_json(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def build_issue(args) -> dict:
    """Issue record from --issue, overridden by any explicit flags."""
    issue = load_json(args.issue) if args.issue else {}
    if args.category:
        issue["category"] = args.category
    if args.subcategory:
        issue["subcategory"] = args.subcategory
    if args.key_issue:
        issue["keyIssues"] = list(issue.get("keyIssues", [])) + args.key_issue
    if args.facts:
        issue["facts"] = args.facts
    if args.principle:
        issue["legalPrinciples"] = list(issue.get("legalPrinciples", [])) + args.principle
    return issue


def load_cases(args) -> list:
    if args.cases:
        records = load_json(args.cases)
        if not isinstance(records, list):
            raise ValueError(f"{args.cases} must contain a JSON array of case records")
        return records

    catalog = CaseCatalog.from_json(args.catalog)
    return catalog.all(args.catalog_category)


def main() -> int:
    """Main function."""
    parser = argparse.ArgumentParser(description="Precedent relevance and citation strategy")
    parser.add_argument("--cases", help="JSON file with an array of case records")
    parser.add_argument("--catalog", help="Catalog JSON file (defaults to the bundled catalog)")
    parser.add_argument("--catalog-category", help="Only use catalog cases in this category")
    parser.add_argument("--issue", help="JSON file with the legal issue")
    parser.add_argument("--category", help="Issue category")
    parser.add_argument("--subcategory", help="Issue subcategory")
    parser.add_argument("--key-issue", action="append", default=[], help="Key issue (repeatable)")
    parser.add_argument("--facts", help="Issue facts")
    parser.add_argument("--principle", action="append", default=[], help="Legal principle (repeatable)")
    parser.add_argument("--config", help="Engine configuration YAML file")
    parser.add_argument("--year", type=int, help="Current year used for temporal relevance")
    parser.add_argument("--workers", type=int, default=settings.max_workers, help="Batch scoring threads")
    parser.add_argument("--strategy", action="store_true", help="Print strategic advice instead of the ranking")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")

    args = parser.parse_args()
    configure_logging("DEBUG" if args.verbose else "WARNING", "console")

    try:
        config = EngineConfig.from_yaml(args.config) if args.config else settings.load_engine_config()
        engine = PrecedentEngine(
            config=config,
            current_year=args.year,
            max_workers=args.workers,
        )
        cases = load_cases(args)
        issue = build_issue(args)

        if args.strategy:
            result = engine.strategic_advice(cases, issue)
        else:
            result = engine.rank_cases(cases, issue)
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 2
    except ValidationError as e:
        print(f"Invalid issue: {e}", file=sys.stderr)
        return 1
    except (OSError, ValueError) as e:
        print(f"Could not load input: {e}", file=sys.stderr)
        return 1

    print(json.dumps(result.model_dump(by_alias=True, mode="json"), indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
