#!/usr/bin/env python3
"""
Research Runner

Runs deep research for one company from the command line:
1. Strategy (strategist)
2. Social discovery (Bright Data)
3. Deep research (researcher)
4. Structuring (analyst)
5. Data quality + competitor fallback
6. SEO recommendations

Usage:
    # Set environment variables first:
    export ANTHROPIC_API_KEY=your_key
    export PERPLEXITY_API_KEY=your_key
    export BRIGHT_DATA_API_TOKEN=your_token   # optional

    # Run research:
    python scripts/run_research.py --website acmeroofing.com

    # With options:
    python scripts/run_research.py --company "Acme Roofing" \
        --location "Denver, CO" \
        --industry roofing \
        --output acme.json
"""

import asyncio
import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from dotenv import load_dotenv

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


async def run_research(
    website: str = None,
    company_name: str = None,
    location: str = None,
    industry: str = None,
    output: str = None,
):
    """Run deep research and print a summary."""

    load_dotenv()

    from src.research import run_deep_research

    if not os.getenv("ANTHROPIC_API_KEY"):
        print("WARNING: ANTHROPIC_API_KEY not set - strategist and analyst will use fallbacks")
    if not os.getenv("PERPLEXITY_API_KEY"):
        print("WARNING: PERPLEXITY_API_KEY not set - researcher will use fallbacks")

    print("=" * 60)
    print(f"RESEARCHING: {company_name or website}")
    print("=" * 60)

    result = await run_deep_research(
        website_url=website,
        company_name=company_name,
        location=location,
        industry_type=industry,
    )

    if not result.success:
        print(f"\nERROR: {result.error}")
        return None

    profile = result.profile
    quality = result.data_quality

    print(f"\nCompany:      {profile.name}")
    print(f"Industry:     {profile.industry_type or '-'}")
    print(f"Location:     {profile.headquarters or '-'}, {profile.state_abbr or profile.state or '-'}")
    print(f"Services:     {len(profile.services)}")
    print(f"USPs:         {len(profile.usps)}")
    print(f"Social links: {', '.join(sorted(profile.social_links)) or 'none'}")
    print(f"Extra links:  {len(profile.additional_links)}")
    print(f"\nData quality: {quality.score}/100"
          f"{' (competitor research used)' if quality.used_competitor_research else ''}")
    for missing in result.missing_fields:
        print(f"  [{missing.priority.value}] {missing.label}")

    data = result.to_dict()
    if output:
        Path(output).write_text(json.dumps(data, indent=2, ensure_ascii=False))
        print(f"\nResult saved to: {output}")
    else:
        print(json.dumps(data, indent=2, ensure_ascii=False))

    return data


def main():
    """Main entry point."""
    parser = argparse.ArgumentParser(
        description="Run deep company research"
    )
    parser.add_argument(
        "--website",
        default=None,
        help="Company website (e.g., acmeroofing.com)"
    )
    parser.add_argument(
        "--company",
        default=None,
        help="Company name"
    )
    parser.add_argument(
        "--location",
        default=None,
        help="City, state (e.g., 'Denver, CO')"
    )
    parser.add_argument(
        "--industry",
        default=None,
        help="Trade (e.g., roofing, hvac, plumbing)"
    )
    parser.add_argument(
        "--output",
        default=None,
        help="Write the JSON result to this file instead of stdout"
    )

    args = parser.parse_args()

    if not args.website and not args.company:
        parser.error("--website or --company is required")

    asyncio.run(run_research(
        website=args.website,
        company_name=args.company,
        location=args.location,
        industry=args.industry,
        output=args.output,
    ))


if __name__ == "__main__":
    main()
