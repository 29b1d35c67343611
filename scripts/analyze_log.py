"""
Stage Log Analyzer
Builds the dashboard report for one event-log export and prints a summary
"""

import argparse
import json
import sys
from pathlib import Path

from game_balance.analytics import build_dashboard
from game_balance.config.logging import configure_logging
from game_balance.ingestion import EventLogLoader, IngestionError
from game_balance.transformation import FilterOptions, StageType


def main():
    parser = argparse.ArgumentParser(description="Analyze a stage event log")
    parser.add_argument("path", type=Path, help="CSV export to analyze")
    parser.add_argument("--exclude-voluntary-exits", action="store_true")
    parser.add_argument("--exclude-repeat-plays", action="store_true")
    parser.add_argument(
        "--stage-type",
        choices=[t.value for t in StageType],
        default=StageType.ALL.value,
    )
    parser.add_argument("--country", action="append", default=[], help="Country code or name to keep")
    parser.add_argument("--output", type=Path, help="Write the full report as JSON")
    args = parser.parse_args()

    configure_logging()

    try:
        result = EventLogLoader().load(args.path)
    except IngestionError as e:
        print(f"❌ {e}", file=sys.stderr)
        sys.exit(1)

    options = FilterOptions(
        exclude_voluntary_exits=args.exclude_voluntary_exits,
        exclude_repeat_plays=args.exclude_repeat_plays,
        stage_type=StageType(args.stage_type),
        country_allow_list=set(args.country),
    )
    report = build_dashboard(result.events, options)

    print("=" * 60)
    print(f"🎮 {args.path.name}")
    print("=" * 60)
    print(f"   Events analyzed:     {report.total_events:,}")
    print(f"   Stages:              {report.total_stages}")
    print(f"   Overall clear rate:  {report.overall_clear_rate:.1f}%")
    print(f"   Voluntary exit rate: {report.voluntary_exit_rate:.1f}%")
    print(f"   Funnel retention:    {report.funnel_retention:.1f}%")

    if report.significant_spikes:
        print("\n⚠️  Difficulty spikes")
        for spike in report.significant_spikes:
            print(f"   Level {spike.level}: {spike.fail_rate:.1f}% fail (+{spike.increase:.1f})")

    if args.output:
        args.output.write_text(json.dumps(report.to_dict(), indent=2))
        print(f"\n📁 Report: {args.output}")


if __name__ == "__main__":
    main()
