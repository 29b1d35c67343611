"""
Synthetic Event Log Generator
Writes a stage log and a tutorial log shaped like the analytics export
"""

import argparse
from pathlib import Path

from game_balance.data import EventLogGenerator

OUTPUT_DIR = Path(__file__).parent.parent / "data"

# Tutorial exports are listed by the date range in their file name
TUTORIAL_FILE = "bunkerdefense_2025-01-01_00_00_00+00_00-2025-01-07_23_59_59+00_00_synthetic.csv"


def main():
    parser = argparse.ArgumentParser(description="Generate synthetic event logs")
    parser.add_argument("--users", type=int, default=2000, help="Players in the stage log")
    parser.add_argument("--tutorial-users", type=int, default=5000, help="Players in the tutorial log")
    parser.add_argument("--seed", type=int, default=42)
    parser.add_argument("--output", type=Path, default=OUTPUT_DIR)
    args = parser.parse_args()

    events_dir = args.output / "events"
    tutorial_dir = args.output / "tutorial"
    events_dir.mkdir(parents=True, exist_ok=True)
    tutorial_dir.mkdir(parents=True, exist_ok=True)

    print("=" * 60)
    print("🎮 Synthetic Event Log Generator")
    print("=" * 60 + "\n")

    generator = EventLogGenerator(seed=args.seed)

    print(f"📊 Generating stage log for {args.users:,} players...")
    stage_df = generator.generate_stage_log(args.users)
    stage_df.write_csv(events_dir / "stage_events.csv")
    print(f"   ✅ stage_events.csv: {len(stage_df):,} rows")

    print(f"📊 Generating tutorial log for {args.tutorial_users:,} players...")
    tutorial_df = generator.generate_tutorial_log(args.tutorial_users)
    tutorial_df.write_csv(tutorial_dir / TUTORIAL_FILE)
    print(f"   ✅ {TUTORIAL_FILE}: {len(tutorial_df):,} rows")

    print("\n" + "=" * 60)
    print("✅ Dataset Generation Complete!")
    print("=" * 60)
    print(f"\n📁 Output: {args.output}\n")


if __name__ == "__main__":
    main()
