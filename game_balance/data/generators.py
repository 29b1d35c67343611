"""
Synthetic Data Generator

Generates realistic event-log exports for testing and development.
Includes:
- Stage events (try / clear / fail) with level and exit properties
- Tutorial step events with per-step drop-off
"""

import json
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import polars as pl
from faker import Faker

from game_balance.ingestion.normalizer import DEFAULT_COLUMNS, EventColumns
from game_balance.models.events import MAX_LEVEL, EventAction, ExitType


# =============================================================================
# CONFIGURATION
# =============================================================================

COUNTRIES: List[Tuple[str, str]] = [
    ("KR", "South Korea"),
    ("US", "United States"),
    ("JP", "Japan"),
    ("DE", "Germany"),
    ("BR", "Brazil"),
    ("TW", "Taiwan"),
]
COUNTRY_WEIGHTS = [0.35, 0.25, 0.15, 0.10, 0.10, 0.05]

# stage id -> base clear probability of one attempt
STAGES: Dict[str, float] = {
    **{str(2000 + n): 0.9 - n * 0.03 for n in range(1, 11)},
    **{str(3000 + n): 0.55 - n * 0.05 for n in range(1, 4)},
    "4001": 0.5,
    "5001": 0.6,
}

TRY_LOG_RATE = 0.9
VOLUNTARY_EXIT_RATE = 0.15
REPEAT_PLAY_RATE = 0.2
GIVE_UP_RATE = 0.2
MAX_ATTEMPTS = 6


# =============================================================================
# GENERATORS
# =============================================================================

class EventLogGenerator:
    """
    Generate stage and tutorial event logs shaped like the analytics export.

    Example:
        generator = EventLogGenerator(seed=7)
        df = generator.generate_stage_log(n_users=200)
        df.write_csv("data/events/synthetic.csv")
    """

    def __init__(self, seed: int = 42, columns: EventColumns = DEFAULT_COLUMNS, max_level: int = MAX_LEVEL):
        self.columns = columns
        self.max_level = max_level
        self.rng = np.random.default_rng(seed)
        self.fake = Faker()
        self.fake.seed_instance(seed)

    def _users(self, n: int) -> List[Dict[str, str]]:
        picks = self.rng.choice(len(COUNTRIES), size=n, p=COUNTRY_WEIGHTS)
        return [
            {
                "user_id": self.fake.uuid4(),
                "country_code": COUNTRIES[i][0],
                "country_name": COUNTRIES[i][1],
            }
            for i in picks
        ]

    def _row(
        self,
        user: Dict[str, str],
        stage_id: str,
        action: EventAction,
        properties: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Optional[str]]:
        c = self.columns
        return {
            c.category: "stage (App)",
            c.action: action.value,
            c.label: stage_id,
            c.value: None,
            c.properties: json.dumps(properties) if properties else None,
            c.user_id: user["user_id"],
            c.country_name: user["country_name"],
            c.country_code: user["country_code"],
        }

    def _fail_level(self, clear_probability: float) -> int:
        # harder stages lose players at earlier levels
        mean = max(1.0, self.max_level * clear_probability)
        level = int(round(self.rng.normal(mean, self.max_level / 5)))
        return min(self.max_level, max(1, level))

    def _play_stage(self, user: Dict[str, str], stage_id: str, clear_probability: float) -> Tuple[List[dict], bool]:
        rows: List[dict] = []
        failed_before = False
        for _ in range(MAX_ATTEMPTS):
            if self.rng.random() < TRY_LOG_RATE:
                rows.append(self._row(user, stage_id, EventAction.TRY))

            if self.rng.random() < clear_probability:
                rows.append(self._row(user, stage_id, EventAction.CLEAR_IS_FIRST))
                if self.rng.random() < REPEAT_PLAY_RATE:
                    rows.append(self._row(user, stage_id, EventAction.CLEAR, {"is_repeat_play": True}))
                return rows, True

            properties: Dict[str, Any] = {"last_level": self._fail_level(clear_probability)}
            if self.rng.random() < VOLUNTARY_EXIT_RATE:
                properties["exit_type"] = ExitType.VOLUNTARY_EXIT.value
            action = EventAction.FAIL if failed_before else EventAction.FAIL_IS_FIRST
            rows.append(self._row(user, stage_id, action, properties))
            failed_before = True

            if self.rng.random() < GIVE_UP_RATE:
                break
        return rows, False

    def generate_stage_rows(self, n_users: int = 100) -> List[Dict[str, Optional[str]]]:
        """Raw rows of a stage log; players advance through stages until they stall"""
        rows: List[Dict[str, Optional[str]]] = []
        for user in self._users(n_users):
            for stage_id, clear_probability in STAGES.items():
                stage_rows, cleared = self._play_stage(user, stage_id, max(0.05, clear_probability))
                rows.extend(stage_rows)
                if not cleared:
                    break
        return rows

    def generate_stage_log(self, n_users: int = 100) -> pl.DataFrame:
        """Stage log as a frame with the export's column names"""
        return pl.DataFrame(self.generate_stage_rows(n_users), schema={name: pl.Utf8 for name in self._column_names()})

    def generate_tutorial_rows(
        self,
        n_users: int = 100,
        steps: Sequence[int] = tuple(range(1, 64)),
        step_dropoff: float = 0.01,
    ) -> List[Dict[str, Optional[str]]]:
        """Raw rows of a tutorial log; some taps are logged twice"""
        c = self.columns
        rows: List[Dict[str, Optional[str]]] = []
        for user in self._users(n_users):
            for step in steps:
                if self.rng.random() < step_dropoff:
                    break
                repeats = 2 if self.rng.random() < 0.1 else 1
                for _ in range(repeats):
                    rows.append({
                        c.category: f"tutorial_{step:02d} (App)",
                        c.action: "tap",
                        c.user_id: user["user_id"],
                    })
        return rows

    def generate_tutorial_log(self, n_users: int = 100, **kwargs) -> pl.DataFrame:
        c = self.columns
        schema = {c.category: pl.Utf8, c.action: pl.Utf8, c.user_id: pl.Utf8}
        return pl.DataFrame(self.generate_tutorial_rows(n_users, **kwargs), schema=schema)

    def _column_names(self) -> List[str]:
        c = self.columns
        return [
            c.category,
            c.action,
            c.label,
            c.value,
            c.properties,
            c.user_id,
            c.country_name,
            c.country_code,
        ]
