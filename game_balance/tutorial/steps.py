"""
Tutorial Step Catalogue

Human-readable descriptions of the tutorial steps logged as `tutorial_<NN>`.
"""

import re
from dataclasses import dataclass
from typing import Dict, List


INITIAL_LAUNCH = "Initial launch"


@dataclass(frozen=True)
class TutorialStep:
    """One catalogued tutorial step"""
    id: str
    number: int
    phase: str
    description: str


def _catalogue() -> Dict[str, TutorialStep]:
    descriptions = {
        1: "Tap TutorialText1",
        2: "Tap TutorialText2",
        3: "Tap TutorialText3",
        23: "Tap TutorialText4",
        24: "First tap on unclaimed button",
        25: "First tap on clear treasure chest",
        26: "Clear treasure chest closed",
        27: "First tap on hero menu",
        28: "First tap on chip icon",
        29: "First tap on chip equip button",
        30: "First tap on equipment tab",
        31: "First tap on equipment icon",
        32: "First tap on equipment equip button",
        33: "First tap on promotion menu",
        34: "First tap on upgrade button",
        35: "First tap on back in promotion popup",
        36: "First tap on lobby menu",
        37: "Tap TutorialText5",
        38: "First tap on battle start button",
        58: "First tap on unit upgrade menu",
        59: "First tap on missile turret upgrade menu",
        60: "First tap on missile turret upgrade button",
        61: "Tap TutorialText6",
        62: "Third battle force-started",
        63: "Stage 1 defeat prevented during tutorial",
    }
    # card picks of the first (steps 4-22) and second (steps 39-57) battles
    for card in range(1, 20):
        descriptions[3 + card] = f"First battle card pick {card}"
        descriptions[38 + card] = f"Second battle card pick {card}"

    return {
        f"{number:02d}": TutorialStep(
            id=f"{number:02d}",
            number=number,
            phase=INITIAL_LAUNCH,
            description=descriptions[number],
        )
        for number in sorted(descriptions)
    }


TUTORIAL_STEPS: Dict[str, TutorialStep] = _catalogue()


def describe_step(step_id: str) -> str:
    """Full label of a step, e.g. "24. First tap on unclaimed button" """
    step = TUTORIAL_STEPS.get(step_id)
    if step is None:
        return f"Tutorial {step_id}"
    return f"{step.number}. {step.description}"


def short_step_description(step_id: str) -> str:
    """Compact label of a step for chart axes"""
    step = TUTORIAL_STEPS.get(step_id)
    if step is None:
        return step_id

    desc = step.description
    text = re.search(r"TutorialText(\d+)", desc)
    if text:
        return f"{step.number}. Text{text.group(1)}"

    card = re.search(r"(First|Second) battle card pick (\d+)", desc)
    if card:
        return f"{step.number}. {card.group(1)} battle card{card.group(2)}"

    if desc.startswith("First tap on "):
        return f"{step.number}. {desc[len('First tap on '):]}"

    if len(desc) <= 20:
        return f"{step.number}. {desc}"
    return f"{step.number}. {desc[:20]}..."


def tutorial_phases() -> List[Dict[str, object]]:
    """Catalogued steps grouped by phase, each group in step order"""
    phases: Dict[str, List[TutorialStep]] = {}
    for step in TUTORIAL_STEPS.values():
        phases.setdefault(step.phase, []).append(step)

    return [
        {"phase": phase, "steps": sorted(steps, key=lambda s: s.number)}
        for phase, steps in phases.items()
    ]
