# Copyright 2026 TradeJournal
# SPDX-License-Identifier: MIT
"""Pre-trade checklist catalogue: four ordered sections, yes/no questions and one zone selector."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

CHECKLIST_INTRO = "A decision gate. If you cannot answer YES to the majors, you do not take the trade."

ZONE_QUESTION_ID = "zone"
ZONE_OPTIONS = ("Green", "Amber", "Red")
BLOCKING_ZONE = "Red"

ANSWER_YES = "yes"
ANSWER_NO = "no"


@dataclass(frozen=True)
class ChecklistQuestion:
    id: str
    question: str
    kind: str = "boolean"  # "boolean" or "zone"
    note: Optional[str] = None
    reminder_title: Optional[str] = None
    reminder_points: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ChecklistSection:
    id: str
    title: str
    items: Tuple[ChecklistQuestion, ...]


CHECKLIST_SECTIONS: Tuple[ChecklistSection, ...] = (
    ChecklistSection(
        id="section1",
        title="SECTION 1 - FORECASTING & CONTEXT",
        items=(
            ChecklistQuestion(
                id="forecastedToday",
                question="Did I forecast this instrument today using TLFS?",
                reminder_title="TLFS Reminder (Traffic Light Forecasting System):",
                reminder_points=(
                    "Green: Ideal, highest-probability scenario.",
                    "Amber: Still good, alternate path.",
                    "Red: Worst-case or least-likely scenario.",
                    'Each scenario must include an override ("If price does X instead...").',
                ),
                note="If you did not forecast it today, you are not allowed to trade it.",
            ),
            ChecklistQuestion(
                id="scenarioPlayingOut",
                question="Is price currently playing out one of my forecasted scenarios?",
                note="It must be one of the exact Green or Amber scenarios.",
            ),
            ChecklistQuestion(
                id="topSetup",
                question="Is this one of my top 10 go-to setups?",
                note="If not, you are improvising.",
            ),
        ),
    ),
    ChecklistSection(
        id="section2",
        title="SECTION 2 - LOCATION CHECK (RO3 + ZONES)",
        items=(
            ChecklistQuestion(
                id="ro3Match",
                question="Does the approach match RO3?",
                reminder_title="RO3 Reminder (Rule of Three, nature of approach):",
                reminder_points=(
                    "Impulsive approach: strong, fast push into structure. Wait for impulse away and first correction.",
                    "Corrective approach: slow grind into level. Wait for impulse away and first correction.",
                    "Structural approach: clean channel into level. Most attractive for entries.",
                ),
                note="If the approach does not match your plan, skip the trade.",
            ),
            ChecklistQuestion(
                id=ZONE_QUESTION_ID,
                question="What zone is price currently in (Green / Amber / Red)?",
                kind="zone",
                note="No new trades in Red Zone.",
            ),
        ),
    ),
    ChecklistSection(
        id="section3",
        title="SECTION 3 - SETUP QUALITY (VALID / HP / INVALID)",
        items=(
            ChecklistQuestion(
                id="isHighQuality",
                question="Is this trade at least a GOOD VALID, preferably HP?",
                reminder_title="Validity Reminder:",
                reminder_points=(
                    "HP (High Probability): many strong confluences, few negatives.",
                    "Valid: positives roughly equal negatives but still meets criteria.",
                    "Invalid: fails entry criteria and cannot be taken.",
                ),
                note="If it is barely Valid or you are trying to force it into HP, stop.",
            ),
            ChecklistQuestion(
                id="structureAlignment",
                question="Does the setup align with BOTH HTF and LTF structure?",
                note="No conflict. The story must be clean across timeframes.",
            ),
            ChecklistQuestion(
                id="playbookPattern",
                question="Does the entry pattern fit the playbook?",
                note="Flags, channels, wedges, patterns-within-patterns. Not randomness.",
            ),
        ),
    ),
    ChecklistSection(
        id="section4",
        title="SECTION 4 - RISK, TARGETS & EXECUTION",
        items=(
            ChecklistQuestion(
                id="riskCalculated",
                question="Have I calculated risk precisely?",
                note="No fudging the position size.",
            ),
            ChecklistQuestion(
                id="riskReward",
                question="Does this trade allow RR >= 3:1?",
                note="And does the market have room to actually travel that distance?",
            ),
            ChecklistQuestion(
                id="stopLossLogic",
                question="Is my stop loss placed logically (not tightened emotionally)?",
                note="Placed relative to structure, not fear.",
            ),
            ChecklistQuestion(
                id="breakevenPlan",
                question="Can I reasonably move to breakeven before the next major inflection?",
            ),
            ChecklistQuestion(
                id="spreadsAcceptable",
                question="Are spreads acceptable and not in a bad session (e.g. rollover)?",
            ),
            ChecklistQuestion(
                id="ownAnalysis",
                question="Is this my own analysis?",
                note="If it is influenced by someone else's idea, you have already broken the system.",
            ),
            ChecklistQuestion(
                id="acceptedLoss",
                question="Have I fully accepted that this might be a loss, even if it is perfect?",
            ),
        ),
    ),
)


def boolean_question_ids() -> Tuple[str, ...]:
    """All yes/no question ids, in display order."""
    return tuple(
        item.id
        for section in CHECKLIST_SECTIONS
        for item in section.items
        if item.kind == "boolean"
    )


BOOLEAN_QUESTION_IDS = boolean_question_ids()
