# FILE: crew-sync/crew_sync/questions.py
"""
Crew survey prompts and the answer map built from an application's detail page.

Two question sets exist. The professional set is the only one that asks for a
portfolio, so the presence of that prompt decides which set applies.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

EMPTY_SENTINEL = "Empty"

_WS_RE = re.compile(r"\s+")

@dataclass(frozen=True)
class QuestionSet:
    name: str
    shift_rank_8_2: str
    shift_rank_12_7: str
    shift_rank_5_12: str
    shift_rank_7_3: str
    dates: str
    returning: str
    history: str
    experience: str
    skill: Optional[str] = None
    interests: Optional[str] = None
    portfolio: Optional[str] = None

    @property
    def is_professional(self) -> bool:
        return self.portfolio is not None

# Shift prompts are identical across both crews
_SHIFT_8_2 = "8am - 2pm is my ___________ choice for shift time."
_SHIFT_12_7 = "12pm - 7pm is my ___________ choice for shift time."
_SHIFT_5_12 = "5pm - 12am is my ___________ choice for shift time."
_SHIFT_7_3 = "7pm - 3am is my ___________ choice for shift time."

GENERAL_SUPPORT = QuestionSet(
    name="general-support",
    shift_rank_8_2=_SHIFT_8_2,
    shift_rank_12_7=_SHIFT_12_7,
    shift_rank_5_12=_SHIFT_5_12,
    shift_rank_7_3=_SHIFT_7_3,
    dates=(
        "Film Crew shifts begin on Saturday, July 30th and wrap up on Monday, August 8th. "
        "In addition the the availability you already provided, can you volunteer on any of the following dates?"
    ),
    returning="Have you volunteered for Film Crew at Pickathon before?",
    history="If yes, how many years have you volunteered with Film Crew and which jobs have you done?",
    experience="Tell us about any relevant experience you have for this crew.",
)

PROFESSIONAL = QuestionSet(
    name="professional",
    shift_rank_8_2=_SHIFT_8_2,
    shift_rank_12_7=_SHIFT_12_7,
    shift_rank_5_12=_SHIFT_5_12,
    shift_rank_7_3=_SHIFT_7_3,
    dates=(
        "Film Crew shifts begin on Saturday, July 30th and wrap up on Monday August, 8th. "
        "Can you be available for any of the following dates?"
    ),
    returning="Have you volunteered for the Film Professional Crew at Pickathon before?",
    history=(
        "If yes, how many years have you volunteered with the Film Professional Crew? "
        "(approximate answers are ok!) What jobs did you do?"
    ),
    experience="Briefly tell us about your film experience.",
    skill="What would you consider your skill level?",
    interests="Which volunteer area(s) are you most interested in? (Check all that apply.)",
    portfolio="Please provide us with a link to an online portfolio or a work sample, if applicable.",
)

# crew name (as exported) -> short tag used in the notes column
CREW_SHORTNAMES: Dict[str, str] = {
    "Film Crew: General Support": "SUP",
    "Film Crew: Professionals": "PRO",
}

def question_set_for(answers: Dict[str, Optional[str]]) -> QuestionSet:
    return PROFESSIONAL if PROFESSIONAL.portfolio in answers else GENERAL_SUPPORT

def is_new(answers: Dict[str, Optional[str]]) -> bool:
    return answers.get(question_set_for(answers).returning) != "Yes"

def _clean_lines(block: str) -> List[str]:
    out: List[str] = []
    for ln in (block or "").split("\n"):
        s = _WS_RE.sub(" ", ln.strip())
        if s and s != EMPTY_SENTINEL:
            out.append(s)
    return out

def extract_answers(blocks: Iterable[str]) -> Dict[str, Optional[str]]:
    """
    Turn detail-page text blocks into {prompt: answer}.

    Each block is "prompt\\nanswer" with arbitrary padding. Blank lines and the
    "Empty" placeholder are dropped; a prompt left without an answer maps to None
    so the question set can still be recognised from it.
    """
    answers: Dict[str, Optional[str]] = {}
    for block in blocks:
        lines = _clean_lines(block)
        if not lines:
            continue
        answers[lines[0]] = lines[1] if len(lines) > 1 else None
    return answers
