# lexchat/infrastructure/entity_extractor.py

import re
from typing import Dict, List, Pattern

from lexchat.domain.models import Entity


_MONTHS = (
    "January|February|March|April|May|June|July|August|"
    "September|October|November|December"
)

# ── Pattern catalog ───────────────────────────────────────────────────────────
# Deliberately shallow: capitalised word runs and common legal vocabulary.
# Expect false positives (e.g. "Payment Terms" as a PERSON).

ENTITY_PATTERNS: Dict[str, List[Pattern]] = {
    "PERSON": [
        re.compile(r"\b([A-Z][a-z]+ [A-Z][a-z]+(?:\s[A-Z][a-z]+)?)\b"),
        re.compile(r"\b(Mr\.|Mrs\.|Ms\.|Dr\.|Prof\.) ([A-Z][a-z]+ [A-Z][a-z]+)\b"),
        re.compile(r"\b([A-Z][A-Z]+)\s+([A-Z][a-z]+)\b"),
    ],
    "DATE": [
        re.compile(r"\b(\d{1,2}/\d{1,2}/\d{4})\b"),
        re.compile(r"\b(\d{1,2}-\d{1,2}-\d{4})\b"),
        re.compile(rf"\b({_MONTHS})\s+\d{{1,2}},?\s+\d{{4}}\b"),
        re.compile(rf"\b(\d{{1,2}}(?:st|nd|rd|th)?\s+(?:of\s+)?(?:{_MONTHS})\s+\d{{4}})\b"),
    ],
    "MONEY": [
        re.compile(r"\$[\d,]+\.?\d*"),
        re.compile(r"\b(\d+(?:,\d{3})*(?:\.\d{2})?\s*dollars?)\b", re.IGNORECASE),
        re.compile(r"\b(USD\s*\$?[\d,]+\.?\d*)\b", re.IGNORECASE),
        re.compile(r"\b(\d+(?:,\d{3})*(?:\.\d{2})?\s*(?:USD|usd))\b", re.IGNORECASE),
    ],
    "ORGANIZATION": [
        re.compile(r"\b([A-Z][a-zA-Z\s&]+ (?:Inc\.|LLC|Corp\.|Corporation|Company|Co\.|Ltd\.|Limited|LLP|LP))\b"),
        re.compile(r"\b([A-Z][a-zA-Z\s&]+ (?:Bank|Trust|Insurance|Holdings|Group|Partners|Associates|Firm))\b"),
        re.compile(r"\b(The [A-Z][a-zA-Z\s&]+ (?:Inc\.|LLC|Corp\.|Corporation|Company|Co\.))\b"),
    ],
    "LEGAL_TERM": [
        re.compile(
            r"\b(Contract|Agreement|License|Lease|Deed|Will|Testament|Covenant|Indenture|Mortgage|Lien)\b",
            re.IGNORECASE,
        ),
        re.compile(r"\b(Plaintiff|Defendant|Petitioner|Respondent|Appellant|Appellee)\b", re.IGNORECASE),
        re.compile(r"\b(Court|Tribunal|Judge|Justice|Magistrate|Clerk)\b", re.IGNORECASE),
    ],
}


def _accept_person(text: str) -> bool:
    return len(text) > 3 and not text[0].isdigit()


def extract_entities(text: str) -> List[Entity]:
    """
    Run the pattern catalog over `text`.

    The first occurrence of each (text, label) pair is kept and results are
    ordered by start offset. Bad input yields an empty list.
    """
    if not text or not isinstance(text, str):
        return []

    entities: List[Entity] = []
    try:
        for label, patterns in ENTITY_PATTERNS.items():
            for pattern in patterns:
                for match in pattern.finditer(text):
                    matched = match.group(0)
                    if label == "PERSON":
                        matched = matched.strip()
                        if not _accept_person(matched):
                            continue
                    entities.append(Entity(
                        text=matched,
                        label=label,
                        start=match.start(),
                        end=match.start() + len(matched),
                    ))
    except re.error as error:
        print(f"[EntityExtractor] Pattern matching failed: {error}")
        return []

    seen = set()
    unique: List[Entity] = []
    for entity in entities:
        key = (entity.text, entity.label)
        if key in seen:
            continue
        seen.add(key)
        unique.append(entity)

    return sorted(unique, key=lambda e: e.start)


def group_by_label(entities: List[Entity]) -> Dict[str, List[str]]:
    grouped: Dict[str, List[str]] = {}
    for entity in entities:
        grouped.setdefault(entity.label, []).append(entity.text)
    return grouped
