# lexchat/application/local_summary.py

import re
from typing import List, Optional

from lexchat.domain.models import Entity
from lexchat.infrastructure.entity_extractor import extract_entities, group_by_label


SUMMARY_HEADER = "DOCUMENT ANALYSIS SUMMARY"
MAX_EXAMPLES_PER_CATEGORY = 5
PREVIEW_CHARS = 500

# (entity label, heading) in the order they appear in the summary
SUMMARY_SECTIONS = [
    ("PERSON", "Key Individuals"),
    ("ORGANIZATION", "Organizations"),
    ("DATE", "Important Dates"),
    ("MONEY", "Financial Amounts"),
]

SUMMARY_FAILURE_MESSAGE = (
    "Document analysis completed. Unable to generate detailed summary "
    "due to processing error."
)


def build_basic_summary(text: str, entities: Optional[List[Entity]] = None) -> str:
    """
    Rule-based summary used when no remote provider answered.

    Reports word and sentence counts, up to five examples per entity
    category and a short preview of the opening sentences. Entities are
    extracted here when the caller has none.
    """
    try:
        words = text.split()
        sentences = [s for s in re.split(r"[.!?]+", text) if len(s.strip()) > 10]

        if entities is None:
            entities = extract_entities(text)
        grouped = group_by_label(entities)

        lines = [
            SUMMARY_HEADER,
            "",
            f"Document Length: {len(words)} words, {len(sentences)} sentences",
            "",
        ]

        for label, heading in SUMMARY_SECTIONS:
            examples = grouped.get(label, [])[:MAX_EXAMPLES_PER_CATEGORY]
            if examples:
                lines.append(f"{heading}: {', '.join(examples)}")
                lines.append("")

        preview = ". ".join(s.strip() for s in sentences[:3])[:PREVIEW_CHARS]
        lines.append(f"Content Preview: {preview}...")

        return "\n".join(lines)
    except (AttributeError, TypeError) as error:
        print(f"[LocalSummary] Could not build basic summary: {error}")
        return SUMMARY_FAILURE_MESSAGE
