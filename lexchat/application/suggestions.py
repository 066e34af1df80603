# lexchat/application/suggestions.py

from typing import List

from lexchat.domain.models import Entity


MAX_SUGGESTIONS = 6

DEFAULT_SUGGESTIONS = [
    "What is the main purpose of this document?",
    "Who are the parties involved?",
    "What are the key terms and conditions?",
    "What are the important dates?",
    "What are the financial obligations?",
    "What are the legal implications?",
]

# (keywords, questions): added when any keyword occurs in the text
DOCUMENT_TYPE_QUESTIONS = [
    (("contract", "agreement"), [
        "What happens if either party breaches this contract?",
        "How can this agreement be terminated?",
    ]),
    (("lease", "rental"), [
        "What are the lease terms and rental amount?",
        "What are the tenant's and landlord's responsibilities?",
    ]),
    (("employment", "job"), [
        "What are the employment terms and benefits?",
        "What are the grounds for termination?",
    ]),
    (("privacy", "data"), [
        "How is personal data collected and used?",
        "What are the privacy rights and protections?",
    ]),
    (("liability", "insurance"), [
        "What are the liability limitations?",
        "What insurance requirements are specified?",
    ]),
]


def suggest_questions(text: str, entities: List[Entity]) -> List[str]:
    """Follow-up questions for the chat box, most generic first."""
    try:
        questions = [
            "What is the main purpose of this document?",
            "What are the key terms and conditions?",
        ]

        first_of = {}
        for entity in entities:
            first_of.setdefault(entity.label, entity.text)

        if "PERSON" in first_of:
            questions.append("Who are the main parties involved in this document?")
            questions.append(f"What are the responsibilities of {first_of['PERSON']}?")

        if "ORGANIZATION" in first_of:
            questions.append("What organizations are mentioned in this document?")
            questions.append(f"What is the role of {first_of['ORGANIZATION']}?")

        if "DATE" in first_of:
            questions.append("What are the important dates and deadlines?")
            questions.append("When does this agreement take effect?")

        if "MONEY" in first_of:
            questions.append("What are the financial obligations mentioned?")
            questions.append("What payment terms are specified?")

        lowered = text.lower()
        for keywords, type_questions in DOCUMENT_TYPE_QUESTIONS:
            if any(keyword in lowered for keyword in keywords):
                questions.extend(type_questions)

        return list(dict.fromkeys(questions))[:MAX_SUGGESTIONS]
    except (AttributeError, TypeError) as error:
        print(f"[Suggestions] Falling back to default questions: {error}")
        return list(DEFAULT_SUGGESTIONS)
