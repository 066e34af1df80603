# main.py

import sys
from pathlib import Path

from lexchat.application.assistant import build_assistant
from lexchat.application.suggestions import suggest_questions
from lexchat.infrastructure.document_loader import DocumentLoader
from lexchat.infrastructure.entity_extractor import extract_entities
from lexchat.interface.cli import (
    display_welcome_banner,
    display_summary,
    display_entities,
    display_suggestions,
    prompt_for_question,
    display_answer,
    display_error,
    ask_continue,
)


def main() -> None:
    display_welcome_banner()

    if len(sys.argv) != 2:
        display_error("Usage: python main.py <document.txt>")
        sys.exit(1)

    # ── 1. Load the document ─────────────────────────────────────────────────
    try:
        document_text = DocumentLoader().load_file(Path(sys.argv[1]))
    except (FileNotFoundError, ValueError) as error:
        display_error(str(error))
        sys.exit(1)

    if not document_text:
        display_error("The document is empty.")
        sys.exit(1)

    assistant = build_assistant()

    # ── 2. Entities, summary, suggestions ────────────────────────────────────
    entities = extract_entities(document_text)
    display_entities(entities)

    summary = assistant.summarize(document_text, entities)
    display_summary(summary.summary, summary.model)

    display_suggestions(suggest_questions(document_text, entities))

    # ── 3. Interactive chat loop ─────────────────────────────────────────────
    while True:
        question = prompt_for_question()
        try:
            result = assistant.chat(question, document_text)
            display_answer(question, result.response, result.model)
        except ValueError as error:
            display_error(str(error))

        if not ask_continue():
            break


if __name__ == "__main__":
    main()
