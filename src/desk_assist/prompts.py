"""Prompt templates used when calling the language model."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_core.messages import HumanMessage, SystemMessage

if TYPE_CHECKING:
    from langchain_core.messages import BaseMessage

SUMMARY_SYSTEM = """\
You summarise documents that are being indexed for retrieval.

Write a concise summary that captures the main topics, concepts, and
important details of the document. Respond with the summary only.
"""


def build_summary_prompt(text: str) -> list[BaseMessage]:
    """Build the messages asking for a summary of *text*."""
    return [
        SystemMessage(content=SUMMARY_SYSTEM),
        HumanMessage(
            content=(
                "Please summarize and extract the key information from the following text. "
                "Focus on the main topics, concepts, and important details:\n\n"
                f"{text}"
            )
        ),
    ]
