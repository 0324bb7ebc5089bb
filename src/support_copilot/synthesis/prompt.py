"""Grounding prompt for solution generation."""
from __future__ import annotations

from collections.abc import Sequence

from support_copilot.models import SearchResult, Ticket

SYSTEM_PROMPT = (
    "You are an IT support expert that provides detailed technical solutions. "
    "Base your suggestions on the provided documentation where it applies. "
    "Always respond with valid JSON only."
)

RESPONSE_SCHEMA = """{
    "solutions": [
        {
            "title": "Solution Title",
            "description": "Brief description",
            "steps": ["Step 1", "Step 2", "Step 3"],
            "references": ["Document 1", "Document 2"],
            "confidence": 0.9
        }
    ]
}"""


def format_context(results: Sequence[SearchResult]) -> str:
    """Render retrieved chunks with their source title and score."""
    if not results:
        return "Relevant Documentation:\n\n(no matching documentation found)\n"

    lines = ["Relevant Documentation:", ""]
    for i, result in enumerate(results, start=1):
        lines.append(f"Document {i}: {result.document.title}")
        lines.append(f"Content: {result.chunk.text}")
        lines.append(f"Relevance Score: {result.score:.2f}")
        lines.append("")
    return "\n".join(lines)


def build_messages(ticket: Ticket, results: Sequence[SearchResult]) -> list[dict[str, str]]:
    """Build chat messages asking for 2-3 structured solutions."""
    user = f"""Based on the following ticket and relevant documentation, provide detailed solution suggestions.

Ticket Information:
- Title: {ticket.title}
- Description: {ticket.description}
- Category: {ticket.category}
- Priority: {ticket.priority}

{format_context(results)}
Please provide 2-3 specific solution suggestions with:
1. A clear title
2. Detailed description
3. Step-by-step instructions
4. References to the documentation used, by document title
5. A confidence between 0.0 and 1.0

Format your response as JSON with the following structure:
{RESPONSE_SCHEMA}"""
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user},
    ]
