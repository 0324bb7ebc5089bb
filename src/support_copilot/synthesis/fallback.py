"""Rule-based solutions used when no generative backend is usable."""
from __future__ import annotations

from collections.abc import Sequence
from typing import NamedTuple

from support_copilot.models import SearchResult, SuggestedSolution, Ticket

MAX_REFERENCES = 3


class SolutionTemplate(NamedTuple):
    title: str
    description: str
    steps: tuple[str, ...]
    confidence: float


NETWORK_TEMPLATES = (
    SolutionTemplate(
        "Check Network Configuration and Connectivity",
        "Verify network settings and test connectivity to diagnose the issue",
        (
            "Open Network Settings or Control Panel > Network and Sharing Center",
            "Check IP configuration using 'ipconfig /all' (Windows) or 'ifconfig' (Linux/Mac)",
            "Verify DNS settings - should point to valid DNS servers",
            "Test connectivity with 'ping 8.8.8.8' to check internet access",
            "Test name resolution with 'nslookup google.com'",
            "If issues persist, restart the network adapter or router",
        ),
        0.85,
    ),
    SolutionTemplate(
        "Update Network Drivers",
        "Ensure network drivers are up to date",
        (
            "Open Device Manager (Windows) or System Settings (Mac/Linux)",
            "Locate Network Adapters section",
            "Right-click on your network adapter and select 'Update Driver'",
            "Choose 'Search automatically for updated driver software'",
            "Restart the computer after driver update",
        ),
        0.78,
    ),
)

HARDWARE_TEMPLATES = (
    SolutionTemplate(
        "Hardware Diagnostics and Troubleshooting",
        "Perform hardware diagnostics to identify the faulty component",
        (
            "Check all physical connections (power cables, data cables, peripherals)",
            "Run built-in hardware diagnostics (F12 on boot for most systems)",
            "Check Device Manager for any hardware with warning symbols",
            "Monitor system temperatures and fan speeds",
            "Test with known-good replacement parts if available",
            "Document error codes or beep patterns for further diagnosis",
        ),
        0.80,
    ),
)

SOFTWARE_TEMPLATES = (
    SolutionTemplate(
        "Software Installation and Configuration",
        "Troubleshoot software installation or configuration issues",
        (
            "Verify system meets minimum software requirements",
            "Run installer as Administrator (Windows) or with sudo (Linux)",
            "Disable antivirus temporarily during installation",
            "Check for conflicting software or previous versions",
            "Review installation logs for specific error messages",
            "Try clean installation after removing previous version completely",
        ),
        0.82,
    ),
    SolutionTemplate(
        "Application Troubleshooting",
        "Resolve application crashes or performance issues",
        (
            "Clear application cache and temporary files",
            "Reset application settings to default",
            "Update application to the latest version",
            "Check Event Viewer (Windows) or system logs for error details",
            "Reinstall the application if issues persist",
            "Contact vendor support with error logs if needed",
        ),
        0.75,
    ),
)

GENERAL_TEMPLATES = (
    SolutionTemplate(
        "General Troubleshooting Steps",
        "Standard troubleshooting approach for IT issues",
        (
            "Restart the affected device or application",
            "Check for recent system or software updates",
            "Review system logs and error messages",
            "Verify user permissions and access rights",
            "Test in a different user account or safe mode",
            "Document all symptoms and steps taken",
            "Escalate to specialized support if issue persists",
        ),
        0.70,
    ),
)

# Matched in order against the lower-cased category
CATEGORY_TEMPLATES: tuple[tuple[str, tuple[SolutionTemplate, ...]], ...] = (
    ("network", NETWORK_TEMPLATES),
    ("hardware", HARDWARE_TEMPLATES),
    ("software", SOFTWARE_TEMPLATES),
)


def category_key(category: str) -> str:
    """Map a free-form ticket category to network, hardware, software or other."""
    lowered = (category or "").lower()
    for key, _ in CATEGORY_TEMPLATES:
        if key in lowered:
            return key
    return "other"


def templates_for(category: str) -> tuple[SolutionTemplate, ...]:
    key = category_key(category)
    for name, templates in CATEGORY_TEMPLATES:
        if name == key:
            return templates
    return GENERAL_TEMPLATES


def reference_titles(results: Sequence[SearchResult], limit: int = MAX_REFERENCES) -> list[str]:
    """Titles of the first ``limit`` distinct documents, in ranking order."""
    titles: list[str] = []
    for result in results:
        title = result.document.title
        if title not in titles:
            titles.append(title)
        if len(titles) >= limit:
            break
    return titles


def fallback_solutions(ticket: Ticket, results: Sequence[SearchResult]) -> list[SuggestedSolution]:
    """Templated solutions for the ticket's category, citing the retrieved documents."""
    references = reference_titles(results)
    return [
        SuggestedSolution(
            title=template.title,
            description=template.description,
            steps=list(template.steps),
            references=list(references),
            confidence=template.confidence,
        )
        for template in templates_for(ticket.category)
    ]
