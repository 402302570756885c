# Copyright AGNTCY Contributors (https://github.com/agntcy)
# SPDX-License-Identifier: Apache-2.0

"""
Travel Logic Module

This module contains the text rendering shared by the orchestrator, the
conversation layer and the chat service.

Key functions:
- describe_travelers: Comma-separated traveler names for research requests
- build_journey_details: Travel brief handed to the plan composer
- render_plan_summary: Markdown summary of a finished travel plan
- render_journey_overview: Markdown overview of a journey form
"""

from agents.travel.models import JourneyForm, TravelPlanResult


def describe_travelers(form: JourneyForm) -> str:
    """Return the traveler names joined with ', '."""
    return ", ".join(traveler.name for traveler in form.travelers)


def build_journey_details(form: JourneyForm) -> str:
    """
    Build the travel brief handed to the plan composer.

    Each traveler is listed with their 'about' text in parentheses when
    present. The additional details line is only included when the form
    carries details.

    Example:
        >>> build_journey_details(form)
        Travelers: Alice (loves art), Bob
        From: Paris
        To: Rome
        Transport: Train
        Departure: 2026-05-01T09:00:00
        Return: 2026-05-04T18:00:00
        Additional details: honeymoon
    """
    travelers = ", ".join(
        f"{t.name} ({t.about})" if t.about else t.name for t in form.travelers
    )
    lines = [
        f"Travelers: {travelers}",
        f"From: {form.from_city}",
        f"To: {form.to_city}",
        f"Transport: {form.transport.value}",
        f"Departure: {form.start_date.isoformat()}",
        f"Return: {form.end_date.isoformat()}",
    ]
    if form.details:
        lines.append(f"Additional details: {form.details}")
    return "\n".join(lines)


def render_plan_summary(plan: TravelPlanResult) -> str:
    """
    Render a finished plan as markdown: title, plan body and a daily
    itinerary section listing one heading per day.
    """
    lines = [f"# {plan.title}", "", plan.plan, ""]
    if plan.days:
        lines.append("## Daily Itinerary")
        for index, day in enumerate(plan.days, start=1):
            lines.append(f"### Day {index}: {day.location_and_country} ({day.date})")
            lines.append("")
    return "\n".join(lines) + "\n"


def render_journey_overview(form: JourneyForm) -> str:
    """Summarise the journey collected so far and invite the user to start planning."""
    lines = [
        "I've noted your message. Here's what I have so far:",
        "",
        f"• **From:** {form.from_city}",
        f"• **To:** {form.to_city}",
        f"• **Dates:** {form.start_date.isoformat()} to {form.end_date.isoformat()}",
        f"• **Transport:** {form.transport.value}",
        f"• **Travelers:** {describe_travelers(form)}",
    ]
    if form.details:
        lines.append(f"• **Notes:** {form.details}")
    lines.append("")
    lines.append('Ready to plan your trip? Just say **"start planning"** or **"yes"**!')
    return "\n".join(lines) + "\n"
