"""Render an itinerary as a PDF document with fpdf2."""

from __future__ import annotations

import re

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from wanderplan.models.domain import Cost, Itinerary

# Core PDF fonts only cover Latin-1.
_REPLACEMENTS = {"–": "-", "—": "-", "‘": "'", "’": "'", "“": '"', "”": '"', "•": "-"}


def _latin1(text: str) -> str:
    for char, replacement in _REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", errors="replace").decode("latin-1")


def pdf_filename(itinerary: Itinerary) -> str:
    slug = re.sub(r"[^A-Za-z0-9]+", "-", itinerary.destination).strip("-").lower() or "itinerary"
    return f"{slug}-{itinerary.total_days}-days.pdf"


def _format_cost(cost: Cost) -> str:
    if isinstance(cost, float) and cost.is_integer():
        return str(int(cost))
    return str(cost)


class ItineraryPDF(FPDF):
    def header(self) -> None:
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(120, 120, 120)
        self.cell(0, 6, "WanderPlan itinerary", align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self.set_text_color(0, 0, 0)

    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.cell(0, 10, f"Page {self.page_no()}", align="C")

    def line_of_text(self, text: str, size: int = 11, style: str = "", height: float = 6) -> None:
        self.set_font("Helvetica", style, size)
        self.multi_cell(0, height, _latin1(text), new_x=XPos.LMARGIN, new_y=YPos.NEXT)


def render_itinerary_pdf(itinerary: Itinerary) -> bytes:
    pdf = ItineraryPDF()
    pdf.set_auto_page_break(auto=True, margin=18)
    pdf.add_page()

    pdf.line_of_text(itinerary.title, size=18, style="B", height=9)
    pdf.line_of_text(
        f"Destination: {itinerary.destination}  |  Days: {itinerary.total_days}  |  Budget: {itinerary.budget}"
    )
    if itinerary.interests:
        pdf.line_of_text(f"Interests: {', '.join(itinerary.interests)}")

    summary = itinerary.summary
    if summary.total_estimated_cost is not None:
        pdf.line_of_text(f"Estimated total: {_format_cost(summary.total_estimated_cost)}")
    if summary.highlights:
        pdf.ln(3)
        pdf.line_of_text("Highlights", size=13, style="B")
        for highlight in summary.highlights:
            pdf.line_of_text(f"- {highlight}")

    for number, day in enumerate(itinerary.days, start=1):
        pdf.ln(4)
        heading = f"Day {number}"
        if day.total_cost is not None:
            heading += f" (approx. {_format_cost(day.total_cost)})"
        pdf.line_of_text(heading, size=14, style="B", height=8)
        if not day.activities:
            pdf.line_of_text("No activities planned for this day.", style="I")
        for activity in day.activities:
            label = f"{activity.time}  {activity.title}".strip()
            if activity.duration:
                label += f" ({activity.duration})"
            pdf.line_of_text(label, style="B")
            if activity.location:
                pdf.line_of_text(f"Location: {activity.location}", size=10)
            if activity.description:
                pdf.line_of_text(activity.description, size=10)
            extras = []
            if activity.category:
                extras.append(f"Category: {activity.category}")
            if activity.cost is not None:
                extras.append(f"Cost: {_format_cost(activity.cost)}")
            if extras:
                pdf.line_of_text("  |  ".join(extras), size=9)
            pdf.ln(1)
        if day.notes:
            pdf.line_of_text(f"Notes: {day.notes}", size=10, style="I")

    if summary.tips:
        pdf.ln(4)
        pdf.line_of_text("Tips", size=13, style="B")
        for tip in summary.tips:
            pdf.line_of_text(f"- {tip}")

    return bytes(pdf.output())
