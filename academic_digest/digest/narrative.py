"""Narrative prose around a digest: introduction, methodology, transitions, conclusion."""

from __future__ import annotations

import random
from typing import Optional, Sequence

from academic_digest.config import (
    AcademicField,
    ContentQuality,
    EditorialStyle,
    field_profile,
)
from academic_digest.models import ComposedArticle
from academic_digest.utils import unique

TRANSITIONS = (
    "Moving from {current} to {next}, let's explore...",
    "While the previous research focused on {current}, our next article examines...",
    "Building on insights from {current}, we now turn to...",
    "The theme of innovation continues as we examine {next}...",
    "From advances in {current} to breakthroughs in {next}...",
)


class NarrativeWriter:
    """Fixed templates per editorial style. Only transitions involve randomness."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def transition(self, current_subfield: str, next_subfield: str) -> str:
        template = self.rng.choice(TRANSITIONS)
        return template.format(current=current_subfield, next=next_subfield)

    def introduction(
        self,
        articles: Sequence[ComposedArticle],
        field: AcademicField,
        style: EditorialStyle,
    ) -> str:
        name = field_profile(field).name
        count = len(articles)
        subfields = ", ".join(unique(ca.article.subfield for ca in articles)[:3])

        if style == EditorialStyle.ACADEMIC:
            return (
                f"This week in {name} presents significant advances across multiple research "
                f"domains. We examine {count} peer-reviewed studies representing substantial "
                f"progress in {subfields}. The selected research demonstrates both methodological "
                "innovation and practical applications that advance our understanding of the field."
            )
        if style == EditorialStyle.CONVERSATIONAL:
            return (
                f"Welcome to this week's highlights from {name}! We've curated {count} fascinating "
                f"studies that caught our attention, spanning {subfields}. From breakthrough "
                "methodologies to surprising discoveries, these articles represent the most "
                "exciting developments in the field this week."
            )
        return (
            f"This week's research digest features {count} significant advances in {name}, with "
            f"noteworthy developments in {subfields}. These studies represent the current "
            "trajectory of research in the field, offering both fundamental insights and practical "
            "applications that merit attention from the academic community."
        )

    def methodology(
        self,
        articles: Sequence[ComposedArticle],
        field: AcademicField,
        style: EditorialStyle,
    ) -> str:
        venues = ", ".join(unique(ca.article.venue for ca in articles)[:3])
        venue_types = ", ".join(unique(ca.article.venue_type.value for ca in articles))
        open_access = sum(1 for ca in articles if ca.article.open_access)

        if style == EditorialStyle.ACADEMIC:
            methods = ", ".join(self._methods(articles, field))
            access = (
                f"{open_access} studies are openly accessible, ensuring broad dissemination of findings."
                if open_access
                else "All selected articles are from subscription-based journals."
            )
            return (
                f"Research methodology assessment reveals diverse approaches across {venue_types} "
                f"venues. The selected studies employ rigorous methodologies including {methods}. "
                f"{access}"
            )
        if style == EditorialStyle.CONVERSATIONAL:
            text = (
                f"We selected these articles from leading publications including {venues}. What "
                "makes this research compelling is not just the results, but the innovative "
                "approaches researchers are using, from cutting-edge experimental techniques to "
                "advanced computational methods."
            )
            if open_access:
                text += (
                    f" {open_access} of these studies are freely available, so you can dive deeper "
                    "into the details."
                )
            return text
        return (
            "Content selection prioritized studies demonstrating both methodological rigor and "
            f"significant outcomes. Research sources include {venues}, representing {venue_types} "
            "publications. Assessment criteria encompassed peer review status, methodological "
            "soundness, and potential impact on the field."
        )

    def conclusion(
        self,
        articles: Sequence[ComposedArticle],
        field: AcademicField,
        style: EditorialStyle,
    ) -> str:
        name = field_profile(field).name
        themes = unique(ca.article.subfield for ca in articles)
        breakthroughs = sum(1 for ca in articles if ca.article.quality == ContentQuality.BREAKTHROUGH)

        if style == EditorialStyle.ACADEMIC:
            progress = "paradigm-shifting developments" if breakthroughs else "significant incremental advances"
            return (
                f"This week's research landscape in {name} demonstrates continued advancement "
                f"across {', '.join(themes)}. The selected studies reveal both evolutionary progress "
                f"and {progress}. Future research directions suggested by these findings warrant "
                "close attention from the academic community."
            )
        if style == EditorialStyle.CONVERSATIONAL:
            outlook = (
                "There are even a few potential breakthroughs that could change how we think about "
                "these problems."
                if breakthroughs
                else "Each study builds on previous work in meaningful ways."
            )
            return (
                "What's remarkable about this week's research is how interconnected these advances "
                f"are. From {themes[0]} to {themes[-1]}, we're seeing patterns that suggest broader "
                f"trends in the field. {outlook} Stay tuned, next week promises to be just as exciting!"
            )
        lead = "notable breakthroughs in" if breakthroughs else "advances in"
        return (
            f"The research presented this week illustrates the dynamic nature of {name}, with "
            f"{lead} {', '.join(themes)}. These findings collectively contribute to the field's "
            "evolution and suggest promising avenues for future investigation. Stakeholders should "
            "monitor developments in these areas for potential implications."
        )

    @staticmethod
    def _methods(articles: Sequence[ComposedArticle], field: AcademicField) -> list[str]:
        described = [ca.article.methodology for ca in articles if ca.article.methodology]
        return unique([*described, *field_profile(field).methods])[:4]
