"""Headline metrics and citation (evidence base) summaries."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence

from src.filtering.models import Record


@dataclass(frozen=True)
class KeyMetrics:
    """Headline counts for a record subset."""

    total_records: int = 0
    unique_countries: int = 0
    unique_specialties: int = 0
    unique_drugs: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRecords": self.total_records,
            "uniqueCountries": self.unique_countries,
            "uniqueSpecialties": self.unique_specialties,
            "uniqueDrugs": self.unique_drugs,
        }


def key_metrics(records: Sequence[Record]) -> KeyMetrics:
    """Compute headline counts. An empty subset yields all zeros."""
    return KeyMetrics(
        total_records=len(records),
        unique_countries=len({r.country for r in records}),
        unique_specialties=len({r.specialty for r in records}),
        unique_drugs=len({drug for r in records for drug in r.drug_names}),
    )


@dataclass(frozen=True)
class CitationInsights:
    """How often answers cite the literature."""

    total_answers: int = 0
    answers_with_citations: int = 0
    answers_without_citations: int = 0
    total_citations: int = 0
    unique_dois: int = 0
    average_citations_per_answer: float = 0.0  # over answers with citations
    evidence_based_percentage: int = 0
    sample_dois: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAnswers": self.total_answers,
            "answersWithCitations": self.answers_with_citations,
            "answersWithoutCitations": self.answers_without_citations,
            "totalCitations": self.total_citations,
            "uniqueDois": self.unique_dois,
            "averageCitationsPerAnswer": self.average_citations_per_answer,
            "evidenceBasedPercentage": self.evidence_based_percentage,
            "sampleDois": list(self.sample_dois),
        }


def citation_insights(records: Sequence[Record], sample_size: int = 8) -> CitationInsights:
    """
    Summarize citation usage across a record subset.

    Args:
        records: Records to summarize.
        sample_size: Number of distinct DOIs to return as a sample.

    Returns:
        CitationInsights. DOIs are only collected from answers with a
        positive citation count; the sample keeps first-seen order.
    """
    with_citations = [r for r in records if r.citation_count > 0]
    total_citations = sum(r.citation_count for r in with_citations)

    # dict preserves first-seen order
    dois = list(dict.fromkeys(doi for r in with_citations for doi in r.doi_list))

    average = round(total_citations / len(with_citations), 1) if with_citations else 0.0
    evidence_pct = round(len(with_citations) / len(records) * 100) if records else 0

    return CitationInsights(
        total_answers=len(records),
        answers_with_citations=len(with_citations),
        answers_without_citations=len(records) - len(with_citations),
        total_citations=total_citations,
        unique_dois=len(dois),
        average_citations_per_answer=average,
        evidence_based_percentage=evidence_pct,
        sample_dois=dois[:sample_size],
    )
