"""Wire format of the document-analysis service."""

from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class AnalysisRequest(BaseModel):
    pdf_urls: List[str] = Field(min_length=1)
    questions: List[str] = Field(min_length=1)
    keywords: List[str] = Field(default_factory=list)


class AnalysisSummary(BaseModel):
    final_answer: Optional[str] = None
    explanation: Optional[str] = None
    discrepancy: Optional[str] = None


class AnalysisEvidence(BaseModel):
    answer: Optional[str] = None
    explanation: Optional[str] = None
    quotes: Optional[str] = None
    page_number: Optional[int] = None
    document_name: Optional[str] = None

    @field_validator("quotes", mode="before")
    @classmethod
    def join_quote_list(cls, v: Union[str, List[str], None]) -> Optional[str]:
        if isinstance(v, list):
            return "\n".join(str(q) for q in v)
        return v


class AnalysisResult(BaseModel):
    """One answered question, with the evidence the service found for it."""

    question: str
    summary: AnalysisSummary = Field(default_factory=AnalysisSummary)
    source_documents: List[str] = Field(default_factory=list)
    evidence: List[AnalysisEvidence] = Field(default_factory=list)

    @field_validator("summary", mode="before")
    @classmethod
    def none_summary_is_empty(cls, v):
        return {} if v is None else v

    @field_validator("source_documents", "evidence", mode="before")
    @classmethod
    def none_list_is_empty(cls, v):
        return [] if v is None else v
