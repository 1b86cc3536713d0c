from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class RAGInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    document_type: str = Field(alias="documentType")
    chunks_analyzed: int = Field(alias="chunksAnalyzed")
    key_terms_found: int = Field(alias="keyTermsFound")
    red_flags_detected: int = Field(alias="redFlagsDetected")
    confidence: Literal["high", "medium", "low"]


class AnalysisResult(BaseModel):
    """Everything derived from one document in a single pass."""

    document_type: str
    key_terms: dict[str, str] = {}
    red_flags: list[str] = []
    chunks: list[str] = []
    context: str = ""

    @property
    def chunk_count(self) -> int:
        return len(self.chunks)

    @property
    def confidence(self) -> str:
        return "high" if self.key_terms else "medium"

    def summary(self) -> RAGInsights:
        return RAGInsights(
            document_type=self.document_type,
            chunks_analyzed=self.chunk_count,
            key_terms_found=len(self.key_terms),
            red_flags_detected=len(self.red_flags),
            confidence=self.confidence,
        )


class QueryMatch(BaseModel):
    chunks: list[str] = []

    @property
    def confidence(self) -> str:
        return "high" if self.chunks else "low"

    @property
    def context(self) -> str:
        return "\n\n".join(self.chunks)
