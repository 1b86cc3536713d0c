from pydantic import BaseModel, ConfigDict, Field

from legalese.models.analysis import RAGInsights


class CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class HealthResult(CamelModel):
    status: str
    message: str
    contract_types: int = Field(alias="contractTypes")


class RAGAnalysis(CamelModel):
    document_type: str = Field(alias="documentType")
    chunks: int
    key_terms: dict[str, str] = Field(alias="keyTerms")
    red_flags: list[str] = Field(alias="redFlags")
    chunk_preview: str | None = Field(default=None, alias="chunkPreview")


class UploadResult(CamelModel):
    success: bool = True
    file_name: str = Field(alias="fileName")
    file_size: int = Field(alias="fileSize")
    page_count: int = Field(alias="pageCount")
    text_content: str = Field(alias="textContent")
    text_length: int = Field(alias="textLength")
    rag_analysis: RAGAnalysis = Field(alias="ragAnalysis")


class ExplainRequest(CamelModel):
    text: str = ""


class ExplainResult(CamelModel):
    success: bool = True
    explanation: str
    rag_insights: RAGInsights = Field(alias="ragInsights")


class RAGQueryRequest(CamelModel):
    query: str = ""
    document_text: str = Field(default="", alias="documentText")


class QueryContext(CamelModel):
    relevant_chunks: int = Field(alias="relevantChunks")
    document_type: str = Field(alias="documentType")
    confidence: str


class RAGQueryResult(CamelModel):
    success: bool = True
    answer: str
    context: QueryContext


class ErrorResult(BaseModel):
    error: str
    details: str | None = None
