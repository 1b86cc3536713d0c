import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from legalese.config import Settings, get_settings
from legalese.llm_generator import GenerationError, LLMGenerator, get_llm_generator
from legalese.models.schemas import (
    ErrorResult,
    ExplainRequest,
    ExplainResult,
    HealthResult,
    QueryContext,
    RAGAnalysis,
    RAGQueryRequest,
    RAGQueryResult,
    UploadResult,
)
from legalese.parser import DocumentParseError, extract_text
from legalese.prompts import (
    EXPLAIN_MAX_OUTPUT_TOKENS,
    EXPLAIN_TEMPERATURE,
    QUERY_MAX_OUTPUT_TOKENS,
    QUERY_TEMPERATURE,
    build_explain_prompt,
    build_query_prompt,
)
from legalese.rag_processor import RAGProcessor, get_rag_processor

logger = logging.getLogger(__name__)

router = APIRouter()


def _error(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResult(error=error, details=details).model_dump())


@router.get("/health", response_model=HealthResult)
def health(processor: RAGProcessor = Depends(get_rag_processor)) -> HealthResult:
    return HealthResult(
        status="OK",
        message="Legalese API with RAG is running",
        contract_types=len(processor.knowledge_base.type_ids),
    )


@router.post("/upload", response_model=UploadResult)
async def upload(
    pdf: UploadFile | None = File(default=None),
    processor: RAGProcessor = Depends(get_rag_processor),
    settings: Settings = Depends(get_settings),
):
    if pdf is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if pdf.content_type != "application/pdf":
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only PDF files are allowed")

    data = await pdf.read()
    if not data:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    if len(data) > settings.max_upload_bytes:
        limit_mb = settings.max_upload_bytes // (1024 * 1024)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"File too large. Maximum size is {limit_mb}MB.",
        )

    try:
        parsed = extract_text(data)
    except DocumentParseError as e:
        logger.warning("Could not parse %s: %s", pdf.filename, e)
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "Failed to process PDF", str(e))

    analysis = processor.analyze(parsed.text)
    logger.info(
        "Uploaded %s: %d pages, type=%s, %d chunks",
        pdf.filename, parsed.page_count, analysis.document_type, analysis.chunk_count,
    )

    preview = analysis.chunks[0][:200] + "..." if analysis.chunks else None
    return UploadResult(
        file_name=pdf.filename or "",
        file_size=len(data),
        page_count=parsed.page_count,
        text_content=parsed.text,
        text_length=len(parsed.text),
        rag_analysis=RAGAnalysis(
            document_type=analysis.document_type,
            chunks=analysis.chunk_count,
            key_terms=analysis.key_terms,
            red_flags=analysis.red_flags,
            chunk_preview=preview,
        ),
    )


@router.post("/explain", response_model=ExplainResult)
def explain(
    req: ExplainRequest,
    processor: RAGProcessor = Depends(get_rag_processor),
    generator: LLMGenerator = Depends(get_llm_generator),
    settings: Settings = Depends(get_settings),
):
    if not req.text.strip():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No text provided")

    analysis = processor.analyze(req.text)
    prompt = build_explain_prompt(req.text, analysis, max_chars=settings.max_prompt_chars)

    try:
        explanation = generator.generate(
            prompt, temperature=EXPLAIN_TEMPERATURE, max_output_tokens=EXPLAIN_MAX_OUTPUT_TOKENS
        )
    except GenerationError as e:
        logger.error("Explanation failed with status %d: %s", e.status_code, e.message)
        return _error(e.status_code, "AI analysis failed", f"Status {e.status_code}: {e.message}")

    insights = analysis.summary()
    logger.info(
        "Explained %s document: %d terms, %d red flags",
        insights.document_type, insights.key_terms_found, insights.red_flags_detected,
    )
    return ExplainResult(explanation=explanation, rag_insights=insights)


@router.post("/rag-query", response_model=RAGQueryResult)
def rag_query(
    req: RAGQueryRequest,
    processor: RAGProcessor = Depends(get_rag_processor),
    generator: LLMGenerator = Depends(get_llm_generator),
):
    if not req.query.strip() or not req.document_text.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Query and document text required"
        )

    chunks = processor.chunk(req.document_text)
    document_type = processor.identify_type(req.document_text)
    key_terms = processor.extract_terms(req.document_text)
    match = processor.query(chunks, req.query)

    prompt = build_query_prompt(req.query, match, document_type, key_terms)
    try:
        answer = generator.generate(
            prompt, temperature=QUERY_TEMPERATURE, max_output_tokens=QUERY_MAX_OUTPUT_TOKENS
        )
    except GenerationError as e:
        logger.error("Query failed with status %d: %s", e.status_code, e.message)
        return _error(e.status_code, "Failed to process query", f"Status {e.status_code}: {e.message}")

    logger.info("Answered query against %s document using %d chunk(s)", document_type, len(match.chunks))
    return RAGQueryResult(
        answer=answer,
        context=QueryContext(
            relevant_chunks=len(match.chunks),
            document_type=document_type,
            confidence=match.confidence,
        ),
    )
