from legalese.models.analysis import AnalysisResult, QueryMatch

EXPLAIN_TEMPERATURE = 0.3
EXPLAIN_MAX_OUTPUT_TOKENS = 2048
QUERY_TEMPERATURE = 0.2
QUERY_MAX_OUTPUT_TOKENS = 1024


def _format_terms(terms: dict[str, str]) -> str:
    return "\n".join(f"• {term}: {definition}" for term, definition in terms.items())


def build_explain_prompt(text: str, analysis: AnalysisResult, max_chars: int = 25000) -> str:
    """Prompt for the full plain-English walkthrough of a document.

    Only the first max_chars characters of the document are included.
    """
    red_flags = "\n".join(f"⚠️ {flag}" for flag in analysis.red_flags)
    return f"""You are an expert legal document analyzer with access to extensive legal knowledge.

DOCUMENT CONTEXT:
{analysis.context}

KEY LEGAL TERMS IDENTIFIED:
{_format_terms(analysis.key_terms)}

POTENTIAL RED FLAGS DETECTED:
{red_flags}

DOCUMENT TYPE: {analysis.document_type.upper()}

Please analyze the following legal document and provide a comprehensive explanation using this contextual knowledge:

1. **DOCUMENT SUMMARY**: Brief overview of what this document does
2. **KEY PROVISIONS**: Main terms and conditions explained in plain English
3. **YOUR RIGHTS**: What rights this document gives you
4. **YOUR OBLIGATIONS**: What you're agreeing to do or not do
5. **RISK ASSESSMENT**: Potential concerns and red flags (use the detected ones above)
6. **RECOMMENDATIONS**: What to clarify, negotiate, or watch out for
7. **NEXT STEPS**: What you should do before signing

Use the legal knowledge provided above to give context-aware explanations. Reference specific legal concepts when relevant.

DOCUMENT TEXT:
{text[:max_chars]}

Format your response with clear headers and bullet points for easy reading."""


def build_query_prompt(query: str, match: QueryMatch, document_type: str, terms: dict[str, str]) -> str:
    return f"""Based on this legal document context and your legal knowledge, answer the specific question:

QUESTION: {query}

RELEVANT DOCUMENT CONTEXT:
{match.context}

DOCUMENT TYPE: {document_type}

KEY TERMS IN DOCUMENT:
{_format_terms(terms)}

Please provide a specific, accurate answer based on the document content and legal knowledge."""
