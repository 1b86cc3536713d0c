"""Lexical retrieval layer: chunking, classification, term and red-flag
spotting, context assembly and query relevance over a single document.

All operations are pure functions of their input and the knowledge base the
processor was built with, so one processor may serve any number of requests.
"""
import logging
import re

from legalese.config import get_settings
from legalese.knowledge_base import KnowledgeBase, get_knowledge_base
from legalese.models.analysis import AnalysisResult, QueryMatch

logger = logging.getLogger(__name__)

FALLBACK_TYPE = "general"
MAX_RELEVANT_CHUNKS = 3

# split after a run of terminators, keeping the terminators with their sentence
_SENTENCE_BOUNDARY = re.compile(r"(?<=[.!?])(?=[^.!?])")
_WORD = re.compile(r"\S+")


class InvalidDocumentError(TypeError):
    """Raised when a caller hands the processor something other than text."""


def _ensure_text(value, name: str = "text") -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise InvalidDocumentError(f"{name} must be a string, got {type(value).__name__}")
    return value


def _ensure_chunks(chunks) -> list[str]:
    if chunks is None:
        return []
    if isinstance(chunks, str) or not isinstance(chunks, (list, tuple)):
        raise InvalidDocumentError(f"chunks must be a list of strings, got {type(chunks).__name__}")
    for chunk in chunks:
        _ensure_text(chunk, "chunk")
    return [c for c in chunks if c]


def split_sentences(text: str) -> list[str]:
    """Split text on ., ! and ? boundaries.

    Each sentence keeps its terminators and the whitespace in front of it, so
    concatenating consecutive sentences gives back the original substring.
    """
    return [s for s in _SENTENCE_BOUNDARY.split(text) if s.strip()]


class RAGProcessor:
    def __init__(self, knowledge_base: KnowledgeBase, chunk_size: int = 1000, overlap_size: int = 200):
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        if overlap_size < 0:
            raise ValueError("overlap_size must not be negative")
        self.knowledge_base = knowledge_base
        self.chunk_size = chunk_size
        self.overlap_size = overlap_size

    @property
    def overlap_words(self) -> int:
        # roughly six characters per word including the separator
        return self.overlap_size // 6

    def chunk(self, text) -> list[str]:
        text = _ensure_text(text)
        chunks = []
        current = ""

        for sentence in split_sentences(text):
            if current and len(current) + len(sentence) > self.chunk_size:
                closed = current.strip()
                chunks.append(closed)
                current = self._overlap_seed(closed, sentence) + sentence
            else:
                current += sentence

        if current.strip():
            chunks.append(current.strip())

        return chunks

    def _overlap_seed(self, closed: str, sentence: str) -> str:
        """Trailing words of the closed chunk that lead into the next one.

        The seed is a suffix of the closed chunk, so seed + sentence is still a
        contiguous slice of the document. Words are dropped from the front of
        the seed when it would push the new buffer past chunk_size.
        """
        if not self.overlap_words:
            return ""
        starts = [m.start() for m in _WORD.finditer(closed)][-self.overlap_words:]
        for start in starts:
            seed = closed[start:]
            if len(seed) + len(sentence) <= self.chunk_size:
                return seed
        return ""

    def identify_type(self, text) -> str:
        lower_text = _ensure_text(text).lower()
        best_match = None
        max_score = 0

        for contract_type in self.knowledge_base.contract_types:
            score = sum(
                len(re.findall(re.escape(keyword.lower()), lower_text))
                for keyword in contract_type.keywords
            )
            if score > max_score:
                max_score = score
                best_match = contract_type.type_id

        return best_match or FALLBACK_TYPE

    def extract_terms(self, text) -> dict[str, str]:
        lower_text = _ensure_text(text).lower()
        return {
            lt.term: lt.definition
            for lt in self.knowledge_base.legal_terms
            if lt.term.lower() in lower_text
        }

    def detect_red_flags(self, text) -> list[str]:
        # Coarse on purpose: a flag fires when any of its first three words
        # shows up anywhere, so short words like "of" or "or" over-match.
        lower_text = _ensure_text(text).lower()
        found_flags = []
        for flag in self.knowledge_base.red_flags:
            keywords = flag.split()[:3]
            if any(keyword.lower() in lower_text for keyword in keywords):
                found_flags.append(flag)
        return found_flags

    def build_context(self, document_type, chunks) -> str:
        type_data = self.knowledge_base.contract_type(_ensure_text(document_type, "document_type"))
        if type_data is None:
            return ""

        context = f"This appears to be a {type_data.type_id} document. {type_data.context}\n\n"

        full_text = " ".join(_ensure_chunks(chunks)).lower()
        found_clauses = [c for c in type_data.common_clauses if c.lower() in full_text]
        if found_clauses:
            context += f"Common clauses found: {', '.join(found_clauses)}\n\n"

        return context

    def select_relevant(self, chunks, query) -> list[str]:
        chunks = _ensure_chunks(chunks)
        query_lower = _ensure_text(query, "query").lower().strip()
        if not query_lower:
            return []

        words = query_lower.split()
        relevant = []
        for chunk in chunks:
            chunk_lower = chunk.lower()
            if query_lower in chunk_lower or any(word in chunk_lower for word in words):
                relevant.append(chunk)
                if len(relevant) == MAX_RELEVANT_CHUNKS:
                    break
        return relevant

    def analyze(self, text) -> AnalysisResult:
        text = _ensure_text(text)
        chunks = self.chunk(text)
        document_type = self.identify_type(text)
        result = AnalysisResult(
            document_type=document_type,
            key_terms=self.extract_terms(text),
            red_flags=self.detect_red_flags(text),
            chunks=chunks,
            context=self.build_context(document_type, chunks),
        )
        logger.debug(
            "Analyzed %d chars: type=%s chunks=%d terms=%d flags=%d",
            len(text), document_type, result.chunk_count, len(result.key_terms), len(result.red_flags),
        )
        return result

    def query(self, document, query) -> QueryMatch:
        """Select the chunks relevant to query from raw text or pre-built chunks."""
        chunks = self.chunk(document) if isinstance(document, str) or document is None else document
        return QueryMatch(chunks=self.select_relevant(chunks, query))


_rag_processor = None

def get_rag_processor() -> RAGProcessor:
    global _rag_processor
    if _rag_processor is None:
        settings = get_settings()
        _rag_processor = RAGProcessor(
            get_knowledge_base(),
            chunk_size=settings.chunk_size,
            overlap_size=settings.overlap_size,
        )
    return _rag_processor
