import fitz
import pytest
from fastapi.testclient import TestClient

from legalese.config import Settings, get_settings
from legalese.llm_generator import GenerationError, get_llm_generator
from legalese.main import app

client = TestClient(app)


class FakeGenerator:
    def __init__(self, answer="Plain English explanation.", error=None):
        self.answer = answer
        self.error = error
        self.calls = []

    def generate(self, prompt, temperature=0.3, max_output_tokens=2048):
        self.calls.append({"prompt": prompt, "temperature": temperature, "max_output_tokens": max_output_tokens})
        if self.error:
            raise self.error
        return self.answer


@pytest.fixture
def generator():
    fake = FakeGenerator()
    app.dependency_overrides[get_llm_generator] = lambda: fake
    yield fake
    app.dependency_overrides.clear()


def make_pdf(text):
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_health():
    resp = client.get("/api/health")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "OK"
    assert body["contractTypes"] == 5


def test_upload_pdf():
    data = make_pdf("The tenant shall pay rent to the landlord under this lease.")
    files = {"pdf": ("lease.pdf", data, "application/pdf")}

    resp = client.post("/api/upload", files=files)

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["fileName"] == "lease.pdf"
    assert body["fileSize"] == len(data)
    assert body["pageCount"] == 1
    assert "tenant" in body["textContent"]
    assert body["textLength"] == len(body["textContent"])
    analysis = body["ragAnalysis"]
    assert analysis["documentType"] == "lease"
    assert analysis["chunks"] == 1
    assert analysis["chunkPreview"].endswith("...")
    assert isinstance(analysis["keyTerms"], dict)
    assert isinstance(analysis["redFlags"], list)


def test_upload_rejects_non_pdf():
    files = {"pdf": ("note.txt", b"hello", "text/plain")}
    resp = client.post("/api/upload", files=files)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Only PDF files are allowed"


def test_upload_requires_file():
    resp = client.post("/api/upload")
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No file uploaded"


def test_upload_too_large():
    app.dependency_overrides[get_settings] = lambda: Settings(max_upload_bytes=1024 * 1024)
    try:
        files = {"pdf": ("big.pdf", b"%PDF-" + b"0" * (1024 * 1024), "application/pdf")}
        resp = client.post("/api/upload", files=files)
    finally:
        app.dependency_overrides.clear()
    assert resp.status_code == 400
    assert resp.json()["detail"] == "File too large. Maximum size is 1MB."


def test_upload_unreadable_pdf():
    files = {"pdf": ("broken.pdf", b"this is not a pdf at all", "application/pdf")}
    resp = client.post("/api/upload", files=files)
    assert resp.status_code == 422
    assert resp.json()["error"] == "Failed to process PDF"


def test_explain(generator):
    text = "This employment contract sets the salary and benefits. Disputes go to arbitration."

    resp = client.post("/api/explain", json={"text": text})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["explanation"] == "Plain English explanation."
    insights = body["ragInsights"]
    assert insights["documentType"] == "employment"
    assert insights["keyTermsFound"] == 1
    assert insights["chunksAnalyzed"] == 1
    assert insights["confidence"] == "high"

    call = generator.calls[0]
    assert "DOCUMENT TYPE: EMPLOYMENT" in call["prompt"]
    assert "• arbitration:" in call["prompt"]
    assert call["temperature"] == 0.3
    assert call["max_output_tokens"] == 2048


def test_explain_requires_text(generator):
    resp = client.post("/api/explain", json={"text": "   "})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "No text provided"
    assert generator.calls == []


def test_explain_generation_failure(generator):
    generator.error = GenerationError(503, "model unavailable")

    resp = client.post("/api/explain", json={"text": "A short lease."})

    assert resp.status_code == 503
    body = resp.json()
    assert body["error"] == "AI analysis failed"
    assert "model unavailable" in body["details"]


def test_rag_query(generator):
    generator.answer = "The tenant pays."
    document = "The tenant pays rent monthly. The landlord maintains the roof."

    resp = client.post("/api/rag-query", json={"query": "Who pays rent?", "documentText": document})

    assert resp.status_code == 200
    body = resp.json()
    assert body["answer"] == "The tenant pays."
    assert body["context"] == {"relevantChunks": 1, "documentType": "lease", "confidence": "high"}

    call = generator.calls[0]
    assert "QUESTION: Who pays rent?" in call["prompt"]
    assert call["temperature"] == 0.2
    assert call["max_output_tokens"] == 1024


def test_rag_query_no_relevant_chunks(generator):
    resp = client.post("/api/rag-query", json={"query": "zebra", "documentText": "The tenant pays rent."})
    assert resp.status_code == 200
    assert resp.json()["context"]["confidence"] == "low"
    assert resp.json()["context"]["relevantChunks"] == 0


def test_rag_query_requires_both_fields(generator):
    resp = client.post("/api/rag-query", json={"query": "Who pays?"})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Query and document text required"


def test_rag_query_generation_failure(generator):
    generator.error = GenerationError(502, "empty output")
    resp = client.post("/api/rag-query", json={"query": "rent", "documentText": "The tenant pays rent."})
    assert resp.status_code == 502
    assert resp.json() == {"error": "Failed to process query", "details": "Status 502: empty output"}
