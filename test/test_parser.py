import fitz
import pytest
from legalese.parser import DocumentParseError, extract_text


def make_pdf(*pages):
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_extract_text_single_page():
    parsed = extract_text(make_pdf("This lease agreement binds the tenant."))
    assert parsed.page_count == 1
    assert "lease agreement" in parsed.text


def test_extract_text_multiple_pages():
    parsed = extract_text(make_pdf("First page.", "Second page."))
    assert parsed.page_count == 2
    assert parsed.text.index("First page") < parsed.text.index("Second page")


def test_extract_text_rejects_garbage():
    with pytest.raises(DocumentParseError):
        extract_text(b"this is not a pdf at all")
