import json
import logging
from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from legalese.config import get_settings

logger = logging.getLogger(__name__)

LEGAL_KNOWLEDGE_BASE = {
    "contract_types": {
        "employment": {
            "keywords": ["employment", "job", "salary", "benefits", "termination", "non-compete", "confidentiality"],
            "context": "Employment contracts establish the relationship between employer and employee, defining terms of work, compensation, and obligations.",
            "common_clauses": ["at-will employment", "confidentiality", "intellectual property", "termination clauses"]
        },
        "lease": {
            "keywords": ["lease", "rent", "tenant", "landlord", "property", "deposit", "maintenance"],
            "context": "Lease agreements outline the terms for renting property, including rent amount, duration, and responsibilities.",
            "common_clauses": ["security deposit", "maintenance responsibilities", "early termination", "renewal options"]
        },
        "nda": {
            "keywords": ["confidential", "non-disclosure", "proprietary", "trade secret", "information"],
            "context": "Non-disclosure agreements protect confidential information from being shared with unauthorized parties.",
            "common_clauses": ["definition of confidential information", "permitted disclosures", "duration of confidentiality"]
        },
        "purchase": {
            "keywords": ["purchase", "sale", "buyer", "seller", "warranty", "delivery", "payment"],
            "context": "Purchase agreements govern the sale of goods or services, including terms of delivery and payment.",
            "common_clauses": ["warranties", "delivery terms", "payment schedule", "remedies for breach"]
        },
        "service": {
            "keywords": ["service", "provider", "client", "deliverables", "timeline", "payment terms"],
            "context": "Service agreements define the scope of work, deliverables, and terms for professional services.",
            "common_clauses": ["scope of work", "payment terms", "intellectual property", "liability limitations"]
        }
    },
    "legal_terms": {
        "force majeure": "A clause that frees parties from liability when extraordinary circumstances prevent contract fulfillment",
        "indemnification": "A contractual obligation to compensate for harm, loss, or damage incurred by another party",
        "liquidated damages": "A predetermined amount of compensation for breach of contract",
        "arbitration": "Alternative dispute resolution method where conflicts are resolved outside of court",
        "jurisdiction": "The authority of a court to hear and decide cases",
        "consideration": "Something of value exchanged between parties to make a contract legally binding",
        "breach": "Failure to fulfill a legal obligation or contract term",
        "waiver": "Voluntary relinquishment of a known legal right",
        "assignment": "Transfer of contractual rights or obligations to another party",
        "novation": "Replacement of an existing contract with a new one"
    },
    "red_flags": [
        "unusually broad liability clauses",
        "automatic renewal without notice",
        "excessive penalties for early termination",
        "vague or undefined terms",
        "one-sided modification clauses",
        "unclear dispute resolution procedures",
        "missing or inadequate warranties",
        "unreasonable confidentiality requirements",
        "lack of termination clauses",
        "ambiguous payment terms"
    ],
    "standard_clauses": {
        "severability": "If any provision is found unenforceable, the rest of the contract remains valid",
        "entireAgreement": "This contract represents the complete agreement between parties",
        "governingLaw": "Specifies which jurisdiction's laws will govern the contract",
        "amendment": "How the contract can be modified or changed",
        "notices": "How official communications must be delivered"
    }
}


def _require_text(value: str, what: str) -> str:
    if not value or not value.strip():
        raise ValueError(f"{what} must not be empty")
    return value


def _require_unique(keys, what: str) -> None:
    seen = set()
    for key in keys:
        if key in seen:
            raise ValueError(f"duplicate {what}: {key!r}")
        seen.add(key)


class ContractType(BaseModel):
    model_config = ConfigDict(frozen=True)

    type_id: str
    keywords: tuple[str, ...]
    context: str
    common_clauses: tuple[str, ...]

    @field_validator("type_id", "context")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _require_text(v, "contract type field")

    @field_validator("keywords", "common_clauses")
    @classmethod
    def _no_blank_entries(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        if not v:
            raise ValueError("contract type lists must not be empty")
        for item in v:
            _require_text(item, "contract type list entry")
        return v


class LegalTerm(BaseModel):
    model_config = ConfigDict(frozen=True)

    term: str
    definition: str

    @field_validator("term", "definition")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _require_text(v, "legal term field")


class StandardClause(BaseModel):
    model_config = ConfigDict(frozen=True)

    clause_id: str
    description: str

    @field_validator("clause_id", "description")
    @classmethod
    def _not_blank(cls, v: str) -> str:
        return _require_text(v, "standard clause field")


class KnowledgeBase(BaseModel):
    """Static catalogue used to classify documents and spot terms and risks.

    Every collection is a tuple so an instance cannot change once built;
    declaration order is significant (classifier tie-break, output order).
    """

    model_config = ConfigDict(frozen=True)

    contract_types: tuple[ContractType, ...]
    legal_terms: tuple[LegalTerm, ...]
    red_flags: tuple[str, ...]
    standard_clauses: tuple[StandardClause, ...]

    @field_validator("red_flags")
    @classmethod
    def _no_blank_flags(cls, v: tuple[str, ...]) -> tuple[str, ...]:
        for flag in v:
            _require_text(flag, "red flag")
        return v

    @model_validator(mode="after")
    def _unique_and_populated(self) -> "KnowledgeBase":
        for name in ("contract_types", "legal_terms", "red_flags", "standard_clauses"):
            if not getattr(self, name):
                raise ValueError(f"{name} must not be empty")
        _require_unique((ct.type_id for ct in self.contract_types), "contract type")
        _require_unique((lt.term.lower() for lt in self.legal_terms), "legal term")
        _require_unique(self.red_flags, "red flag")
        _require_unique((sc.clause_id for sc in self.standard_clauses), "standard clause")
        return self

    @property
    def type_ids(self) -> list[str]:
        return [ct.type_id for ct in self.contract_types]

    def contract_type(self, type_id: str) -> ContractType | None:
        for ct in self.contract_types:
            if ct.type_id == type_id:
                return ct
        return None

    def definition(self, term: str) -> str | None:
        wanted = term.lower()
        for lt in self.legal_terms:
            if lt.term.lower() == wanted:
                return lt.definition
        return None


def build_knowledge_base(data: dict) -> KnowledgeBase:
    """Build a KnowledgeBase from the dict shape of LEGAL_KNOWLEDGE_BASE."""
    return KnowledgeBase(
        contract_types=tuple(
            ContractType(
                type_id=type_id,
                keywords=tuple(entry["keywords"]),
                context=entry["context"],
                common_clauses=tuple(entry["common_clauses"]),
            )
            for type_id, entry in data["contract_types"].items()
        ),
        legal_terms=tuple(
            LegalTerm(term=term, definition=definition)
            for term, definition in data["legal_terms"].items()
        ),
        red_flags=tuple(data["red_flags"]),
        standard_clauses=tuple(
            StandardClause(clause_id=clause_id, description=description)
            for clause_id, description in data["standard_clauses"].items()
        ),
    )


def load_knowledge_base(path: str | Path) -> KnowledgeBase:
    path = Path(path)
    logger.info("Loading knowledge base from %s", path)
    return build_knowledge_base(json.loads(path.read_text(encoding="utf-8")))


_knowledge_base = None

def get_knowledge_base() -> KnowledgeBase:
    global _knowledge_base
    if _knowledge_base is None:
        path = get_settings().knowledge_base_path
        if path:
            _knowledge_base = load_knowledge_base(path)
        else:
            _knowledge_base = build_knowledge_base(LEGAL_KNOWLEDGE_BASE)
    return _knowledge_base
