from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Any

from crm_dedupe.models import ExistingRecord

_FIRST_NAMES = [
    "Priya",
    "Marcus",
    "Elena",
    "Kenji",
    "Fatima",
    "Diego",
    "Hannah",
    "Tomasz",
    "Aisha",
    "Liam",
]
_LAST_NAMES = [
    "Okafor",
    "Novak",
    "Lindqvist",
    "Reyes",
    "Chen",
    "Haddad",
    "Moreau",
    "Kowalski",
]
_COMPANY_STEMS = [
    "Acme",
    "Globex",
    "Initech",
    "Umbrella",
    "Hooli",
    "Vandelay",
    "Northwind",
    "Contoso",
    "Wayne",
    "Stark",
    "Tyrell",
    "Soylent",
]
_INDUSTRIES = ["Analytics", "Logistics", "Holdings", "Systems", "Ventures", "Labs", "Media"]
_SUFFIXES = ["Inc", "LLC", "Ltd", "Corp", "GmbH", "PLC", "Co."]
_LONG_SUFFIXES = {"Inc": "Incorporated", "Ltd": "Limited", "Corp": "Corporation", "Co.": "Company"}
_TAGS = ["inbound", "partner", "enterprise", "smb", "event", "referral"]


@dataclass(slots=True)
class LabeledCandidate:
    """A candidate record plus the id of the record it was derived from, if any."""

    attributes: dict[str, Any]
    source_id: str | None = None


class ReferenceDatasetGenerator:
    """Generate synthetic CRM records and noisy candidates for tests and benchmarks."""

    def __init__(self, seed: int = 7) -> None:
        self._rng = random.Random(seed)

    def generate_records(self, size: int) -> list[ExistingRecord]:
        if size <= 0:
            return []
        return [ExistingRecord(record_id=f"rec_{i:07d}", attributes=self._profile(i)) for i in range(size)]

    def generate_candidates(
        self,
        records: list[ExistingRecord],
        count: int,
        duplicate_rate: float = 0.3,
    ) -> list[LabeledCandidate]:
        if count <= 0:
            return []

        duplicate_count = int(count * duplicate_rate) if records else 0
        duplicate_count = max(0, min(duplicate_count, count))

        candidates: list[LabeledCandidate] = []
        for _ in range(duplicate_count):
            source = self._rng.choice(records)
            attrs = dict(source.attributes)
            self._perturb(attrs)
            candidates.append(LabeledCandidate(attributes=attrs, source_id=source.record_id))

        offset = len(records)
        while len(candidates) < count:
            fresh = self._profile(offset + len(candidates))
            candidates.append(LabeledCandidate(attributes=fresh))

        self._rng.shuffle(candidates)
        return candidates

    def _profile(self, idx: int) -> dict[str, Any]:
        first_name = self._rng.choice(_FIRST_NAMES)
        last_name = self._rng.choice(_LAST_NAMES)
        stem = self._rng.choice(_COMPANY_STEMS)
        industry = self._rng.choice(_INDUSTRIES)
        suffix = self._rng.choice(_SUFFIXES)
        domain = f"{stem}{industry}{idx % 97}.com".lower()

        return {
            "name": f"{first_name} {last_name}",
            "company": f"{stem} {industry} {suffix}",
            "email": f"{first_name}.{last_name}@{domain}".lower(),
            "phone": f"({self._rng.randint(200, 999)}) {self._rng.randint(200, 999)}-{idx % 10000:04d}",
            "website": f"https://www.{domain}",
            "tags": self._rng.sample(_TAGS, k=self._rng.randint(0, 2)),
        }

    def _perturb(self, attrs: dict[str, Any]) -> None:
        # Loaded CSVs may lack columns or hold blanks; skip mutations with nothing to work on.
        mutation = self._rng.choice(["suffix", "case", "typo", "phone", "email", "keys", "mixed"])
        company = _text(attrs, "company")
        name = _text(attrs, "name")
        phone = _text(attrs, "phone")
        email = _text(attrs, "email")

        if company and mutation in {"suffix", "mixed"}:
            attrs["company"] = self._suffix_variant(company)
        if company and mutation == "case":
            attrs["company"] = self._rng.choice([company.upper(), company.lower()])
        if name and mutation in {"typo", "mixed"}:
            attrs["name"] = self._typo(name)
        if phone and mutation in {"phone", "mixed"}:
            digits = "".join(ch for ch in phone if ch.isdigit())
            attrs["phone"] = self._rng.choice([digits, f"+1 {digits[:3]}.{digits[3:6]}.{digits[6:]}"])
        if email and mutation == "email":
            attrs["email"] = _email_variant(email)
        if mutation == "keys":
            if "company" in attrs:
                attrs["client_company"] = attrs.pop("company")
            if "name" in attrs:
                attrs["contact_name"] = attrs.pop("name")

    def _suffix_variant(self, company: str) -> str:
        words = company.split()
        suffix = words[-1]
        if suffix in _LONG_SUFFIXES and self._rng.random() < 0.6:
            words[-1] = _LONG_SUFFIXES[suffix]
        elif self._rng.random() < 0.5:
            words = words[:-1]
        else:
            words = ["The", *words]
        return " ".join(words)

    def _typo(self, value: str) -> str:
        if len(value) < 4:
            return value
        pos = self._rng.randrange(1, len(value) - 2)
        chars = list(value)
        chars[pos], chars[pos + 1] = chars[pos + 1], chars[pos]
        return "".join(chars)


def _text(attrs: dict[str, Any], key: str) -> str | None:
    value = attrs.get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def _email_variant(email: str) -> str:
    if "@" not in email:
        return email
    local, domain = email.split("@", maxsplit=1)
    return f"{local.split('.')[0]}@{domain}"
