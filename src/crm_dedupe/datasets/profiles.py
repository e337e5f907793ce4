from __future__ import annotations

from crm_dedupe.schema import FieldKind, MatchField

# Flat export of a CRM contacts/companies table.
CRM_COLUMNS = [
    "name",
    "company",
    "email",
    "phone",
    "website",
    "tags",
]

CRM_FIELDS = (
    MatchField("name", FieldKind.NAME),
    MatchField("company", FieldKind.NAME, aliases=("company_name",)),
    MatchField("email", FieldKind.EMAIL),
    MatchField("phone", FieldKind.PHONE, aliases=("mobile",)),
)
