"""
Clause Logic Module

Determines which clauses appear in the will and their order.
Inclusion is declared once, in CLAUSE_RULES, as a predicate over FormData.

Clause Inclusion Rules:
=======================

 1. TITLE: Always included
 2. PREAMBLE: Always included
 3. FAMILY_DECLARATION: Always included
 4. PERSONAL_REPRESENTATIVE: Always included
 5. GUARDIAN: Included if there is a minor child AND a guardian is named
 6. TANGIBLE_PROPERTY: Always included
 7. SPECIFIC_GIFTS: Included if at least one gift is listed
 8. REAL_PROPERTY: Included if the section is enabled AND has items
 9. RESIDUARY_ESTATE: Always included
10. SURVIVORSHIP: Always included
11. DISTRIBUTIONS_TO_MINORS: Always included
12. DIGITAL_ASSETS: Included if the section is enabled
13. PET_CARE: Included if the section is enabled AND has items
14. FUNERAL_WISHES: Included if the section is enabled
15. DEBTS_AND_TAXES: Always included (wording depends on the section flag)
16. DISINHERITANCE: Included if the section is enabled AND has persons
17. NO_CONTEST: Included unless the testator turned it off
18. SIMULTANEOUS_DEATH: Always included
19. TAX_APPORTIONMENT: Always included
20. LAPSED_GIFTS: Always included
21. CUSTOM_PROVISIONS: Included if enabled AND has items (one article each)
22. GENERAL_PROVISIONS: Always included
23. SIGNATURE: Always included
24. ATTESTATION: Always included
25. AFFIDAVIT: Always included
26. DISCLAIMER: Always included (last)

Conflict Prevention:
====================
- No clause appears more than once
- Clause order is fixed and stable
- Article numbers are assigned after selection, never during it
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, List

from will_generator.form_data import FormData


class ClauseId(str, Enum):
    """Stable clause identifiers, declared in canonical document order."""
    TITLE = 'title'
    PREAMBLE = 'preamble'
    FAMILY_DECLARATION = 'family_declaration'
    PERSONAL_REPRESENTATIVE = 'personal_representative'
    GUARDIAN = 'guardian'
    TANGIBLE_PROPERTY = 'tangible_property'
    SPECIFIC_GIFTS = 'specific_gifts'
    REAL_PROPERTY = 'real_property'
    RESIDUARY_ESTATE = 'residuary_estate'
    SURVIVORSHIP = 'survivorship'
    DISTRIBUTIONS_TO_MINORS = 'distributions_to_minors'
    DIGITAL_ASSETS = 'digital_assets'
    PET_CARE = 'pet_care'
    FUNERAL_WISHES = 'funeral_wishes'
    DEBTS_AND_TAXES = 'debts_and_taxes'
    DISINHERITANCE = 'disinheritance'
    NO_CONTEST = 'no_contest'
    SIMULTANEOUS_DEATH = 'simultaneous_death'
    TAX_APPORTIONMENT = 'tax_apportionment'
    LAPSED_GIFTS = 'lapsed_gifts'
    CUSTOM_PROVISIONS = 'custom_provisions'
    GENERAL_PROVISIONS = 'general_provisions'
    SIGNATURE = 'signature'
    ATTESTATION = 'attestation'
    AFFIDAVIT = 'affidavit'
    DISCLAIMER = 'disclaimer'


Predicate = Callable[[FormData], bool]


def _always(form_data: FormData) -> bool:
    return True


@dataclass(frozen=True)
class ClauseRule:
    """Inclusion rule for a clause."""
    clause_id: ClauseId
    predicate: Predicate
    notes: str = ''


CLAUSE_RULES: List[ClauseRule] = [
    ClauseRule(ClauseId.TITLE, _always, 'Always included'),
    ClauseRule(ClauseId.PREAMBLE, _always, 'Always included'),
    ClauseRule(ClauseId.FAMILY_DECLARATION, _always, 'Always included'),
    ClauseRule(ClauseId.PERSONAL_REPRESENTATIVE, _always, 'Always included'),
    ClauseRule(
        ClauseId.GUARDIAN,
        lambda fd: fd.has_minor_children and fd.has_guardian,
        'Requires a minor child and a named guardian'
    ),
    ClauseRule(ClauseId.TANGIBLE_PROPERTY, _always, 'Always included'),
    ClauseRule(
        ClauseId.SPECIFIC_GIFTS,
        lambda fd: fd.has_specific_gifts,
        'Requires at least one specific gift'
    ),
    ClauseRule(
        ClauseId.REAL_PROPERTY,
        lambda fd: fd.has_real_property,
        'Requires the section enabled with at least one property'
    ),
    ClauseRule(ClauseId.RESIDUARY_ESTATE, _always, 'Always included'),
    ClauseRule(ClauseId.SURVIVORSHIP, _always, 'Always included'),
    ClauseRule(ClauseId.DISTRIBUTIONS_TO_MINORS, _always, 'Always included'),
    ClauseRule(
        ClauseId.DIGITAL_ASSETS,
        lambda fd: fd.digital_assets.include,
        'Requires the section enabled'
    ),
    ClauseRule(
        ClauseId.PET_CARE,
        lambda fd: fd.has_pets,
        'Requires the section enabled with at least one pet'
    ),
    ClauseRule(
        ClauseId.FUNERAL_WISHES,
        lambda fd: fd.funeral.include,
        'Requires the section enabled'
    ),
    ClauseRule(ClauseId.DEBTS_AND_TAXES, _always, 'Always included'),
    ClauseRule(
        ClauseId.DISINHERITANCE,
        lambda fd: fd.has_disinheritance,
        'Requires the section enabled with at least one person'
    ),
    ClauseRule(
        ClauseId.NO_CONTEST,
        lambda fd: bool(fd.no_contest_clause),
        'Included unless disabled'
    ),
    ClauseRule(ClauseId.SIMULTANEOUS_DEATH, _always, 'Always included'),
    ClauseRule(ClauseId.TAX_APPORTIONMENT, _always, 'Always included'),
    ClauseRule(ClauseId.LAPSED_GIFTS, _always, 'Always included'),
    ClauseRule(
        ClauseId.CUSTOM_PROVISIONS,
        lambda fd: fd.has_custom_provisions,
        'Requires the section enabled with at least one provision'
    ),
    ClauseRule(ClauseId.GENERAL_PROVISIONS, _always, 'Always included'),
    ClauseRule(ClauseId.SIGNATURE, _always, 'Always included'),
    ClauseRule(ClauseId.ATTESTATION, _always, 'Always included'),
    ClauseRule(ClauseId.AFFIDAVIT, _always, 'Always included'),
    ClauseRule(ClauseId.DISCLAIMER, _always, 'Always included (last)'),
]

# Fixed clause order - this never changes
CLAUSE_ORDER: List[ClauseId] = [rule.clause_id for rule in CLAUSE_RULES]


def select_clauses(form_data: FormData) -> List[ClauseId]:
    """
    Select which clauses appear in the will.

    Every predicate is evaluated before any clause text is generated.

    Args:
        form_data: The normalized questionnaire

    Returns:
        Ordered list of clause IDs to include
    """
    return [rule.clause_id for rule in CLAUSE_RULES if rule.predicate(form_data)]


def get_clause_title(clause_id: ClauseId) -> str:
    """
    Get the display title for a clause.

    Args:
        clause_id: The clause identifier

    Returns:
        Human-readable clause title
    """
    titles = {
        ClauseId.TITLE: 'Title',
        ClauseId.PREAMBLE: 'Preamble and Revocation',
        ClauseId.FAMILY_DECLARATION: 'Family Declaration',
        ClauseId.PERSONAL_REPRESENTATIVE: 'Personal Representative',
        ClauseId.GUARDIAN: 'Guardian of Minor Children',
        ClauseId.TANGIBLE_PROPERTY: 'Tangible Personal Property',
        ClauseId.SPECIFIC_GIFTS: 'Specific Gifts',
        ClauseId.REAL_PROPERTY: 'Real Property',
        ClauseId.RESIDUARY_ESTATE: 'Residuary Estate',
        ClauseId.SURVIVORSHIP: 'Survivorship Requirement',
        ClauseId.DISTRIBUTIONS_TO_MINORS: 'Distributions to Minors or Incapacitated Beneficiaries',
        ClauseId.DIGITAL_ASSETS: 'Digital Assets',
        ClauseId.PET_CARE: 'Pet Care Provisions',
        ClauseId.FUNERAL_WISHES: 'Funeral and Burial Wishes',
        ClauseId.DEBTS_AND_TAXES: 'Debts and Taxes',
        ClauseId.DISINHERITANCE: 'Disinheritance',
        ClauseId.NO_CONTEST: 'No Contest Clause',
        ClauseId.SIMULTANEOUS_DEATH: 'Simultaneous Death',
        ClauseId.TAX_APPORTIONMENT: 'Tax Apportionment',
        ClauseId.LAPSED_GIFTS: 'Lapsed Gifts',
        ClauseId.CUSTOM_PROVISIONS: 'Custom Provisions',
        ClauseId.GENERAL_PROVISIONS: 'General Provisions',
        ClauseId.SIGNATURE: 'Signature',
        ClauseId.ATTESTATION: 'Attestation of Witnesses',
        ClauseId.AFFIDAVIT: 'Self-Proving Affidavit',
        ClauseId.DISCLAIMER: 'Important Notice',
    }

    return titles.get(clause_id, clause_id.value.replace('_', ' ').title())


def validate_clause_order(clauses: List[ClauseId]) -> bool:
    """
    Validate that clauses follow the canonical order with no repeats.

    Args:
        clauses: List of clause IDs to validate

    Returns:
        True if order is valid
    """
    last_index = -1
    for clause in clauses:
        try:
            current_index = CLAUSE_ORDER.index(clause)
        except ValueError:
            return False
        if current_index <= last_index:
            return False
        last_index = current_index

    return True


def get_clauses_summary(form_data: FormData) -> Dict[str, Any]:
    """Summary of clause selection, for API responses."""
    selected = select_clauses(form_data)
    return {
        'total_clauses': len(selected),
        'selected': [c.value for c in selected],
        'titles': {c.value: get_clause_title(c) for c in selected},
        'order_valid': validate_clause_order(selected),
        'omitted': [c.value for c in CLAUSE_ORDER if c not in selected],
        'rules': {rule.clause_id.value: rule.notes for rule in CLAUSE_RULES},
    }
