"""
Per-step validation for will questionnaire payloads.

Validation Rules Documentation:
===============================

0. TESTATOR
   - State of residence: required, must be a known jurisdiction, and may not
     be Louisiana (civil-law system, not supported for generation)
   - Full name, street address, city: required
   - ZIP: required, 5 digits or ZIP+4
   - County (Parish in Louisiana): required
   - Marital status: one of the allowed values when provided
   - Spouse name: required when married

1. EXECUTOR (Personal Representative)
   - Name, relationship, address, city, state: required
   - ZIP: required, 5 digits or ZIP+4

2. CHILDREN & GUARDIAN
   - Each child: name required
   - Any minor child: guardian name required

3. SPECIFIC GIFTS
   - Each gift: description and beneficiary required

4. ESTATE DISTRIBUTION
   - Distribution type: one of spouse, children, split, custom
   - spouse: requires married status
   - children: requires at least one child
   - split: requires married status AND children; both shares > 0 and
     totaling 100% (within PERCENTAGE_EPSILON)
   - custom: at least one beneficiary, unique names, shares totaling 100%,
     each beneficiary named with a share > 0
   - Survivorship period: whole number of days, 0-365, when provided

5. ADDITIONAL PROVISIONS (only when the section is included)
   - Pets: caretaker per pet
   - Real property: address and beneficiary per property
   - Custom provisions: title and content per provision

6. DISINHERITANCE (only when included)
   - Each person: name and relationship

7. REVIEW
   - Testator full name and executor name present

Error keys are dotted camelCase payload paths ('children[0].name'), so the
maps from different steps never collide and validate_full_form is a plain
union. Nothing in this module raises on malformed input.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from will_generator.jurisdictions import JURISDICTIONS, UNSUPPORTED_STATES


ErrorMap = Dict[str, str]

PERCENTAGE_EPSILON = 0.01
MAX_SURVIVORSHIP_DAYS = 365

ZIP_PATTERN = re.compile(r'^\d{5}(-\d{4})?$')

MARITAL_STATUSES = ['single', 'married', 'divorced', 'widowed']
DISTRIBUTION_TYPES = ['spouse', 'children', 'split', 'custom']

STEP_NAMES = [
    'testator', 'executor', 'children', 'gifts',
    'distribution', 'provisions', 'disinheritance', 'review',
]
NUM_STEPS = len(STEP_NAMES)

ZIP_FORMAT_MESSAGE = 'Please enter a valid ZIP code (e.g., 33101 or 33101-1234)'


@dataclass
class ValidationError:
    """Represents a single validation error with precise field path."""
    field: str
    message: str
    code: str = 'invalid'
    section: str = ''


@dataclass
class ValidationResult:
    """Container for validation results."""
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def add_error(self, field: str, message: str, code: str = 'invalid', section: str = ''):
        self.errors.append(ValidationError(field, message, code, section))

    def add_warning(self, field: str, message: str, code: str = 'warning', section: str = ''):
        self.warnings.append(ValidationError(field, message, code, section))

    def error_map(self) -> ErrorMap:
        return {e.field: e.message for e in self.errors}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        return {
            'ok': self.is_valid,
            'errors': [
                {'field': e.field, 'message': e.message, 'code': e.code, 'section': e.section}
                for e in self.errors
            ],
            'warnings': [
                {'field': w.field, 'message': w.message, 'code': w.code, 'section': w.section}
                for w in self.warnings
            ]
        }

    def get_errors_by_section(self) -> Dict[str, List[ValidationError]]:
        """Group errors by section for UI display."""
        by_section = {}
        for error in self.errors:
            by_section.setdefault(error.section or 'general', []).append(error)
        return by_section


def coerce_to_bool(value: Any) -> Optional[bool]:
    """Coerce various inputs to boolean."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.lower() in ('true', '1', 'yes', 'on')
    if isinstance(value, int):
        return value == 1
    return None


def coerce_to_float(value: Any) -> Optional[float]:
    """Coerce various inputs to float."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def is_required(value: Any) -> bool:
    """True when a value counts as filled in."""
    if isinstance(value, str):
        return len(value.strip()) > 0
    if isinstance(value, (list, tuple, dict)):
        return len(value) > 0
    return value is not None


def is_valid_zip(value: Any) -> bool:
    return isinstance(value, str) and bool(ZIP_PATTERN.match(value.strip()))


def _approximately(a: float, b: float, epsilon: float = PERCENTAGE_EPSILON) -> bool:
    return abs(a - b) < epsilon


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _share(value: Any) -> float:
    return coerce_to_float(value) or 0.0


def _is_included(section: Any) -> bool:
    return coerce_to_bool(_dict(section).get('include')) is True


def _name_key(value: Any) -> str:
    return value.strip().lower() if isinstance(value, str) else ''


# --- Step validators ---

def _validate_testator(form_data: Dict[str, Any]) -> ErrorMap:
    testator = form_data.get('testator')
    if not isinstance(testator, dict):
        return {'testator': 'Testator information is required'}

    errors: ErrorMap = {}
    state = testator.get('residenceState')
    code = state.strip().upper() if isinstance(state, str) else ''

    if not is_required(state):
        errors['testator.residenceState'] = 'State of residence is required'
    elif code not in JURISDICTIONS:
        errors['testator.residenceState'] = 'Please select a valid U.S. state or the District of Columbia'
    elif code in UNSUPPORTED_STATES:
        errors['testator.residenceState'] = (
            f'{JURISDICTIONS[code].name} uses a Civil Law system that differs significantly from '
            f'other states. Please consult with a {JURISDICTIONS[code].name} attorney for will preparation.'
        )

    if not is_required(testator.get('fullName')):
        errors['testator.fullName'] = 'Full legal name is required'
    if not is_required(testator.get('address')):
        errors['testator.address'] = 'Address is required'
    if not is_required(testator.get('city')):
        errors['testator.city'] = 'City is required'

    zip_code = testator.get('zip')
    if not is_required(zip_code):
        errors['testator.zip'] = 'ZIP code is required'
    elif not is_valid_zip(zip_code):
        errors['testator.zip'] = ZIP_FORMAT_MESSAGE

    if not is_required(testator.get('county')):
        label = JURISDICTIONS[code].county_label if code in JURISDICTIONS else 'County'
        errors['testator.county'] = f'{label} is required'

    marital_status = testator.get('maritalStatus')
    if is_required(marital_status) and marital_status not in MARITAL_STATUSES:
        errors['testator.maritalStatus'] = f'Must be one of: {", ".join(MARITAL_STATUSES)}'
    if marital_status == 'married' and not is_required(testator.get('spouseName')):
        errors['testator.spouseName'] = "Spouse's name is required when married"

    return errors


def _validate_executor(form_data: Dict[str, Any]) -> ErrorMap:
    executor = form_data.get('executor')
    if not isinstance(executor, dict):
        return {'executor': 'Executor information is required'}

    errors: ErrorMap = {}
    required = [
        ('name', 'Personal Representative name is required'),
        ('relationship', 'Relationship is required'),
        ('address', 'Address is required'),
        ('city', 'City is required'),
        ('state', 'State is required'),
    ]
    for key, message in required:
        if not is_required(executor.get(key)):
            errors[f'executor.{key}'] = message

    zip_code = executor.get('zip')
    if not is_required(zip_code):
        errors['executor.zip'] = 'ZIP code is required'
    elif not is_valid_zip(zip_code):
        errors['executor.zip'] = ZIP_FORMAT_MESSAGE

    return errors


def _validate_children(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}
    children = _items(form_data.get('children'))

    for i, child in enumerate(children):
        if not is_required(child.get('name')):
            errors[f'children[{i}].name'] = f'Child {i + 1} name is required'

    has_minors = any(coerce_to_bool(child.get('isMinor')) for child in children)
    if has_minors and not is_required(_dict(form_data.get('guardian')).get('name')):
        errors['guardian.name'] = 'A guardian is required when you have minor children'

    return errors


def _validate_gifts(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}
    for i, gift in enumerate(_items(form_data.get('specificGifts'))):
        if not is_required(gift.get('description')):
            errors[f'specificGifts[{i}].description'] = f'Gift {i + 1} description is required'
        if not is_required(gift.get('beneficiary')):
            errors[f'specificGifts[{i}].beneficiary'] = f'Gift {i + 1} beneficiary is required'
    return errors


def _validate_custom_beneficiaries(beneficiaries: List[Dict[str, Any]], errors: ErrorMap):
    key = 'residuaryEstate.customBeneficiaries'

    if not beneficiaries:
        errors[key] = 'Please add at least one beneficiary'
    else:
        names = [_name_key(b.get('name')) for b in beneficiaries]
        names = [n for n in names if n]
        total = sum(_share(b.get('share')) for b in beneficiaries)
        if len(names) != len(set(names)):
            errors[key] = 'Beneficiary names must be unique to avoid legal ambiguity'
        elif not _approximately(total, 100):
            errors[key] = 'Beneficiary shares must total 100%'

    for i, beneficiary in enumerate(beneficiaries):
        if not is_required(beneficiary.get('name')):
            errors[f'{key}[{i}].name'] = f'Beneficiary {i + 1} name is required'
        if _share(beneficiary.get('share')) <= 0:
            errors[f'{key}[{i}].share'] = f'Beneficiary {i + 1} share must be greater than 0%'


def _validate_distribution(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}
    estate = _dict(form_data.get('residuaryEstate'))
    married = _dict(form_data.get('testator')).get('maritalStatus') == 'married'
    has_children = len(_items(form_data.get('children'))) > 0
    distribution = estate.get('distributionType')
    type_key = 'residuaryEstate.distributionType'

    if distribution not in DISTRIBUTION_TYPES:
        errors[type_key] = 'Please choose how your residuary estate should be distributed'

    elif distribution == 'spouse' and not married:
        errors[type_key] = (
            'Spouse distribution requires married status. Please update your marital status '
            'or choose a different distribution method.'
        )

    elif distribution == 'children' and not has_children:
        errors[type_key] = (
            'Children distribution requires at least one child. Please add children or choose '
            'a different distribution method.'
        )

    elif distribution == 'split':
        if not married:
            errors[type_key] = (
                'Split distribution requires married status. Please update your marital status '
                'or choose a different distribution method.'
            )
        elif not has_children:
            errors[type_key] = (
                'Split distribution requires at least one child. Please add children or choose '
                'a different distribution method.'
            )
        else:
            spouse_share = _share(estate.get('spouseShare'))
            children_share = _share(estate.get('childrenShare'))
            if spouse_share <= 0 or children_share <= 0:
                errors['residuaryEstate.shares'] = 'Both spouse and children shares must be greater than 0%'
            elif not _approximately(spouse_share + children_share, 100):
                errors['residuaryEstate.shares'] = 'Spouse and children shares must total 100%'

    elif distribution == 'custom':
        _validate_custom_beneficiaries(_items(estate.get('customBeneficiaries')), errors)

    period = form_data.get('survivorshipPeriod')
    if is_required(period):
        days = coerce_to_float(period)
        if days is None or not days.is_integer() or not 0 <= days <= MAX_SURVIVORSHIP_DAYS:
            errors['survivorshipPeriod'] = (
                f'Survivorship period must be a whole number of days between 0 and {MAX_SURVIVORSHIP_DAYS}'
            )

    return errors


def _validate_additional_provisions(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}

    pets = form_data.get('pets')
    if _is_included(pets):
        for i, pet in enumerate(_items(_dict(pets).get('items'))):
            if not is_required(pet.get('caretaker')):
                errors[f'pets.items[{i}].caretaker'] = f'Pet {i + 1} caretaker is required'

    real_property = form_data.get('realProperty')
    if _is_included(real_property):
        for i, item in enumerate(_items(_dict(real_property).get('items'))):
            if not is_required(item.get('address')):
                errors[f'realProperty.items[{i}].address'] = f'Property {i + 1} address is required'
            if not is_required(item.get('beneficiary')):
                errors[f'realProperty.items[{i}].beneficiary'] = f'Property {i + 1} beneficiary is required'

    provisions = form_data.get('customProvisions')
    if isinstance(provisions, list):
        provisions = {'include': bool(provisions), 'items': provisions}
    if _is_included(provisions):
        for i, item in enumerate(_items(_dict(provisions).get('items'))):
            if not is_required(item.get('title')):
                errors[f'customProvisions.items[{i}].title'] = f'Custom provision {i + 1} title is required'
            if not is_required(item.get('content')):
                errors[f'customProvisions.items[{i}].content'] = f'Custom provision {i + 1} content is required'

    return errors


def _validate_disinheritance(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}
    disinheritance = form_data.get('disinheritance')
    if _is_included(disinheritance):
        for i, person in enumerate(_items(_dict(disinheritance).get('persons'))):
            if not is_required(person.get('name')):
                errors[f'disinheritance.persons[{i}].name'] = f'Person {i + 1} name is required'
            if not is_required(person.get('relationship')):
                errors[f'disinheritance.persons[{i}].relationship'] = f'Person {i + 1} relationship is required'
    return errors


def _validate_review(form_data: Dict[str, Any]) -> ErrorMap:
    errors: ErrorMap = {}
    if not is_required(_dict(form_data.get('testator')).get('fullName')):
        errors['review.testator'] = 'Testator information is incomplete'
    if not is_required(_dict(form_data.get('executor')).get('name')):
        errors['review.executor'] = 'Personal Representative information is incomplete'
    return errors


STEP_VALIDATORS = [
    _validate_testator,
    _validate_executor,
    _validate_children,
    _validate_gifts,
    _validate_distribution,
    _validate_additional_provisions,
    _validate_disinheritance,
    _validate_review,
]


def validate_step(step_index: int, form_data: Any) -> ErrorMap:
    """
    Validate one questionnaire step.

    Args:
        step_index: 0-based step number
        form_data: Raw camelCase payload

    Returns:
        Map of field path to message; empty when the step is valid or the
        step index is unknown
    """
    if isinstance(step_index, bool) or not isinstance(step_index, int):
        return {}
    if not 0 <= step_index < NUM_STEPS:
        return {}
    return STEP_VALIDATORS[step_index](_dict(form_data))


def validate_full_form(form_data: Any) -> ErrorMap:
    """Union of every step's errors."""
    errors: ErrorMap = {}
    for step_index in range(NUM_STEPS):
        errors.update(validate_step(step_index, form_data))
    return errors


def is_step_complete(step_index: int, form_data: Any) -> bool:
    return not validate_step(step_index, form_data)


# --- Warnings (never block generation) ---

def _children_warnings(form_data: Dict[str, Any]) -> List[Dict[str, str]]:
    children = _items(form_data.get('children'))
    if any(child.get('relationship') == 'stepchild' for child in children):
        return [{
            'field': 'stepchildren',
            'message': (
                'Stepchildren do not have automatic inheritance rights unless legally adopted. '
                'If you want your stepchildren to inherit, you must explicitly name them as '
                'beneficiaries in the estate distribution or specific gifts sections.'
            ),
        }]
    return []


def _distribution_warnings(form_data: Dict[str, Any]) -> List[Dict[str, str]]:
    estate = _dict(form_data.get('residuaryEstate'))
    if estate.get('distributionType') != 'custom':
        return []
    executor_name = _name_key(_dict(form_data.get('executor')).get('name'))
    if executor_name and any(
        _name_key(b.get('name')) == executor_name for b in _items(estate.get('customBeneficiaries'))
    ):
        return [{
            'field': 'executor_beneficiary',
            'message': (
                'Your Personal Representative is also a primary beneficiary. While this is legally '
                'permitted in most states, it may create a potential conflict of interest.'
            ),
        }]
    return []


def _disinheritance_warnings(form_data: Dict[str, Any]) -> List[Dict[str, str]]:
    disinheritance = _dict(form_data.get('disinheritance'))
    persons = _items(disinheritance.get('persons'))
    if not _is_included(disinheritance) or not persons:
        return []

    warnings = []
    testator = _dict(form_data.get('testator'))
    spouse = _name_key(testator.get('spouseName'))
    disinheriting_spouse = testator.get('maritalStatus') == 'married' and any(
        'spouse' in _name_key(p.get('relationship')) or (spouse and _name_key(p.get('name')) == spouse)
        for p in persons
    )
    if disinheriting_spouse:
        warnings.append({
            'field': 'spouse_disinheritance',
            'message': (
                'Disinheriting a spouse may be ineffective. Most states grant surviving spouses an '
                '"elective share" (typically 30-50% of the estate) that overrides will provisions. '
                'The will text will include a disclaimer acknowledging this.'
            ),
        })

    warnings.append({
        'field': 'beneficiary_disinheritance_conflict',
        'message': (
            'Do not list someone as both a beneficiary and a disinherited person. This creates a '
            'legal contradiction that would invalidate those provisions.'
        ),
    })
    return warnings


STEP_WARNINGS = {
    2: _children_warnings,
    4: _distribution_warnings,
    6: _disinheritance_warnings,
}


def step_warnings(step_index: int, form_data: Any) -> List[Dict[str, str]]:
    warning_fn = STEP_WARNINGS.get(step_index)
    if warning_fn is None:
        return []
    return warning_fn(_dict(form_data))


def collect_warnings(form_data: Any) -> List[Dict[str, str]]:
    warnings = []
    for step_index in sorted(STEP_WARNINGS):
        warnings.extend(step_warnings(step_index, form_data))
    return warnings


def validate_form(form_data: Any, step_index: Optional[int] = None) -> ValidationResult:
    """
    Validate a payload into a ValidationResult for API responses.

    Args:
        form_data: Raw camelCase payload
        step_index: Validate a single step; all steps when None

    Returns:
        ValidationResult with errors grouped by step name
    """
    result = ValidationResult()
    if step_index is None:
        steps = range(NUM_STEPS)
    elif isinstance(step_index, bool) or not isinstance(step_index, int) or not 0 <= step_index < NUM_STEPS:
        # Unknown steps validate nothing, as in validate_step
        return result
    else:
        steps = [step_index]

    for index in steps:
        section = STEP_NAMES[index]
        for field_path, message in validate_step(index, form_data).items():
            code = 'required' if message.endswith('is required') else 'invalid'
            result.add_error(field_path, message, code, section)
        for warning in step_warnings(index, form_data):
            result.add_warning(warning['field'], warning['message'], 'warning', section)

    return result

