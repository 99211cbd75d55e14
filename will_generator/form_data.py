"""
Form Data Module

Normalizes the raw camelCase payload from the collection UI into typed,
snake_case dataclasses with derived flags. Every field has a default, so a
partial payload always produces a usable FormData.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Any, Optional

from will_generator.utils import to_number


MARRIED = 'married'


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item if isinstance(item, dict) else {} for item in value]


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    return value if isinstance(value, str) else str(value)


def _bool(data: Dict[str, Any], key: str, default: bool = False) -> bool:
    value = data.get(key, default)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip().lower() in ('true', 'yes', '1', 'on')
    if value is None:
        return default
    return bool(value)


def _item_id(data: Dict[str, Any], prefix: str, index: int) -> str:
    value = data.get('id')
    if value is None or value == '':
        return f'{prefix}_{index}'
    return str(value)


@dataclass
class Testator:
    full_name: str = ''
    address: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    county: str = ''
    marital_status: str = ''
    spouse_name: str = ''
    residence_state: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Testator':
        data = _dict(data)
        return cls(
            full_name=_str(data, 'fullName'),
            address=_str(data, 'address'),
            city=_str(data, 'city'),
            state=_str(data, 'state'),
            zip=_str(data, 'zip'),
            county=_str(data, 'county'),
            marital_status=_str(data, 'maritalStatus'),
            spouse_name=_str(data, 'spouseName'),
            residence_state=_str(data, 'residenceState').strip().upper()
        )

    @property
    def is_married(self) -> bool:
        return self.marital_status == MARRIED


@dataclass
class Executor:
    """Personal representative and alternate."""
    name: str = ''
    relationship: str = ''
    address: str = ''
    city: str = ''
    state: str = ''
    zip: str = ''
    alternate_name: str = ''
    alternate_relationship: str = ''
    bond_required: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Executor':
        data = _dict(data)
        return cls(
            name=_str(data, 'name'),
            relationship=_str(data, 'relationship'),
            address=_str(data, 'address'),
            city=_str(data, 'city'),
            state=_str(data, 'state'),
            zip=_str(data, 'zip'),
            alternate_name=_str(data, 'alternateName'),
            alternate_relationship=_str(data, 'alternateRelationship'),
            bond_required=_bool(data, 'bondRequired')
        )


@dataclass
class Child:
    id: str = ''
    name: str = ''
    relationship: str = 'biological'
    is_minor: bool = False
    date_of_birth: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'Child':
        return cls(
            id=_item_id(data, 'child', index),
            name=_str(data, 'name'),
            relationship=_str(data, 'relationship') or 'biological',
            is_minor=_bool(data, 'isMinor'),
            date_of_birth=_str(data, 'dateOfBirth')
        )


@dataclass
class Guardian:
    name: str = ''
    relationship: str = ''
    alternate_name: str = ''
    alternate_relationship: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Guardian':
        data = _dict(data)
        return cls(
            name=_str(data, 'name'),
            relationship=_str(data, 'relationship'),
            alternate_name=_str(data, 'alternateName'),
            alternate_relationship=_str(data, 'alternateRelationship')
        )


@dataclass
class SpecificGift:
    id: str = ''
    type: str = ''
    description: str = ''
    beneficiary: str = ''
    beneficiary_relationship: str = ''
    alternative_beneficiary: str = ''
    conditions: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'SpecificGift':
        return cls(
            id=_item_id(data, 'gift', index),
            type=_str(data, 'type'),
            description=_str(data, 'description'),
            beneficiary=_str(data, 'beneficiary'),
            beneficiary_relationship=_str(data, 'beneficiaryRelationship'),
            alternative_beneficiary=_str(data, 'alternativeBeneficiary'),
            conditions=_str(data, 'conditions')
        )


@dataclass
class CustomBeneficiary:
    id: str = ''
    name: str = ''
    relationship: str = ''
    share: Any = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'CustomBeneficiary':
        return cls(
            id=_item_id(data, 'beneficiary', index),
            name=_str(data, 'name'),
            relationship=_str(data, 'relationship'),
            share=to_number(data.get('share'))
        )


@dataclass
class ResiduaryEstate:
    distribution_type: str = ''
    spouse_share: Any = None
    children_share: Any = None
    custom_beneficiaries: List[CustomBeneficiary] = field(default_factory=list)
    per_stirpes: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ResiduaryEstate':
        data = _dict(data)
        return cls(
            distribution_type=_str(data, 'distributionType'),
            spouse_share=to_number(data.get('spouseShare')),
            children_share=to_number(data.get('childrenShare')),
            custom_beneficiaries=[
                CustomBeneficiary.from_dict(b, i)
                for i, b in enumerate(_list(data.get('customBeneficiaries')))
            ],
            per_stirpes=_bool(data, 'perStirpes', default=True)
        )


@dataclass
class DigitalAssets:
    include: bool = False
    fiduciary: str = ''
    social_media: str = ''
    email: str = ''
    cloud_storage: str = ''
    cryptocurrency: str = ''
    password_manager: str = ''
    instructions: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DigitalAssets':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            fiduciary=_str(data, 'fiduciary'),
            social_media=_str(data, 'socialMedia'),
            email=_str(data, 'email'),
            cloud_storage=_str(data, 'cloudStorage'),
            cryptocurrency=_str(data, 'cryptocurrency'),
            password_manager=_str(data, 'passwordManager'),
            instructions=_str(data, 'instructions')
        )


@dataclass
class Pet:
    id: str = ''
    type: str = ''
    name: str = ''
    caretaker: str = ''
    alternate_caretaker: str = ''
    funds: str = ''
    instructions: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'Pet':
        return cls(
            id=_item_id(data, 'pet', index),
            type=_str(data, 'type'),
            name=_str(data, 'name'),
            caretaker=_str(data, 'caretaker'),
            alternate_caretaker=_str(data, 'alternateCaretaker'),
            funds=_str(data, 'funds'),
            instructions=_str(data, 'instructions')
        )


@dataclass
class Pets:
    include: bool = False
    items: List[Pet] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Pets':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            items=[Pet.from_dict(p, i) for i, p in enumerate(_list(data.get('items')))]
        )


@dataclass
class Funeral:
    include: bool = False
    preference: str = ''
    service_type: str = ''
    location: str = ''
    memorial_donations: str = ''
    pre_paid_arrangements: bool = False
    pre_paid_details: str = ''
    additional_wishes: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Funeral':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            preference=_str(data, 'preference'),
            service_type=_str(data, 'serviceType'),
            location=_str(data, 'location'),
            memorial_donations=_str(data, 'memorialDonations'),
            pre_paid_arrangements=_bool(data, 'prePaidArrangements'),
            pre_paid_details=_str(data, 'prePaidDetails'),
            additional_wishes=_str(data, 'additionalWishes')
        )


@dataclass
class RealPropertyItem:
    id: str = ''
    address: str = ''
    description: str = ''
    beneficiary: str = ''
    instructions: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'RealPropertyItem':
        return cls(
            id=_item_id(data, 'property', index),
            address=_str(data, 'address'),
            description=_str(data, 'description'),
            beneficiary=_str(data, 'beneficiary'),
            instructions=_str(data, 'instructions')
        )


@dataclass
class RealProperty:
    include: bool = False
    items: List[RealPropertyItem] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RealProperty':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            items=[RealPropertyItem.from_dict(p, i) for i, p in enumerate(_list(data.get('items')))]
        )


@dataclass
class DebtsAndTaxes:
    include: bool = False
    payment_order: str = 'residuary'
    specific_instructions: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DebtsAndTaxes':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            payment_order=_str(data, 'paymentOrder') or 'residuary',
            specific_instructions=_str(data, 'specificInstructions')
        )


@dataclass
class CustomProvision:
    id: str = ''
    title: str = ''
    content: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'CustomProvision':
        return cls(
            id=_item_id(data, 'provision', index),
            title=_str(data, 'title'),
            content=_str(data, 'content')
        )


@dataclass
class CustomProvisions:
    include: bool = False
    items: List[CustomProvision] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> 'CustomProvisions':
        # Older payloads send a bare list of provisions
        if isinstance(data, list):
            data = {'include': bool(data), 'items': data}
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            items=[CustomProvision.from_dict(p, i) for i, p in enumerate(_list(data.get('items')))]
        )


@dataclass
class DisinheritedPerson:
    id: str = ''
    name: str = ''
    relationship: str = ''
    reason: str = ''

    @classmethod
    def from_dict(cls, data: Dict[str, Any], index: int) -> 'DisinheritedPerson':
        return cls(
            id=_item_id(data, 'person', index),
            name=_str(data, 'name'),
            relationship=_str(data, 'relationship'),
            reason=_str(data, 'reason')
        )


@dataclass
class Disinheritance:
    include: bool = False
    persons: List[DisinheritedPerson] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Disinheritance':
        data = _dict(data)
        return cls(
            include=_bool(data, 'include'),
            persons=[DisinheritedPerson.from_dict(p, i) for i, p in enumerate(_list(data.get('persons')))]
        )


DEFAULT_SURVIVORSHIP_DAYS = 30


@dataclass
class FormData:
    """
    Complete will questionnaire.

    Derived flags live here so every consumer (clause selection, clause
    text, validation warnings) reads the same definition.
    """
    testator: Testator = field(default_factory=Testator)
    executor: Executor = field(default_factory=Executor)
    children: List[Child] = field(default_factory=list)
    guardian: Guardian = field(default_factory=Guardian)
    specific_gifts: List[SpecificGift] = field(default_factory=list)
    residuary_estate: ResiduaryEstate = field(default_factory=ResiduaryEstate)
    digital_assets: DigitalAssets = field(default_factory=DigitalAssets)
    pets: Pets = field(default_factory=Pets)
    funeral: Funeral = field(default_factory=Funeral)
    real_property: RealProperty = field(default_factory=RealProperty)
    debts_and_taxes: DebtsAndTaxes = field(default_factory=DebtsAndTaxes)
    custom_provisions: CustomProvisions = field(default_factory=CustomProvisions)
    disinheritance: Disinheritance = field(default_factory=Disinheritance)
    survivorship_period: Any = DEFAULT_SURVIVORSHIP_DAYS
    no_contest_clause: bool = True

    @classmethod
    def from_dict(cls, payload: Optional[Dict[str, Any]]) -> 'FormData':
        data = _dict(payload)
        survivorship = data.get('survivorshipPeriod')
        if survivorship is None or survivorship == '':
            survivorship = DEFAULT_SURVIVORSHIP_DAYS
        elif to_number(survivorship) is not None:
            survivorship = to_number(survivorship)
        return cls(
            testator=Testator.from_dict(data.get('testator')),
            executor=Executor.from_dict(data.get('executor')),
            children=[Child.from_dict(c, i) for i, c in enumerate(_list(data.get('children')))],
            guardian=Guardian.from_dict(data.get('guardian')),
            specific_gifts=[
                SpecificGift.from_dict(g, i) for i, g in enumerate(_list(data.get('specificGifts')))
            ],
            residuary_estate=ResiduaryEstate.from_dict(data.get('residuaryEstate')),
            digital_assets=DigitalAssets.from_dict(data.get('digitalAssets')),
            pets=Pets.from_dict(data.get('pets')),
            funeral=Funeral.from_dict(data.get('funeral')),
            real_property=RealProperty.from_dict(data.get('realProperty')),
            debts_and_taxes=DebtsAndTaxes.from_dict(data.get('debtsAndTaxes')),
            custom_provisions=CustomProvisions.from_dict(data.get('customProvisions')),
            disinheritance=Disinheritance.from_dict(data.get('disinheritance')),
            survivorship_period=survivorship,
            no_contest_clause=_bool(data, 'noContestClause', default=True)
        )

    @property
    def has_children(self) -> bool:
        return len(self.children) > 0

    @property
    def minor_children(self) -> List[Child]:
        return [c for c in self.children if c.is_minor]

    @property
    def has_minor_children(self) -> bool:
        return len(self.minor_children) > 0

    @property
    def has_guardian(self) -> bool:
        return bool(self.guardian.name.strip())

    @property
    def has_specific_gifts(self) -> bool:
        return len(self.specific_gifts) > 0

    @property
    def has_real_property(self) -> bool:
        return self.real_property.include and len(self.real_property.items) > 0

    @property
    def has_pets(self) -> bool:
        return self.pets.include and len(self.pets.items) > 0

    @property
    def has_disinheritance(self) -> bool:
        return self.disinheritance.include and len(self.disinheritance.persons) > 0

    @property
    def has_custom_provisions(self) -> bool:
        return self.custom_provisions.include and len(self.custom_provisions.items) > 0

    @property
    def is_disinheriting_spouse(self) -> bool:
        """True when a married testator disinherits their spouse by name or relationship."""
        if not self.testator.is_married or not self.disinheritance.include:
            return False
        spouse = self.testator.spouse_name.strip().lower()
        for person in self.disinheritance.persons:
            if 'spouse' in person.relationship.lower():
                return True
            if spouse and person.name.strip().lower() == spouse:
                return True
        return False


def build_form_data(payload: Any) -> FormData:
    """Accept either a FormData or a raw payload dict."""
    if isinstance(payload, FormData):
        return payload
    return FormData.from_dict(payload)
