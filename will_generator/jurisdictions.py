"""
Jurisdiction Rule Table

One immutable record per U.S. jurisdiction (50 states + DC). The table is
built once at import and is read-only afterwards.

Every statute citation, act name, witness count and property-regime flag the
assembly engine injects into a will comes from here; nothing else in the
package holds per-state legal text.

Special cases:
==============
- SC and VT require three witnesses; every other jurisdiction requires two.
- LA is a civil-law jurisdiction. Its record exists for display, but it is
  flagged unsupported and never yields a generation-ready document.
- Unknown or missing codes resolve to DEFAULT_JURISDICTION_CODE with a
  logged warning rather than an error.
"""

import logging
from dataclasses import dataclass, asdict
from typing import Dict, List, Any, Optional


logger = logging.getLogger(__name__)

DEFAULT_JURISDICTION_CODE = 'FL'

RUFADAA = 'Revised Uniform Fiduciary Access to Digital Assets Act'
USDA = 'Uniform Simultaneous Death Act'
UPC_SURVIVAL = 'Uniform Probate Code 120-hour survival rule'

REQUIRED_TEXT_FIELDS = (
    'name', 'full_name', 'affidavit_statute', 'anti_lapse_statute',
    'simultaneous_death_act', 'digital_assets_act', 'county_label',
)


class JurisdictionConfigError(ValueError):
    """Raised when a jurisdiction table entry is malformed."""


@dataclass(frozen=True)
class JurisdictionRule:
    """Legal parameters for a single jurisdiction."""
    code: str
    name: str
    full_name: str
    witnesses: int
    self_proving_affidavit: bool
    affidavit_statute: str
    anti_lapse_statute: str
    simultaneous_death_act: str
    digital_assets_act: str
    community_property: bool = False
    marital_property: bool = False
    homestead_provisions: bool = False
    utma_age: int = 21
    county_label: str = 'County'
    supported: bool = True

    def __post_init__(self):
        if not isinstance(self.code, str) or len(self.code) != 2 or not self.code.isupper():
            raise JurisdictionConfigError(f'Invalid jurisdiction code: {self.code!r}')
        for field_name in REQUIRED_TEXT_FIELDS:
            value = getattr(self, field_name)
            if not isinstance(value, str) or not value.strip():
                raise JurisdictionConfigError(
                    f'Jurisdiction {self.code} is missing required field {field_name}'
                )
        if self.witnesses not in (2, 3):
            raise JurisdictionConfigError(
                f'Jurisdiction {self.code} has invalid witness count {self.witnesses}'
            )
        if not 18 <= self.utma_age <= 25:
            raise JurisdictionConfigError(
                f'Jurisdiction {self.code} has invalid UTMA age {self.utma_age}'
            )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _state(code: str, name: str, affidavit: str, anti_lapse: str, **overrides) -> JurisdictionRule:
    """Build a record with the defaults most jurisdictions share."""
    values = {
        'full_name': f'State of {name}',
        'witnesses': 2,
        'self_proving_affidavit': True,
        'simultaneous_death_act': USDA,
        'digital_assets_act': RUFADAA,
    }
    values.update(overrides)
    return JurisdictionRule(
        code=code,
        name=name,
        affidavit_statute=affidavit,
        anti_lapse_statute=anti_lapse,
        **values
    )


_RULES = (
    _state('AL', 'Alabama', 'Ala. Code § 43-8-132', 'Ala. Code § 43-8-224',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('AK', 'Alaska', 'Alaska Stat. § 13.12.504', 'Alaska Stat. § 13.12.603',
           simultaneous_death_act=UPC_SURVIVAL, utma_age=25),
    _state('AZ', 'Arizona', 'A.R.S. § 14-2504', 'A.R.S. § 14-2603',
           simultaneous_death_act=UPC_SURVIVAL, community_property=True),
    _state('AR', 'Arkansas', 'Ark. Code Ann. § 28-25-106', 'Ark. Code Ann. § 28-26-104'),
    _state('CA', 'California', 'Cal. Prob. Code § 8220', 'Cal. Prob. Code § 21110',
           self_proving_affidavit=False, community_property=True, utma_age=25,
           digital_assets_act=f'California {RUFADAA} (Cal. Prob. Code § 870 et seq.)'),
    _state('CO', 'Colorado', 'C.R.S. § 15-11-504', 'C.R.S. § 15-11-603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('CT', 'Connecticut', 'Conn. Gen. Stat. § 45a-285', 'Conn. Gen. Stat. § 45a-441'),
    _state('DE', 'Delaware', '12 Del. C. § 1305', '12 Del. C. § 2313',
           digital_assets_act='Delaware Fiduciary Access to Digital Assets and Digital Accounts Act'),
    _state('DC', 'District of Columbia', 'D.C. Code § 18-103', 'D.C. Code § 18-308',
           full_name='District of Columbia', self_proving_affidavit=False),
    _state('FL', 'Florida', 'Fla. Stat. § 732.503', 'Fla. Stat. § 732.603',
           homestead_provisions=True,
           digital_assets_act='Florida Fiduciary Access to Digital Assets Act (Fla. Stat. ch. 740)'),
    _state('GA', 'Georgia', 'O.C.G.A. § 53-4-24', 'O.C.G.A. § 53-4-64'),
    _state('HI', 'Hawaii', 'Haw. Rev. Stat. § 560:2-504', 'Haw. Rev. Stat. § 560:2-603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('ID', 'Idaho', 'Idaho Code § 15-2-504', 'Idaho Code § 15-2-605',
           simultaneous_death_act=UPC_SURVIVAL, community_property=True),
    _state('IL', 'Illinois', '755 ILCS 5/6-4', '755 ILCS 5/4-11',
           self_proving_affidavit=False),
    _state('IN', 'Indiana', 'Ind. Code § 29-1-5-3.1', 'Ind. Code § 29-1-6-1'),
    _state('IA', 'Iowa', 'Iowa Code § 633.279', 'Iowa Code § 633.273'),
    _state('KS', 'Kansas', 'K.S.A. § 59-606', 'K.S.A. § 59-615'),
    _state('KY', 'Kentucky', 'KRS § 394.225', 'KRS § 394.400',
           full_name='Commonwealth of Kentucky', utma_age=18),
    _state('LA', 'Louisiana', 'La. Civ. Code art. 1577', 'La. Civ. Code art. 1593',
           community_property=True, utma_age=18, county_label='Parish', supported=False,
           simultaneous_death_act='La. Civ. Code art. 31'),
    _state('ME', 'Maine', '18-C M.R.S. § 2-504', '18-C M.R.S. § 2-603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('MD', 'Maryland', 'Md. Code, Est. & Trusts § 4-102', 'Md. Code, Est. & Trusts § 4-403',
           self_proving_affidavit=False),
    _state('MA', 'Massachusetts', 'M.G.L. c. 190B, § 2-504', 'M.G.L. c. 190B, § 2-603',
           full_name='Commonwealth of Massachusetts', simultaneous_death_act=UPC_SURVIVAL),
    _state('MI', 'Michigan', 'MCL § 700.2504', 'MCL § 700.2603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('MN', 'Minnesota', 'Minn. Stat. § 524.2-504', 'Minn. Stat. § 524.2-603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('MS', 'Mississippi', 'Miss. Code Ann. § 91-7-7', 'Miss. Code Ann. § 91-5-7'),
    _state('MO', 'Missouri', 'Mo. Rev. Stat. § 474.337', 'Mo. Rev. Stat. § 474.460'),
    _state('MT', 'Montana', 'Mont. Code Ann. § 72-2-524', 'Mont. Code Ann. § 72-2-613',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('NE', 'Nebraska', 'Neb. Rev. Stat. § 30-2330', 'Neb. Rev. Stat. § 30-2343',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('NV', 'Nevada', 'NRS § 133.050', 'NRS § 133.200',
           community_property=True, utma_age=25),
    _state('NH', 'New Hampshire', 'RSA 551:2-a', 'RSA 551:12'),
    _state('NJ', 'New Jersey', 'N.J.S.A. 3B:3-4', 'N.J.S.A. 3B:3-35',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('NM', 'New Mexico', 'NMSA 1978, § 45-2-504', 'NMSA 1978, § 45-2-603',
           simultaneous_death_act=UPC_SURVIVAL, community_property=True),
    _state('NY', 'New York', 'N.Y. SCPA § 1406', 'N.Y. EPTL § 3-3.3',
           digital_assets_act='New York Administration of Digital Assets Act (EPTL Art. 13-A)'),
    _state('NC', 'North Carolina', 'N.C.G.S. § 31-11.6', 'N.C.G.S. § 31-42'),
    _state('ND', 'North Dakota', 'N.D.C.C. § 30.1-08-04', 'N.D.C.C. § 30.1-09-05',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('OH', 'Ohio', 'Ohio Rev. Code § 2107.03', 'Ohio Rev. Code § 2107.52',
           self_proving_affidavit=False),
    _state('OK', 'Oklahoma', '84 O.S. § 55', '84 O.S. § 142'),
    _state('OR', 'Oregon', 'ORS 113.055', 'ORS 112.395', utma_age=25),
    _state('PA', 'Pennsylvania', '20 Pa.C.S. § 3132.1', '20 Pa.C.S. § 2514',
           full_name='Commonwealth of Pennsylvania'),
    _state('RI', 'Rhode Island', 'R.I. Gen. Laws § 33-7-26', 'R.I. Gen. Laws § 33-6-19'),
    _state('SC', 'South Carolina', 'S.C. Code Ann. § 62-2-503', 'S.C. Code Ann. § 62-2-603',
           witnesses=3, simultaneous_death_act=UPC_SURVIVAL),
    _state('SD', 'South Dakota', 'SDCL § 29A-2-504', 'SDCL § 29A-2-603',
           simultaneous_death_act=UPC_SURVIVAL, utma_age=18),
    _state('TN', 'Tennessee', 'Tenn. Code Ann. § 32-2-110', 'Tenn. Code Ann. § 32-3-105',
           utma_age=25),
    _state('TX', 'Texas', 'Tex. Est. Code § 251.104', 'Tex. Est. Code § 255.153',
           community_property=True, homestead_provisions=True,
           digital_assets_act=f'Texas {RUFADAA} (Tex. Est. Code ch. 2001)'),
    _state('UT', 'Utah', 'Utah Code § 75-2-504', 'Utah Code § 75-2-603',
           simultaneous_death_act=UPC_SURVIVAL),
    _state('VT', 'Vermont', '14 V.S.A. § 5', '14 V.S.A. § 558',
           witnesses=3, self_proving_affidavit=False),
    _state('VA', 'Virginia', 'Va. Code § 64.2-452', 'Va. Code § 64.2-418',
           full_name='Commonwealth of Virginia'),
    _state('WA', 'Washington', 'RCW 11.20.020', 'RCW 11.12.110',
           community_property=True),
    _state('WV', 'West Virginia', 'W. Va. Code § 41-5-15', 'W. Va. Code § 41-3-3'),
    _state('WI', 'Wisconsin', 'Wis. Stat. § 853.03', 'Wis. Stat. § 854.06',
           self_proving_affidavit=False, marital_property=True),
    _state('WY', 'Wyoming', 'Wyo. Stat. § 2-6-114', 'Wyo. Stat. § 2-6-106'),
)

JURISDICTIONS: Dict[str, JurisdictionRule] = {rule.code: rule for rule in _RULES}

if len(JURISDICTIONS) != len(_RULES):
    raise JurisdictionConfigError('Duplicate jurisdiction code in rule table')

THREE_WITNESS_STATES = tuple(sorted(c for c, r in JURISDICTIONS.items() if r.witnesses == 3))
COMMUNITY_PROPERTY_STATES = tuple(sorted(c for c, r in JURISDICTIONS.items() if r.community_property))
MARITAL_PROPERTY_STATES = tuple(sorted(c for c, r in JURISDICTIONS.items() if r.marital_property))
UNSUPPORTED_STATES = tuple(sorted(c for c, r in JURISDICTIONS.items() if not r.supported))


def normalize_code(code: Optional[str]) -> str:
    if not isinstance(code, str):
        return ''
    return code.strip().upper()


def is_known_jurisdiction(code: Optional[str]) -> bool:
    return normalize_code(code) in JURISDICTIONS


def lookup(code: Optional[str]) -> JurisdictionRule:
    """
    Resolve a two-letter code to its rule record.

    Unknown or missing codes fall back to the default jurisdiction. The
    fallback is logged; callers that need to know use is_known_jurisdiction.
    """
    normalized = normalize_code(code)
    rule = JURISDICTIONS.get(normalized)
    if rule is None:
        logger.warning(
            f'Unknown jurisdiction code {code!r}; falling back to {DEFAULT_JURISDICTION_CODE}'
        )
        rule = JURISDICTIONS[DEFAULT_JURISDICTION_CODE]
    return rule


def list_jurisdictions() -> List[JurisdictionRule]:
    """All records, sorted by code."""
    return [JURISDICTIONS[code] for code in sorted(JURISDICTIONS)]
