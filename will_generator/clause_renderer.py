"""
Clause Renderer Module

The document assembly engine. Combines FormData with a JurisdictionRule and
produces a StructuredDocument:

1. select_clauses evaluates every inclusion predicate up front.
2. Each selected clause's generator builds its section(s). Generators never
   see an article number.
3. number_articles numbers the Article sections 1..N in a separate pass.

Missing fields render as bracketed placeholder tokens ([NAME], [COUNTY], ...)
so an incomplete questionnaire still yields a reviewable draft. Statute
citations, act names, the county label and witness counts all come from the
JurisdictionRule.
"""

from dataclasses import dataclass, replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from will_generator.clause_logic import ClauseId, select_clauses
from will_generator.document import (
    Affidavit, Article, Attestation, Disclaimer, ItemList, LetteredList,
    Paragraph, Preamble, Separator, SignatureBlock, SignatureLine,
    StructuredDocument, Title, WitnessBlock,
)
from will_generator.form_data import FormData, build_form_data
from will_generator.jurisdictions import JurisdictionRule, is_known_jurisdiction, lookup
from will_generator.numbering import letter_label, number_articles
from will_generator.utils import or_placeholder, to_words


NOTICE_UNSUPPORTED = 'jurisdiction_unsupported'
NOTICE_DEFAULTED = 'jurisdiction_defaulted'
NOTICE_RESIDUARY_FALLBACK = 'residuary_fallback'

RESIDUARY_REVIEW_NOTE = (
    '[NOTE: The distribution settings in this will may be incomplete. Please review '
    'the Estate Distribution section to ensure your wishes are properly specified.]'
)

BLANK_NAME = '_________________________'
EXECUTION_DATE = '_____ day of _________________, 20_____'


@dataclass(frozen=True)
class AssemblyContext:
    """Read-only view of the inputs shared by every clause generator."""
    form: FormData
    rule: JurisdictionRule

    @property
    def state_name(self) -> str:
        return self.rule.name

    @property
    def state_full_name(self) -> str:
        return self.rule.full_name

    @property
    def county_label(self) -> str:
        return self.rule.county_label

    @property
    def witnesses(self) -> int:
        return self.rule.witnesses

    @property
    def testator_name(self) -> str:
        return or_placeholder(self.form.testator.full_name, '[NAME]')

    @property
    def county(self) -> str:
        return or_placeholder(self.form.testator.county, '[COUNTY]')

    @property
    def spouse_name(self) -> str:
        return or_placeholder(self.form.testator.spouse_name, '[SPOUSE]')

    @property
    def per_stirpes_suffix(self) -> str:
        return ' (per stirpes)' if self.form.residuary_estate.per_stirpes else ''


def _with_relationship(name: str, relationship: str, template: str = ', my {},') -> str:
    relationship = (relationship or '').strip()
    return name + (template.format(relationship) if relationship else '')


def _in_parens(value: str) -> str:
    value = (value or '').strip()
    return f' ({value})' if value else ''


# --- Section generators ---

def _render_title(ctx: AssemblyContext):
    return Title(
        heading='LAST WILL AND TESTAMENT',
        subheading=f'OF {ctx.testator_name.upper()}',
    )


def _render_preamble(ctx: AssemblyContext):
    testator = ctx.form.testator
    text = (
        f'I, {ctx.testator_name}, a resident of {ctx.county} {ctx.county_label}, {ctx.state_name}, '
        f'residing at {or_placeholder(testator.address, "[ADDRESS]")}, '
        f'{or_placeholder(testator.city, "[CITY]")}, {ctx.state_name} '
        f'{or_placeholder(testator.zip, "[ZIP]")}, '
        f'being of sound mind and disposing memory, do hereby declare this to be my Last Will '
        f'and Testament, and I hereby revoke all wills and codicils previously made by me.'
    )
    return Preamble(content=(Paragraph(text),))


def _render_family_declaration(ctx: AssemblyContext):
    testator = ctx.form.testator
    children = ctx.form.children
    content: List[Any] = []

    marital_text = {
        'married': f'I am married to {ctx.spouse_name}, hereinafter referred to as "my spouse."',
        'divorced': 'I am divorced and currently unmarried.',
        'widowed': 'I am widowed and currently unmarried.',
    }.get(testator.marital_status, 'I am not currently married.')
    content.append(Paragraph(marital_text))

    if children:
        noun = 'child' if len(children) == 1 else 'children'
        content.append(Paragraph(f'I have the following {noun}:'))
        suffixes = {'adopted': ' (legally adopted)', 'stepchild': ' (stepchild)'}
        content.append(ItemList(tuple(
            or_placeholder(child.name, '[NAME]') + suffixes.get(child.relationship, '')
            for child in children
        )))
    else:
        content.append(Paragraph('I have no children.'))

    return Article(title='FAMILY DECLARATION', content=tuple(content))


EXECUTOR_POWERS = (
    'Take possession of, manage, and control all estate property;',
    'Sell, exchange, or invest estate property, for cash or on credit;',
    'Borrow money and use estate property as security;',
    'Lease property for any term;',
    'Divide and distribute property in cash or in kind;',
    'Settle claims for or against my estate;',
    'Execute deeds, contracts, and other documents;',
    'Employ attorneys, accountants, and other professionals;',
    'Pay debts, taxes, and administration expenses;',
    'Distribute my estate according to this Will.',
)


def _render_personal_representative(ctx: AssemblyContext):
    executor = ctx.form.executor
    name = or_placeholder(executor.name, '[EXECUTOR]')
    content: List[Any] = [
        Paragraph(
            f'I appoint {_with_relationship(name, executor.relationship)} '
            f'as the Personal Representative of my estate.'
        )
    ]

    if executor.alternate_name.strip():
        alternate = _with_relationship(executor.alternate_name.strip(), executor.alternate_relationship)
        content.append(Paragraph(
            f'If {name} is unable or unwilling to serve, I appoint {alternate} '
            f'as alternate Personal Representative.'
        ))

    if executor.bond_required:
        content.append(Paragraph('My Personal Representative shall be required to post a bond.'))
    else:
        content.append(Paragraph(
            'To the extent permitted by law, I request that no bond or other security be '
            'required of my Personal Representative.'
        ))

    content.append(Paragraph(
        f'To the extent permitted by the laws of the {ctx.state_full_name}, I authorize my '
        f'Personal Representative to administer my estate independently, without court '
        f'supervision. After probate of this Will, no further court proceedings shall be '
        f'required except as required by law.'
    ))
    content.append(Paragraph(
        f'I grant my Personal Representative all powers conferred by the laws of the '
        f'{ctx.state_full_name}, including the power to:'
    ))
    content.append(LetteredList(EXECUTOR_POWERS))
    content.append(Paragraph(
        'The term "Personal Representative" as used in this Will includes any executor, '
        'administrator, or personal representative serving at any time.'
    ))

    return Article(title='PERSONAL REPRESENTATIVE', content=tuple(content))


def _render_guardian(ctx: AssemblyContext):
    guardian = ctx.form.guardian
    name = or_placeholder(guardian.name, '[GUARDIAN]')
    content: List[Any] = [
        Paragraph(
            f'If at my death I have any minor children and their surviving parent is deceased, '
            f'legally incapacitated, has had parental rights terminated, or is otherwise unable '
            f'or unwilling to care for them, I appoint '
            f'{_with_relationship(name, guardian.relationship)} '
            f'as guardian of the person of my minor children.'
        )
    ]
    if guardian.alternate_name.strip():
        alternate = _with_relationship(guardian.alternate_name.strip(), guardian.alternate_relationship)
        content.append(Paragraph(
            f'If {name} is unable or unwilling to serve, I appoint {alternate} as alternate guardian.'
        ))
    return Article(title='GUARDIAN OF MINOR CHILDREN', content=tuple(content))


def _render_tangible_property(ctx: AssemblyContext):
    return Article(title='TANGIBLE PERSONAL PROPERTY', content=(
        Paragraph(
            'All tangible personal property I own at my death, including furniture, household '
            'items, jewelry, clothing, automobiles, and personal effects, not otherwise disposed '
            'of by this Will, shall be distributed as part of my residuary estate.'
        ),
    ))


def _render_specific_gifts(ctx: AssemblyContext):
    content: List[Any] = [Paragraph('I make the following specific gifts:')]
    for index, gift in enumerate(ctx.form.specific_gifts, start=1):
        beneficiary = or_placeholder(gift.beneficiary, '[BENEFICIARY]')
        content.append(Paragraph(
            f'{index}. I give {or_placeholder(gift.description, "[DESCRIPTION]")} to '
            f'{beneficiary}{_in_parens(gift.beneficiary_relationship)}.'
        ))
        if gift.alternative_beneficiary.strip():
            content.append(Paragraph(
                f'If {beneficiary} does not survive me, this gift shall pass to '
                f'{gift.alternative_beneficiary.strip()}.',
                indent=True,
            ))
        if gift.conditions.strip():
            content.append(Paragraph(f'Conditions: {gift.conditions.strip()}', indent=True))
    return Article(title='SPECIFIC GIFTS', content=tuple(content))


def _render_real_property(ctx: AssemblyContext):
    content: List[Any] = []
    for index, item in enumerate(ctx.form.real_property.items, start=1):
        content.append(Paragraph(
            f'{index}. The property located at {or_placeholder(item.address, "[ADDRESS]")}'
            f'{_in_parens(item.description)} shall pass to '
            f'{or_placeholder(item.beneficiary, "[BENEFICIARY]")}.'
        ))
        if item.instructions.strip():
            content.append(Paragraph(f'Special instructions: {item.instructions.strip()}', indent=True))
    return Article(title='REAL PROPERTY', content=tuple(content))


def residuary_distribution(ctx: AssemblyContext) -> Optional[List[Any]]:
    """
    Content for clause (a) of the residuary article.

    Returns None when the distribution type is unset or inconsistent with
    the testator's marital status and children, which triggers the
    intestacy fallback.
    """
    form = ctx.form
    estate = form.residuary_estate
    married = form.testator.is_married
    distribution = estate.distribution_type

    if distribution == 'spouse' and married:
        return [Paragraph(f'(a) To my spouse, {ctx.spouse_name}.')]

    if distribution == 'children' and form.has_children:
        return [Paragraph(f'(a) To my children, in equal shares{ctx.per_stirpes_suffix}.')]

    if distribution == 'split' and married and form.has_children:
        return [Paragraph(
            f'(a) {to_words(estate.spouse_share)} percent to my spouse, {ctx.spouse_name}, '
            f'and {to_words(estate.children_share)} percent to my children, in equal shares'
            f'{ctx.per_stirpes_suffix}.'
        )]

    if distribution == 'custom' and estate.custom_beneficiaries:
        return [
            Paragraph('(a) To the following beneficiaries:'),
            ItemList(tuple(
                f'{to_words(b.share)} percent to {or_placeholder(b.name, "[BENEFICIARY]")}'
                f'{_in_parens(b.relationship)}'
                for b in estate.custom_beneficiaries
            ), indent=True),
        ]

    return None


def _render_residuary_estate(ctx: AssemblyContext):
    content: List[Any] = [Paragraph(
        'I give all the rest of my estate, both real and personal, that I own at the time of '
        'my death, including any property over which I may have a power of appointment '
        '(my "residuary estate"), as follows:'
    )]

    distribution = residuary_distribution(ctx)
    if distribution is not None:
        content.extend(distribution)
        content.append(Paragraph(
            f'(b) If any of the beneficiaries named above shall not survive me, decline the gift, '
            f'or are no longer in existence (together referred to as "predeceased"), then their '
            f'share shall pass to the surviving children of the predeceased beneficiary, if any, '
            f'in equal shares{ctx.per_stirpes_suffix}. If the predeceased beneficiary has no '
            f'surviving children, then their share shall pass equally to the other beneficiaries '
            f'named above who survive me.'
        ))
        content.append(Paragraph(
            f'(c) If none of the beneficiaries described in clauses (a) and (b) above shall '
            f'survive me, decline the gift, or are no longer in existence, then I give my '
            f'residuary estate to those who would take from me as if I were then to die without '
            f'a will, unmarried, and the absolute owner of my residuary estate, and a resident '
            f'of the {ctx.state_full_name}.'
        ))
    else:
        content.append(Paragraph(
            f'To be distributed according to the intestacy laws of the {ctx.state_full_name}.'
        ))
        content.append(Paragraph(RESIDUARY_REVIEW_NOTE))

    return Article(title='RESIDUARY ESTATE', content=tuple(content))


def _render_survivorship(ctx: AssemblyContext):
    days = to_words(ctx.form.survivorship_period)
    return Article(title='SURVIVORSHIP REQUIREMENT', content=(
        Paragraph(
            f'A beneficiary must survive me by {days} days to receive any benefit under this '
            f'Will. A beneficiary who does not survive me by that period is treated as having '
            f'predeceased me.'
        ),
    ))


def _render_distributions_to_minors(ctx: AssemblyContext):
    options = (
        'Directly to the beneficiary;',
        "To the beneficiary's legal guardian or conservator;",
        'To a parent or person with whom the beneficiary resides;',
        f'If the beneficiary is under {to_words(ctx.rule.utma_age)} years of age, to a '
        f'custodian under the Uniform Transfers to Minors Act;',
        "By spending funds directly for the beneficiary's benefit.",
    )
    return Article(title='DISTRIBUTIONS TO MINORS OR INCAPACITATED BENEFICIARIES', content=(
        Paragraph(
            "If any beneficiary is a minor, legally incapacitated, or in my Personal "
            "Representative's judgment unable to manage their own affairs, my Personal "
            "Representative may distribute that beneficiary's share in any of the following ways:"
        ),
        LetteredList(options),
        Paragraph('Any receipt from such distribution is a complete discharge to my Personal Representative.'),
    ))


SOCIAL_MEDIA_TEXT = {'delete': 'Delete', 'memorialize': 'Memorialize (if available)'}
EMAIL_TEXT = {'delete': 'Delete', 'archive': 'Archive contents then delete'}
CLOUD_STORAGE_TEXT = {'delete': 'Delete', 'download': 'Download contents and distribute'}


def _render_digital_assets(ctx: AssemblyContext):
    assets = ctx.form.digital_assets
    content: List[Any] = [Paragraph(
        f'Pursuant to the {ctx.rule.digital_assets_act}, I authorize my Personal Representative '
        f'to access, manage, and dispose of my digital assets.'
    )]

    if assets.fiduciary.strip():
        content.append(Paragraph(
            f'I specifically authorize {assets.fiduciary.strip()} to serve as my digital fiduciary '
            f'with authority to access my digital accounts and assets. The digital fiduciary shall '
            f'act under the general supervision of my Personal Representative and shall coordinate '
            f'with my Personal Representative regarding any digital assets of financial value.'
        ))

    content.append(Paragraph('Instructions for digital assets:'))

    instructions = []
    if assets.social_media:
        instructions.append(
            f'Social media accounts: {SOCIAL_MEDIA_TEXT.get(assets.social_media, "Transfer to fiduciary")}'
        )
    if assets.email:
        instructions.append(
            f'Email accounts: {EMAIL_TEXT.get(assets.email, "Transfer access to fiduciary")}'
        )
    if assets.cloud_storage:
        instructions.append(
            f'Cloud storage: {CLOUD_STORAGE_TEXT.get(assets.cloud_storage, "Transfer to fiduciary")}'
        )
    if instructions:
        content.append(ItemList(tuple(instructions)))

    if assets.cryptocurrency.strip():
        content.append(Paragraph(f'Cryptocurrency/Digital Wallets: {assets.cryptocurrency.strip()}'))
    if assets.password_manager.strip():
        content.append(Paragraph(f'Access Information: {assets.password_manager.strip()}'))
    if assets.instructions.strip():
        content.append(Paragraph(f'Additional Instructions: {assets.instructions.strip()}'))

    return Article(title='DIGITAL ASSETS', content=tuple(content))


def _render_pet_care(ctx: AssemblyContext):
    content: List[Any] = []
    for index, pet in enumerate(ctx.form.pets.items, start=1):
        caretaker = or_placeholder(pet.caretaker, '[CARETAKER]')
        named = f' named {pet.name.strip()}' if pet.name.strip() else ''
        content.append(Paragraph(f'{index}. My {pet.type.strip() or "pet"}{named}:'))
        content.append(Paragraph(f'I designate {caretaker} as the caretaker.', indent=True))
        if pet.alternate_caretaker.strip():
            content.append(Paragraph(
                f'If {caretaker} is unable to serve, I designate {pet.alternate_caretaker.strip()} '
                f'as alternate.',
                indent=True,
            ))
        if pet.funds.strip():
            content.append(Paragraph(f'I set aside {pet.funds.strip()} for the care of this pet.', indent=True))
        if pet.instructions.strip():
            content.append(Paragraph(f'Care instructions: {pet.instructions.strip()}', indent=True))

    content.append(Paragraph(
        'These pet care provisions are expressions of my wishes. I request that my Personal '
        'Representative and the designated caretakers honor these wishes to the extent '
        'practicable. The designated caretaker is not legally obligated to accept '
        'responsibility for any pet.'
    ))
    return Article(title='PET CARE PROVISIONS', content=tuple(content))


DISPOSITION_TEXT = {
    'burial': 'traditional burial',
    'cremation': 'cremation',
    'green': 'green/natural burial',
    'donation': 'donation of my body to science',
}

SERVICE_TEXT = {
    'traditional': 'a traditional funeral service',
    'memorial': 'a memorial service',
    'celebration': 'a celebration of life',
    'private': 'a private family-only service',
    'none': 'no formal service',
}


def _render_funeral_wishes(ctx: AssemblyContext):
    funeral = ctx.form.funeral
    content: List[Any] = [
        Paragraph('I express the following wishes regarding my funeral and final disposition:')
    ]

    wishes = []
    if funeral.preference:
        wishes.append(f'Disposition: I prefer {DISPOSITION_TEXT.get(funeral.preference, funeral.preference)}')
    if funeral.service_type:
        wishes.append(f'Service: I request {SERVICE_TEXT.get(funeral.service_type, funeral.service_type)}')
    if funeral.location.strip():
        wishes.append(f'Location: {funeral.location.strip()}')
    if funeral.memorial_donations.strip():
        wishes.append(f'Memorial donations: {funeral.memorial_donations.strip()}')
    if funeral.pre_paid_arrangements and funeral.pre_paid_details.strip():
        wishes.append(f'Pre-paid arrangements: {funeral.pre_paid_details.strip()}')
    if wishes:
        content.append(ItemList(tuple(wishes)))

    if funeral.additional_wishes.strip():
        content.append(Paragraph(f'Additional wishes: {funeral.additional_wishes.strip()}'))

    content.append(Paragraph(
        'These wishes are expressions of my desires and are not legally binding. I request '
        'that my Personal Representative and family honor these wishes to the extent practicable.'
    ))
    return Article(title='FUNERAL AND BURIAL WISHES', content=tuple(content))


def _render_debts_and_taxes(ctx: AssemblyContext):
    debts = ctx.form.debts_and_taxes
    if not debts.include:
        return Article(title='DEBTS AND EXPENSES', content=(
            Paragraph(
                'I direct my Personal Representative to pay all of my legally enforceable debts, '
                'funeral expenses, and costs of administration from my residuary estate.'
            ),
        ))

    content: List[Any] = []
    if debts.payment_order == 'proportional':
        content.append(Paragraph(
            'All of my legally enforceable debts, funeral expenses, costs of administration, '
            'and any applicable taxes shall be paid proportionally from all assets of my estate.'
        ))
    elif debts.payment_order == 'specific':
        content.append(Paragraph('My debts, expenses, and taxes shall be paid as follows:'))
        if debts.specific_instructions.strip():
            content.append(Paragraph(debts.specific_instructions.strip()))
    else:
        content.append(Paragraph(
            'All of my legally enforceable debts, funeral expenses, costs of administration, '
            'and any applicable taxes shall be paid from my residuary estate before distribution.'
        ))
    return Article(title='DEBTS AND TAXES', content=tuple(content))


def _render_disinheritance(ctx: AssemblyContext):
    content: List[Any] = [
        Paragraph('I intentionally omit the following persons from any share of my estate:')
    ]
    for index, person in enumerate(ctx.form.disinheritance.persons, start=1):
        content.append(Paragraph(
            f'{index}. {or_placeholder(person.name, "[NAME]")}{_in_parens(person.relationship)} '
            f'shall receive no benefit from my estate.'
        ))
        if person.reason.strip():
            content.append(Paragraph(f'Reason: {person.reason.strip()}', indent=True))

    if ctx.form.is_disinheriting_spouse:
        content.append(Paragraph(
            f'I am aware that the laws of the {ctx.state_full_name} may provide a surviving spouse '
            f'with an elective share of the estate regardless of the provisions of this Will. '
            f'This disinheritance is made with full knowledge that it may be subject to the '
            f'statutory rights of my surviving spouse under applicable law.'
        ))

    content.append(Paragraph('This omission is intentional and not made by accident or mistake.'))
    return Article(title='DISINHERITANCE', content=tuple(content))


def _render_no_contest(ctx: AssemblyContext):
    return Article(title='NO CONTEST CLAUSE', content=(
        Paragraph(
            "If any beneficiary contests this Will or any of its provisions, that beneficiary's "
            "share is revoked and distributed as if that beneficiary had predeceased me without "
            "descendants."
        ),
        Paragraph(
            'Note: No-contest clause enforceability varies by state. This clause is enforced '
            'to the fullest extent permitted by law.'
        ),
    ))


def _render_simultaneous_death(ctx: AssemblyContext):
    return Article(title='SIMULTANEOUS DEATH', content=(
        Paragraph(
            f'If any beneficiary and I die simultaneously, or if it cannot be determined who died '
            f'first, that beneficiary is treated as having predeceased me. This applies to all '
            f'beneficiaries, including my spouse, under the {ctx.rule.simultaneous_death_act}.'
        ),
    ))


def _render_tax_apportionment(ctx: AssemblyContext):
    return Article(title='TAX APPORTIONMENT', content=(
        Paragraph(
            'All estate, inheritance, and death taxes payable because of my death shall be paid '
            'from my residuary estate as an administration expense. No beneficiary shall be '
            'required to reimburse the estate for taxes on property they receive, including '
            'non-probate assets.'
        ),
    ))


def _render_lapsed_gifts(ctx: AssemblyContext):
    return Article(title='LAPSED GIFTS', content=(
        Paragraph(
            f'If any specific gift fails because the beneficiary predeceased me, disclaimed the '
            f'gift, or the property no longer exists, the gift becomes part of my residuary '
            f'estate. However, if the beneficiary is my descendant, {ctx.state_name}\'s anti-lapse '
            f'statute ({ctx.rule.anti_lapse_statute}) applies.'
        ),
    ))


def _render_custom_provisions(ctx: AssemblyContext):
    return [
        Article(
            title=(provision.title.strip() or 'CUSTOM PROVISION').upper(),
            content=(Paragraph(or_placeholder(provision.content, '[CONTENT]')),),
            clause_id=f'{ClauseId.CUSTOM_PROVISIONS.value}:{provision.id}',
        )
        for provision in ctx.form.custom_provisions.items
    ]


def _render_general_provisions(ctx: AssemblyContext):
    state = ctx.state_name
    provisions = [
        f'Governing Law: This Will is governed by the laws of the {ctx.state_full_name}.',
        'Severability: If any provision of this Will is held invalid or unenforceable, the '
        'remaining provisions shall continue in full force and effect.',
        'Headings: Article headings are for convenience only and do not affect interpretation.',
        'Gender and Number: Words of any gender or number include all genders and numbers when '
        'the context requires.',
        'Definitions: As used in this Will, "descendants" means children, grandchildren, and more '
        'remote descendants, and "per stirpes" means that if any beneficiary predeceases me, that '
        "beneficiary's share passes to their descendants by right of representation.",
    ]

    if ctx.rule.homestead_provisions:
        provisions.append(
            f'{state} Homestead: I am aware that {state} law provides special protections for '
            f'homestead property. If I own homestead property at my death, such property shall '
            f'pass in accordance with {state} law, which may supersede the provisions of this '
            f'Will regarding such property.'
        )
    if ctx.rule.community_property:
        provisions.append(
            f'Community Property: I am aware that {state} is a community property state. '
            f'Property acquired during marriage may be subject to community property laws, which '
            f'may affect the disposition of certain assets under this Will.'
        )
    if ctx.rule.marital_property:
        provisions.append(
            f'Marital Property: I am aware that {state} is a marital property state. Property '
            f'acquired during marriage may be subject to marital property laws, which may affect '
            f'the disposition of certain assets under this Will.'
        )

    return Article(title='GENERAL PROVISIONS', content=tuple(
        Paragraph(f'{letter_label(i).upper()}. {text}') for i, text in enumerate(provisions)
    ))


def _render_signature(ctx: AssemblyContext):
    return SignatureBlock(content=(
        Separator(),
        Paragraph(
            f'IN WITNESS WHEREOF, I have signed this Last Will and Testament on this '
            f'{EXECUTION_DATE}, at {ctx.county} {ctx.county_label}, {ctx.state_name}.'
        ),
        SignatureLine(f'{ctx.testator_name}, Testator'),
    ))


def _render_attestation(ctx: AssemblyContext):
    content: List[Any] = [
        Paragraph(
            "We, the undersigned witnesses, at the Testator's request, sign our names to this "
            "instrument, being first duly sworn, and do hereby declare to any authority that may "
            "be concerned that the Testator signed and executed this instrument as the Testator's "
            "Last Will and Testament, and that the Testator signed it willingly, and that each of "
            "us, in the presence and hearing of the Testator, hereby signs this Will as witness to "
            "the Testator's signing."
        ),
        Paragraph(
            'We further declare that to the best of our knowledge the Testator is eighteen years '
            'of age or older, of sound mind, and under no constraint or undue influence.'
        ),
    ]
    content.extend(WitnessBlock(index=i) for i in range(1, ctx.witnesses + 1))
    return Attestation(heading='ATTESTATION OF WITNESSES', content=tuple(content))


def _render_affidavit(ctx: AssemblyContext):
    witness_names = ', and '.join([BLANK_NAME] * ctx.witnesses)
    content: List[Any] = []

    if not ctx.rule.self_proving_affidavit:
        content.append(Paragraph(
            f'NOTE: The {ctx.state_full_name} does not provide a statutory self-proving '
            f'affidavit. This affidavit may still serve as evidence of due execution, but the '
            f'witnesses may be required to testify when this Will is offered for probate.'
        ))

    content.append(Paragraph(ctx.state_full_name.upper()))
    content.append(Paragraph(f'{ctx.county_label.upper()} OF {ctx.county.upper()}'))
    content.append(Paragraph(
        f'We, {ctx.testator_name}, {witness_names}, the Testator and the witnesses, respectively, '
        f'whose names are signed to the foregoing instrument, being first duly sworn, do hereby '
        f'declare to the undersigned authority that the Testator signed and executed the '
        f"instrument as the Testator's Last Will and that the Testator signed it willingly, or "
        f'directed another to sign for the Testator, and that each of the witnesses, in the '
        f'presence and at the request of the Testator, signed the Will as witness in the '
        f"Testator's presence and in the presence of each other, and that the Testator was at "
        f'that time eighteen years of age or older, of sound mind, and under no constraint or '
        f'undue influence.'
    ))
    content.append(SignatureLine(f'{ctx.testator_name}, Testator'))
    content.extend(
        SignatureLine(f'Witness {i}', role='witness') for i in range(1, ctx.witnesses + 1)
    )
    content.append(Paragraph(
        f'Subscribed, sworn to and acknowledged before me by {ctx.testator_name}, the Testator, '
        f'and subscribed and sworn to before me by {witness_names}, the witnesses, this '
        f'{EXECUTION_DATE}.'
    ))
    content.append(SignatureLine(f'Notary Public, {ctx.state_full_name}', role='notary'))
    content.append(Paragraph('My Commission Expires: ___________________'))
    content.append(Paragraph('[NOTARY SEAL]'))

    return Affidavit(
        heading='SELF-PROVING AFFIDAVIT',
        subheading=f'(Pursuant to {ctx.rule.affidavit_statute})',
        content=tuple(content),
    )


def _render_disclaimer(ctx: AssemblyContext):
    return Disclaimer(heading='IMPORTANT NOTICE', content=(
        Paragraph(
            'This document was generated using an online template service and is provided for '
            'informational purposes only. It does not constitute legal advice and should not be '
            'relied upon without review by a licensed attorney in your state of residence. Estate '
            'planning laws vary by state, and a licensed attorney can ensure this document '
            'complies with all applicable requirements for validity and execution.'
        ),
    ))


GENERATORS: Dict[ClauseId, Callable[[AssemblyContext], Any]] = {
    ClauseId.TITLE: _render_title,
    ClauseId.PREAMBLE: _render_preamble,
    ClauseId.FAMILY_DECLARATION: _render_family_declaration,
    ClauseId.PERSONAL_REPRESENTATIVE: _render_personal_representative,
    ClauseId.GUARDIAN: _render_guardian,
    ClauseId.TANGIBLE_PROPERTY: _render_tangible_property,
    ClauseId.SPECIFIC_GIFTS: _render_specific_gifts,
    ClauseId.REAL_PROPERTY: _render_real_property,
    ClauseId.RESIDUARY_ESTATE: _render_residuary_estate,
    ClauseId.SURVIVORSHIP: _render_survivorship,
    ClauseId.DISTRIBUTIONS_TO_MINORS: _render_distributions_to_minors,
    ClauseId.DIGITAL_ASSETS: _render_digital_assets,
    ClauseId.PET_CARE: _render_pet_care,
    ClauseId.FUNERAL_WISHES: _render_funeral_wishes,
    ClauseId.DEBTS_AND_TAXES: _render_debts_and_taxes,
    ClauseId.DISINHERITANCE: _render_disinheritance,
    ClauseId.NO_CONTEST: _render_no_contest,
    ClauseId.SIMULTANEOUS_DEATH: _render_simultaneous_death,
    ClauseId.TAX_APPORTIONMENT: _render_tax_apportionment,
    ClauseId.LAPSED_GIFTS: _render_lapsed_gifts,
    ClauseId.CUSTOM_PROVISIONS: _render_custom_provisions,
    ClauseId.GENERAL_PROVISIONS: _render_general_provisions,
    ClauseId.SIGNATURE: _render_signature,
    ClauseId.ATTESTATION: _render_attestation,
    ClauseId.AFFIDAVIT: _render_affidavit,
    ClauseId.DISCLAIMER: _render_disclaimer,
}


def _generate(clause_id: ClauseId, ctx: AssemblyContext) -> Sequence:
    generated = GENERATORS[clause_id](ctx)
    if isinstance(generated, list):
        return generated
    if isinstance(generated, Article) and not generated.clause_id:
        return [replace(generated, clause_id=clause_id.value)]
    return [generated]


def assemble(form_data: Any, rule: Optional[JurisdictionRule] = None) -> StructuredDocument:
    """
    Assemble the will as a StructuredDocument.

    Args:
        form_data: FormData or the raw camelCase payload
        rule: Jurisdiction to apply; resolved from the testator's residence
              state when omitted

    Returns:
        A new, fully numbered StructuredDocument
    """
    form = build_form_data(form_data)
    residence = form.testator.residence_state
    defaulted = False
    if rule is None:
        rule = lookup(residence)
        defaulted = not is_known_jurisdiction(residence)

    ctx = AssemblyContext(form=form, rule=rule)

    sections = []
    for clause_id in select_clauses(form):
        sections.extend(_generate(clause_id, ctx))

    notices = []
    if not rule.supported:
        notices.append(NOTICE_UNSUPPORTED)
    if defaulted:
        notices.append(NOTICE_DEFAULTED)
    if residuary_distribution(ctx) is None:
        notices.append(NOTICE_RESIDUARY_FALLBACK)

    return StructuredDocument(
        sections=number_articles(sections),
        jurisdiction_code=rule.code,
        jurisdiction_name=rule.name,
        witness_count=rule.witnesses,
        generation_ready=rule.supported and not defaulted,
        jurisdiction_defaulted=defaulted,
        notices=tuple(notices),
    )
