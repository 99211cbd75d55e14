"""
Unit tests for clause logic module.
"""

import pytest
from will_generator.clause_logic import (
    CLAUSE_ORDER, CLAUSE_RULES, ClauseId, get_clause_title,
    get_clauses_summary, select_clauses, validate_clause_order
)
from will_generator.form_data import FormData, build_form_data


ALWAYS_INCLUDED = [
    ClauseId.TITLE, ClauseId.PREAMBLE, ClauseId.FAMILY_DECLARATION,
    ClauseId.PERSONAL_REPRESENTATIVE, ClauseId.TANGIBLE_PROPERTY,
    ClauseId.RESIDUARY_ESTATE, ClauseId.SURVIVORSHIP,
    ClauseId.DISTRIBUTIONS_TO_MINORS, ClauseId.DEBTS_AND_TAXES,
    ClauseId.SIMULTANEOUS_DEATH, ClauseId.TAX_APPORTIONMENT,
    ClauseId.LAPSED_GIFTS, ClauseId.GENERAL_PROVISIONS, ClauseId.SIGNATURE,
    ClauseId.ATTESTATION, ClauseId.AFFIDAVIT, ClauseId.DISCLAIMER,
]


class TestClauseSelection:
    def test_always_included_clauses(self):
        """Empty questionnaire still yields every unconditional clause."""
        clauses = select_clauses(FormData())
        for clause in ALWAYS_INCLUDED:
            assert clause in clauses
        # no-contest defaults on
        assert ClauseId.NO_CONTEST in clauses

    def test_conditional_clauses_absent_by_default(self):
        clauses = select_clauses(FormData())
        for clause in (ClauseId.GUARDIAN, ClauseId.SPECIFIC_GIFTS, ClauseId.REAL_PROPERTY,
                       ClauseId.DIGITAL_ASSETS, ClauseId.PET_CARE, ClauseId.FUNERAL_WISHES,
                       ClauseId.DISINHERITANCE, ClauseId.CUSTOM_PROVISIONS):
            assert clause not in clauses

    def test_guardian_needs_minor_and_name(self):
        minor = {'children': [{'name': 'Kid', 'isMinor': True}]}
        assert ClauseId.GUARDIAN not in select_clauses(build_form_data(minor))

        minor['guardian'] = {'name': 'Aunt May'}
        assert ClauseId.GUARDIAN in select_clauses(build_form_data(minor))

        adult = {'children': [{'name': 'Kid', 'isMinor': False}], 'guardian': {'name': 'Aunt May'}}
        assert ClauseId.GUARDIAN not in select_clauses(build_form_data(adult))

    def test_digital_assets_flag(self):
        assert ClauseId.DIGITAL_ASSETS not in select_clauses(build_form_data({'digitalAssets': {'include': False}}))
        assert ClauseId.DIGITAL_ASSETS in select_clauses(build_form_data({'digitalAssets': {'include': True}}))

    @pytest.mark.parametrize('section, key, clause', [
        ('pets', 'items', ClauseId.PET_CARE),
        ('realProperty', 'items', ClauseId.REAL_PROPERTY),
        ('customProvisions', 'items', ClauseId.CUSTOM_PROVISIONS),
        ('disinheritance', 'persons', ClauseId.DISINHERITANCE),
    ])
    def test_sections_need_flag_and_items(self, section, key, clause):
        enabled_empty = {section: {'include': True, key: []}}
        assert clause not in select_clauses(build_form_data(enabled_empty))

        disabled = {section: {'include': False, key: [{'name': 'x'}]}}
        assert clause not in select_clauses(build_form_data(disabled))

        enabled = {section: {'include': True, key: [{'name': 'x'}]}}
        assert clause in select_clauses(build_form_data(enabled))

    def test_no_contest_can_be_disabled(self):
        assert ClauseId.NO_CONTEST not in select_clauses(build_form_data({'noContestClause': False}))

    def test_specific_gifts(self):
        form = build_form_data({'specificGifts': [{'description': 'Watch', 'beneficiary': 'Sam'}]})
        assert ClauseId.SPECIFIC_GIFTS in select_clauses(form)


class TestClauseOrder:
    def test_rules_follow_enum_order(self):
        assert CLAUSE_ORDER == list(ClauseId)
        assert len(CLAUSE_RULES) == 26

    def test_selection_is_ordered(self):
        form = build_form_data({
            'digitalAssets': {'include': True},
            'funeral': {'include': True},
            'specificGifts': [{'description': 'Watch'}],
        })
        assert validate_clause_order(select_clauses(form)) is True

    def test_out_of_order_rejected(self):
        assert validate_clause_order([ClauseId.PREAMBLE, ClauseId.TITLE]) is False

    def test_duplicates_rejected(self):
        assert validate_clause_order([ClauseId.TITLE, ClauseId.TITLE]) is False

    def test_disclaimer_last(self):
        assert select_clauses(FormData())[-1] == ClauseId.DISCLAIMER


class TestClauseTitles:
    def test_titles(self):
        assert get_clause_title(ClauseId.PERSONAL_REPRESENTATIVE) == 'Personal Representative'
        assert get_clause_title(ClauseId.AFFIDAVIT) == 'Self-Proving Affidavit'

    def test_every_clause_has_title(self):
        for clause in ClauseId:
            assert get_clause_title(clause)


class TestSummary:
    def test_selected_and_omitted_partition(self):
        summary = get_clauses_summary(FormData())
        assert summary['total_clauses'] == len(summary['selected'])
        assert set(summary['selected']) | set(summary['omitted']) == {c.value for c in ClauseId}
        assert not set(summary['selected']) & set(summary['omitted'])
        assert summary['rules']['guardian'] == 'Requires a minor child and a named guardian'
