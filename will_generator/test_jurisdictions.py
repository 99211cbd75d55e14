"""
Unit tests for the jurisdiction rule table.
"""

import logging

import pytest

from will_generator.jurisdictions import (
    JURISDICTIONS, COMMUNITY_PROPERTY_STATES, MARITAL_PROPERTY_STATES,
    THREE_WITNESS_STATES, UNSUPPORTED_STATES, DEFAULT_JURISDICTION_CODE,
    JurisdictionConfigError, JurisdictionRule, is_known_jurisdiction,
    list_jurisdictions, lookup, normalize_code
)


class TestRuleTable:
    def test_has_fifty_states_and_dc(self):
        assert len(JURISDICTIONS) == 51
        assert 'DC' in JURISDICTIONS

    @pytest.mark.parametrize('code', sorted(JURISDICTIONS))
    def test_every_record_is_complete(self, code):
        rule = lookup(code)
        assert rule.code == code
        assert rule.witnesses in (2, 3)
        assert rule.affidavit_statute.strip()
        assert rule.anti_lapse_statute.strip()
        assert rule.simultaneous_death_act.strip()
        assert rule.digital_assets_act.strip()
        assert 18 <= rule.utma_age <= 25

    def test_three_witness_states(self):
        assert THREE_WITNESS_STATES == ('SC', 'VT')

    def test_community_property_states(self):
        assert COMMUNITY_PROPERTY_STATES == ('AZ', 'CA', 'ID', 'LA', 'NM', 'NV', 'TX', 'WA')

    def test_wisconsin_is_marital_property(self):
        assert MARITAL_PROPERTY_STATES == ('WI',)

    def test_only_louisiana_unsupported(self):
        assert UNSUPPORTED_STATES == ('LA',)
        assert JURISDICTIONS['LA'].county_label == 'Parish'

    def test_homestead_states(self):
        homestead = sorted(c for c, r in JURISDICTIONS.items() if r.homestead_provisions)
        assert homestead == ['FL', 'TX']

    def test_commonwealth_names(self):
        for code in ('KY', 'MA', 'PA', 'VA'):
            assert JURISDICTIONS[code].full_name.startswith('Commonwealth of ')
        assert JURISDICTIONS['FL'].full_name == 'State of Florida'
        assert JURISDICTIONS['DC'].full_name == 'District of Columbia'

    def test_florida_citations(self):
        rule = JURISDICTIONS['FL']
        assert rule.affidavit_statute == 'Fla. Stat. § 732.503'
        assert rule.anti_lapse_statute == 'Fla. Stat. § 732.603'

    def test_records_are_immutable(self):
        with pytest.raises(AttributeError):
            JURISDICTIONS['FL'].witnesses = 3

    def test_to_dict(self):
        data = JURISDICTIONS['SC'].to_dict()
        assert data['code'] == 'SC'
        assert data['witnesses'] == 3
        assert data['supported'] is True

    def test_list_sorted_by_code(self):
        codes = [rule.code for rule in list_jurisdictions()]
        assert codes == sorted(codes)
        assert len(codes) == 51


class TestMalformedEntries:
    def _rule(self, **overrides):
        values = dict(
            code='ZZ', name='Test', full_name='State of Test', witnesses=2,
            self_proving_affidavit=True, affidavit_statute='T.S. 1',
            anti_lapse_statute='T.S. 2', simultaneous_death_act='Act',
            digital_assets_act='Act'
        )
        values.update(overrides)
        return JurisdictionRule(**values)

    def test_valid_entry(self):
        assert self._rule().code == 'ZZ'

    def test_bad_witness_count(self):
        with pytest.raises(JurisdictionConfigError):
            self._rule(witnesses=1)

    def test_missing_citation(self):
        with pytest.raises(JurisdictionConfigError):
            self._rule(anti_lapse_statute='  ')

    def test_bad_code(self):
        with pytest.raises(JurisdictionConfigError):
            self._rule(code='zz')

    def test_config_error_is_value_error(self):
        assert issubclass(JurisdictionConfigError, ValueError)


class TestLookup:
    def test_case_and_whitespace_insensitive(self):
        assert lookup(' tx ').code == 'TX'
        assert normalize_code(' ny') == 'NY'

    def test_unknown_code_falls_back_to_default(self, caplog):
        with caplog.at_level(logging.WARNING, logger='will_generator.jurisdictions'):
            rule = lookup('XX')
        assert rule.code == DEFAULT_JURISDICTION_CODE
        assert 'XX' in caplog.text

    @pytest.mark.parametrize('code', [None, '', 123, 'Florida'])
    def test_missing_or_invalid_code_falls_back(self, code):
        assert lookup(code).code == DEFAULT_JURISDICTION_CODE
        assert is_known_jurisdiction(code) is False

    def test_known_codes(self):
        assert is_known_jurisdiction('la') is True
        assert is_known_jurisdiction('PR') is False
