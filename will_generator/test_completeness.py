"""
Unit tests for the completeness check.
"""

from will_generator.clause_renderer import assemble
from will_generator.completeness import completeness_errors, scan_for_placeholders
from will_generator.text_renderer import render_text


class TestScan:
    def test_finds_tokens_in_order(self):
        assert scan_for_placeholders('To [NAME] of [COUNTY], and [NAME].') == ['[NAME]', '[COUNTY]']

    def test_notary_seal_allowed(self):
        assert scan_for_placeholders('Stamp here: [NOTARY SEAL]') == []

    def test_ignores_mixed_case_brackets(self):
        assert scan_for_placeholders('[NOTE: please review] [a]') == []

    def test_empty(self):
        assert scan_for_placeholders('') == []
        assert scan_for_placeholders(None) == []


class TestCompletenessErrors:
    def test_complete_will(self, payload):
        assert completeness_errors(render_text(assemble(payload))) == {}

    def test_missing_county(self, payload):
        payload['testator']['county'] = ''
        errors = completeness_errors(render_text(assemble(payload)))
        assert errors == {
            'placeholders': (
                'Your will contains incomplete fields: [COUNTY]. '
                'Please go back and fill in all required information.'
            )
        }

    def test_missing_custom_share(self, payload):
        payload['residuaryEstate'] = {
            'distributionType': 'custom',
            'customBeneficiaries': [{'name': 'Pat', 'share': ''}],
        }
        assert '[NUMBER]' in completeness_errors(render_text(assemble(payload)))['placeholders']
