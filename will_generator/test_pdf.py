"""
Unit tests for PDF generation module.
"""

from datetime import datetime
from unittest import mock

import pytest
from reportlab.platypus import KeepTogether, PageBreak

from will_generator.clause_renderer import assemble
from will_generator.document import Article, ItemList, LetteredList, Paragraph
from will_generator.jurisdictions import JURISDICTIONS
from will_generator.pdf_generator import (
    PDFGenerationError, SignatureLineFlowable, WitnessBlockFlowable,
    _article_to_elements, _testator_name, build_story, content_fingerprint,
    create_styles, generate_pdf_with_footer, verify_pdf_integrity
)


TIMESTAMP = datetime(2026, 10, 18, 12, 0, 0)


def _flatten(story):
    flat = []
    for element in story:
        if isinstance(element, KeepTogether):
            flat.extend(_flatten(element._content))
        else:
            flat.append(element)
    return flat


class TestPDFStyles:
    def test_styles_created(self):
        styles = create_styles()
        for name in ('title', 'subtitle', 'article_heading', 'section_heading',
                     'normal', 'indented', 'bullet_item', 'lettered_item', 'disclaimer'):
            assert name in styles

    def test_body_font_is_times(self):
        assert create_styles()['normal'].fontName == 'Times-Roman'


class TestStory:
    def test_page_breaks_before_signature_and_affidavit(self, payload):
        story = build_story(assemble(payload))
        assert sum(1 for e in story if isinstance(e, PageBreak)) == 2

    def test_testator_signature_lines(self, payload):
        flat = _flatten(build_story(assemble(payload)))
        testator_lines = [
            e for e in flat if isinstance(e, SignatureLineFlowable) and e.role == 'testator'
        ]
        # Signature block and affidavit
        assert len(testator_lines) == 2
        assert testator_lines[0].label == 'Jane Q. Public, Testator'

    @pytest.mark.parametrize('code', ['FL', 'SC'])
    def test_witness_blocks(self, payload, code):
        payload['testator']['residenceState'] = code
        flat = _flatten(build_story(assemble(payload)))
        blocks = [e for e in flat if isinstance(e, WitnessBlockFlowable)]
        assert len(blocks) == JURISDICTIONS[code].witnesses
        assert blocks[0].labels[0] == 'Witness 1 Signature'

    def test_short_article_kept_together(self):
        article = Article('TAX APPORTIONMENT', (Paragraph('Taxes.'),), number=4)
        elements = _article_to_elements(article, create_styles())
        assert len(elements) == 1
        assert isinstance(elements[0], KeepTogether)

    def test_long_article_may_break(self):
        article = Article('RESIDUARY ESTATE', (
            Paragraph('I give the residue.'),
            LetteredList(('To my spouse.', 'To my children.')),
            ItemList(('one',)),
        ), number=5)
        elements = _article_to_elements(article, create_styles())
        # Heading stays with the first paragraph, the rest flows freely
        assert isinstance(elements[0], KeepTogether)
        assert len(elements) == 4

    def test_markup_is_escaped(self, payload):
        payload['testator']['fullName'] = 'Ann & <b>Bob</b>'
        document = assemble(payload)
        subtitle = build_story(document)[1]
        # Escaped tags survive as literal text instead of becoming bold markup
        assert '<B>' in subtitle.getPlainText()

    def test_testator_name_from_signature_block(self, payload):
        assert _testator_name(assemble(payload)) == 'Jane Q. Public'


class TestPDFGeneration:
    def test_generate_pdf(self, payload):
        pdf_bytes, pdf_hash = generate_pdf_with_footer(assemble(payload), TIMESTAMP)

        assert pdf_bytes[:4] == b'%PDF'
        assert len(pdf_hash) == 64  # SHA256 hex length
        assert verify_pdf_integrity(pdf_bytes, pdf_hash)

    def test_generate_full_pdf(self, payload):
        payload['children'].append({'name': 'Kid Public', 'isMinor': True})
        payload['guardian'] = {'name': 'Rob Public', 'relationship': 'brother'}
        payload['digitalAssets'] = {'include': True, 'fiduciary': 'Chris Tech'}
        payload['pets'] = {'include': True, 'items': [
            {'name': 'Rex', 'type': 'dog', 'caretaker': 'Sam Lee', 'funds': 5000}
        ]}
        payload['funeral'] = {'include': True, 'preference': 'burial', 'location': 'Miami'}
        payload['debtsAndTaxes'] = {'include': True, 'paymentOrder': 'proportional'}
        payload['specificGifts'] = [
            {'description': 'My watch', 'beneficiary': 'Alex Public', 'relationship': 'son'}
        ]

        pdf_bytes, pdf_hash = generate_pdf_with_footer(assemble(payload), TIMESTAMP)
        assert pdf_bytes[:4] == b'%PDF'
        assert verify_pdf_integrity(pdf_bytes, pdf_hash)

    def test_default_timestamp(self, payload):
        pdf_bytes, _ = generate_pdf_with_footer(assemble(payload))
        assert pdf_bytes[:4] == b'%PDF'

    def test_tampered_bytes_fail_integrity(self, payload):
        pdf_bytes, pdf_hash = generate_pdf_with_footer(assemble(payload), TIMESTAMP)
        assert not verify_pdf_integrity(pdf_bytes + b'\n', pdf_hash)

    def test_reportlab_failure_wrapped(self, payload):
        document = assemble(payload)
        with mock.patch('will_generator.pdf_generator.SimpleDocTemplate.build',
                        side_effect=ValueError('layout')):
            with pytest.raises(PDFGenerationError, match='layout'):
                generate_pdf_with_footer(document, TIMESTAMP)


class TestFingerprint:
    def test_stable(self, payload_factory):
        assert content_fingerprint(assemble(payload_factory())) == \
            content_fingerprint(assemble(payload_factory()))

    def test_changes_with_content(self, payload):
        before = content_fingerprint(assemble(payload))
        payload['executor']['name'] = 'Someone Else'
        assert content_fingerprint(assemble(payload)) != before
