"""
PDF Generator Module

Renders a StructuredDocument to a US Letter PDF using ReportLab.

Design Decisions:
=================

1. Two-Pass Rendering:
   - First pass: build the story once to count pages
   - Second pass: rebuild with a "Page X of Y" footer
   - The footer also carries the generation date and a short fingerprint
     of the document text, so printed pages can be matched to a download

2. Determinism Enforcement:
   - rl_config.invariant is set, so ReportLab omits random document IDs
   - All date references use the supplied generation_timestamp
   - Same document + timestamp = identical bytes

3. Layout:
   - Short articles are kept together on one page
   - Long articles (lettered lists or more than five blocks) may break,
     but their heading always stays with the first block
   - The signature block and the self-proving affidavit start new pages
   - Signature lines and witness blocks are drawn, not typed
"""

import io
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY
from reportlab.lib.pagesizes import LETTER
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    SimpleDocTemplate, Paragraph, Spacer, PageBreak, Flowable, KeepTogether
)
from reportlab import rl_config

from will_generator import document as doc_nodes
from will_generator.document import StructuredDocument
from will_generator.numbering import article_heading, letter_label
from will_generator.text_renderer import render_text
from will_generator.utils import calculate_sha256, escape_text, format_long_date, short_hash

# Enable invariant mode for deterministic PDF generation
rl_config.invariant = 1


PAGE_WIDTH, PAGE_HEIGHT = LETTER
MARGIN_LEFT = 1 * inch
MARGIN_RIGHT = 1 * inch
MARGIN_TOP = 1 * inch
MARGIN_BOTTOM = 1 * inch
FOOTER_Y = 0.5 * inch


class PDFGenerationError(Exception):
    """Raised when ReportLab cannot build the document."""
    pass


class SignatureLineFlowable(Flowable):
    """A ruled line with its label underneath."""

    def __init__(self, label: str, role: str = 'testator', width: float = 4 * inch):
        super().__init__()
        self.label = label
        self.role = role
        self.line_width = width
        self.height = 0

    def wrap(self, availWidth, availHeight):
        self.line_width = min(self.line_width, availWidth)
        self.height = 48 if self.role == 'testator' else 40
        return (self.line_width, self.height)

    def draw(self):
        canvas = self.canv
        y = 16
        canvas.setLineWidth(0.75)
        canvas.line(0, y, self.line_width, y)
        canvas.setFont('Times-Bold' if self.role == 'testator' else 'Times-Roman', 10)
        canvas.drawString(0, y - 12, self.label)


class WitnessBlockFlowable(Flowable):
    """One witness's signature, printed name, date and address lines."""

    def __init__(self, labels: Tuple[str, ...], width: float = 4.5 * inch):
        super().__init__()
        self.labels = labels
        self.block_width = width
        self.row_height = 30
        self.height = 0

    def wrap(self, availWidth, availHeight):
        self.block_width = min(self.block_width, availWidth)
        self.height = len(self.labels) * self.row_height + 10
        return (self.block_width, self.height)

    def draw(self):
        canvas = self.canv
        canvas.setLineWidth(0.5)
        y = self.height - 18
        for label in self.labels:
            canvas.line(0, y, self.block_width, y)
            canvas.setFont('Times-Roman', 9)
            canvas.drawString(0, y - 10, label)
            y -= self.row_height


def create_styles() -> Dict[str, ParagraphStyle]:
    """Create paragraph styles for the will document."""
    styles = getSampleStyleSheet()

    return {
        'title': ParagraphStyle(
            'WillTitle',
            parent=styles['Heading1'],
            fontSize=18,
            leading=24,
            alignment=TA_CENTER,
            spaceAfter=6,
            fontName='Times-Bold',
        ),
        'subtitle': ParagraphStyle(
            'WillSubtitle',
            parent=styles['Normal'],
            fontSize=12,
            leading=16,
            alignment=TA_CENTER,
            spaceAfter=24,
            fontName='Times-Bold',
        ),
        'article_heading': ParagraphStyle(
            'ArticleHeading',
            parent=styles['Heading2'],
            fontSize=12,
            leading=16,
            spaceBefore=14,
            spaceAfter=8,
            fontName='Times-Bold',
            textColor=colors.HexColor('#1a1a1a'),
        ),
        'section_heading': ParagraphStyle(
            'SectionHeading',
            parent=styles['Heading2'],
            fontSize=12,
            leading=16,
            alignment=TA_CENTER,
            spaceBefore=12,
            spaceAfter=8,
            fontName='Times-Bold',
        ),
        'normal': ParagraphStyle(
            'WillNormal',
            parent=styles['Normal'],
            fontSize=11,
            leading=16,
            alignment=TA_JUSTIFY,
            spaceAfter=8,
            fontName='Times-Roman',
        ),
        'indented': ParagraphStyle(
            'WillIndented',
            parent=styles['Normal'],
            fontSize=11,
            leading=16,
            alignment=TA_JUSTIFY,
            leftIndent=24,
            spaceAfter=8,
            fontName='Times-Roman',
        ),
        'bullet_item': ParagraphStyle(
            'BulletItem',
            parent=styles['Normal'],
            fontSize=11,
            leading=16,
            leftIndent=36,
            firstLineIndent=-14,
            spaceAfter=4,
            fontName='Times-Roman',
        ),
        'lettered_item': ParagraphStyle(
            'LetteredItem',
            parent=styles['Normal'],
            fontSize=11,
            leading=16,
            alignment=TA_JUSTIFY,
            leftIndent=36,
            firstLineIndent=-22,
            spaceAfter=6,
            fontName='Times-Roman',
        ),
        'disclaimer': ParagraphStyle(
            'Disclaimer',
            parent=styles['Normal'],
            fontSize=9,
            leading=12,
            alignment=TA_JUSTIFY,
            spaceAfter=6,
            fontName='Times-Italic',
        ),
    }


def _content_to_elements(nodes, styles: Dict[str, ParagraphStyle], body_style: str = 'normal') -> List:
    """
    Render content nodes to ReportLab flowables.

    Args:
        nodes: Content nodes of one section
        styles: Paragraph styles
        body_style: Style name for plain paragraphs

    Returns:
        List of ReportLab flowables
    """
    elements = []

    for node in nodes:
        if isinstance(node, doc_nodes.Paragraph):
            style = styles['indented'] if node.indent else styles[body_style]
            elements.append(Paragraph(escape_text(node.text), style))

        elif isinstance(node, doc_nodes.ItemList):
            for item in node.items:
                elements.append(Paragraph(f'&bull; {escape_text(item)}', styles['bullet_item']))

        elif isinstance(node, doc_nodes.LetteredList):
            for i, item in enumerate(node.items):
                elements.append(Paragraph(f'({letter_label(i)}) {escape_text(item)}', styles['lettered_item']))

        elif isinstance(node, doc_nodes.SignatureLine):
            elements.append(Spacer(1, 12))
            elements.append(SignatureLineFlowable(node.label, node.role))

        elif isinstance(node, doc_nodes.WitnessBlock):
            elements.append(Spacer(1, 8))
            elements.append(WitnessBlockFlowable(node.field_labels()))

        elif isinstance(node, doc_nodes.Separator):
            elements.append(Spacer(1, 10))

    return elements


def _article_to_elements(article: doc_nodes.Article, styles: Dict[str, ParagraphStyle]) -> List:
    heading = Paragraph(escape_text(article_heading(article)), styles['article_heading'])
    body = _content_to_elements(article.content, styles)

    if not article.is_long:
        return [KeepTogether([heading] + body)]

    if not body:
        return [heading]
    return [KeepTogether([heading, body[0]])] + body[1:]


def build_story(document: StructuredDocument, styles: Dict[str, ParagraphStyle] = None) -> List:
    """
    Build the platypus story for a document.

    Args:
        document: The assembled will
        styles: Paragraph styles, created when omitted

    Returns:
        List of flowables in document order
    """
    styles = styles or create_styles()
    story = []

    for section in document.sections:
        if isinstance(section, doc_nodes.Title):
            story.append(Paragraph(escape_text(section.heading), styles['title']))
            story.append(Paragraph(escape_text(section.subheading), styles['subtitle']))

        elif isinstance(section, doc_nodes.Preamble):
            story.extend(_content_to_elements(section.content, styles))

        elif isinstance(section, doc_nodes.Article):
            story.extend(_article_to_elements(section, styles))

        elif isinstance(section, doc_nodes.SignatureBlock):
            story.append(PageBreak())
            story.extend(_content_to_elements(section.content, styles))

        elif isinstance(section, doc_nodes.Attestation):
            story.append(Spacer(1, 18))
            story.append(Paragraph(escape_text(section.heading), styles['section_heading']))
            story.extend(_content_to_elements(section.content, styles))

        elif isinstance(section, doc_nodes.Affidavit):
            story.append(PageBreak())
            story.append(Paragraph(escape_text(section.heading), styles['section_heading']))
            story.append(Paragraph(escape_text(section.subheading), styles['subtitle']))
            story.extend(_content_to_elements(section.content, styles))

        elif isinstance(section, doc_nodes.Disclaimer):
            story.append(Spacer(1, 24))
            story.append(Paragraph(escape_text(section.heading), styles['section_heading']))
            story.extend(_content_to_elements(section.content, styles, body_style='disclaimer'))

    return story


def content_fingerprint(document: StructuredDocument) -> str:
    """SHA256 of the document text; stable across renderers."""
    return calculate_sha256(render_text(document).encode('utf-8'))


def _make_template(buffer: io.BytesIO, generation_timestamp: datetime, testator_name: str = '') -> SimpleDocTemplate:
    return SimpleDocTemplate(
        buffer,
        pagesize=LETTER,
        leftMargin=MARGIN_LEFT,
        rightMargin=MARGIN_RIGHT,
        topMargin=MARGIN_TOP,
        bottomMargin=MARGIN_BOTTOM,
        # Ensure deterministic PDF metadata
        title='Last Will and Testament',
        author=testator_name or 'Will Generator',
        creator='Will Generator',
        creationDate=generation_timestamp,
        modDate=generation_timestamp,
    )


def _counting_footer(page_counter: List[int]):
    """First-pass callback that only records page numbers."""
    def footer(canvas, doc):
        page_counter.append(doc.page)
    return footer


def _create_full_footer_callback(generation_timestamp: datetime, fingerprint: str, total_pages: int):
    """
    Create footer callback with generation date, fingerprint and pagination.

    Args:
        generation_timestamp: Stored timestamp for determinism
        fingerprint: SHA256 of the document text
        total_pages: Page count from the first pass

    Returns:
        Callback function for canvas
    """
    def footer(canvas, doc):
        canvas.saveState()
        canvas.setFont('Times-Roman', 8)
        canvas.setFillColor(colors.HexColor('#666666'))

        footer_text = f'Generated: {format_long_date(generation_timestamp)} | Ref: {short_hash(fingerprint, 12)}'
        canvas.drawString(MARGIN_LEFT, FOOTER_Y, footer_text)
        canvas.drawRightString(PAGE_WIDTH - MARGIN_RIGHT, FOOTER_Y, f'Page {doc.page} of {total_pages}')

        canvas.restoreState()

    return footer


def _testator_name(document: StructuredDocument) -> str:
    for section in document.sections_of(doc_nodes.SignatureBlock):
        for node in section.content:
            if isinstance(node, doc_nodes.SignatureLine) and node.role == 'testator':
                return node.label.rsplit(', Testator', 1)[0].strip()
    return ''


def generate_pdf_with_footer(document: StructuredDocument,
                             generation_timestamp: Optional[datetime] = None) -> Tuple[bytes, str]:
    """
    Generate the final PDF will document.

    Args:
        document: The assembled will
        generation_timestamp: Stored timestamp for determinism

    Returns:
        Tuple of (PDF bytes, SHA256 hash of those bytes)

    Raises:
        PDFGenerationError: If ReportLab fails to lay out the story
    """
    if generation_timestamp is None:
        generation_timestamp = datetime.utcnow()

    styles = create_styles()
    fingerprint = content_fingerprint(document)
    author = _testator_name(document)

    try:
        # First pass: count pages
        pages: List[int] = []
        counter = _counting_footer(pages)
        buffer1 = io.BytesIO()
        _make_template(buffer1, generation_timestamp, author).build(
            build_story(document, styles), onFirstPage=counter, onLaterPages=counter
        )
        buffer1.close()
        total_pages = max(pages) if pages else 1

        # Second pass: full footer
        buffer2 = io.BytesIO()
        footer = _create_full_footer_callback(generation_timestamp, fingerprint, total_pages)
        _make_template(buffer2, generation_timestamp, author).build(
            build_story(document, styles), onFirstPage=footer, onLaterPages=footer
        )
        pdf_bytes = buffer2.getvalue()
        buffer2.close()
    except Exception as e:
        raise PDFGenerationError(f'Failed to render PDF: {e}') from e

    return pdf_bytes, calculate_sha256(pdf_bytes)


def verify_pdf_integrity(pdf_bytes: bytes, expected_hash: str) -> bool:
    """
    Verify PDF integrity by computing hash.

    Args:
        pdf_bytes: PDF content
        expected_hash: Expected SHA256 hash

    Returns:
        True if integrity verified
    """
    actual_hash = calculate_sha256(pdf_bytes)
    return actual_hash == expected_hash
