"""
Plain-text renderer.

Turns a StructuredDocument into the text preview. Layout only: headings,
numbering and clause wording all come from the document.
"""

from typing import Iterable, List

from will_generator.document import (
    Affidavit, Article, Attestation, Disclaimer, ItemList, LetteredList,
    Paragraph, Preamble, Separator, SignatureBlock, SignatureLine,
    StructuredDocument, Title, WitnessBlock,
)
from will_generator.numbering import article_heading, letter_label


SIGNATURE_RULE = '_' * 41
SEPARATOR_RULE = '=' * 60
INDENT = '   '


def _signature(lines: List[str], label: str):
    lines.extend(['', SIGNATURE_RULE, label, ''])


def _render_content(nodes: Iterable, lines: List[str]):
    for node in nodes:
        if isinstance(node, Paragraph):
            lines.append(f'{INDENT}{node.text}' if node.indent else node.text)

        elif isinstance(node, ItemList):
            prefix = '    - ' if node.indent else '  - '
            lines.extend(f'{prefix}{item}' for item in node.items)

        elif isinstance(node, LetteredList):
            lines.extend(f'  ({letter_label(i)}) {item}' for i, item in enumerate(node.items))

        elif isinstance(node, Separator):
            lines.append(SEPARATOR_RULE)

        elif isinstance(node, SignatureLine):
            _signature(lines, node.label)

        elif isinstance(node, WitnessBlock):
            lines.append('')
            for label in node.field_labels():
                lines.extend([SIGNATURE_RULE, label, ''])


def render_text(document: StructuredDocument) -> str:
    """
    Render the document as plain text.

    Args:
        document: The assembled will

    Returns:
        Newline-joined text; identical for identical documents
    """
    lines: List[str] = []

    for section in document.sections:
        if isinstance(section, Title):
            lines.extend([section.heading, section.subheading, ''])

        elif isinstance(section, Preamble):
            _render_content(section.content, lines)
            lines.append('')

        elif isinstance(section, Article):
            lines.extend([article_heading(section), ''])
            _render_content(section.content, lines)
            lines.append('')

        elif isinstance(section, SignatureBlock):
            _render_content(section.content, lines)
            lines.append('')

        elif isinstance(section, Attestation):
            lines.append(section.heading)
            _render_content(section.content, lines)
            lines.append('')

        elif isinstance(section, Affidavit):
            lines.extend([SEPARATOR_RULE, section.heading, section.subheading, SEPARATOR_RULE])
            _render_content(section.content, lines)

        elif isinstance(section, Disclaimer):
            lines.extend(['', SEPARATOR_RULE, section.heading])
            _render_content(section.content, lines)
            lines.append('')

    return '\n'.join(lines)
