"""
Structured document model.

The assembly engine produces a StructuredDocument; every renderer consumes
one. All types are frozen and hold tuples, so a document cannot change
between being assembled and being rendered.
"""

from dataclasses import dataclass, field, fields
from typing import Any, ClassVar, Dict, Tuple, Union


WITNESS_FIELDS = ('Signature', 'Printed Name', 'Date', 'Address', 'City, State, ZIP')


# Content nodes

@dataclass(frozen=True)
class Paragraph:
    kind: ClassVar[str] = 'paragraph'
    text: str
    indent: bool = False


@dataclass(frozen=True)
class ItemList:
    """Bulleted list."""
    kind: ClassVar[str] = 'list'
    items: Tuple[str, ...]
    indent: bool = False


@dataclass(frozen=True)
class LetteredList:
    kind: ClassVar[str] = 'lettered_list'
    items: Tuple[str, ...]


@dataclass(frozen=True)
class SignatureLine:
    kind: ClassVar[str] = 'signature_line'
    label: str
    role: str = 'testator'  # 'testator', 'witness' or 'notary'


@dataclass(frozen=True)
class WitnessBlock:
    kind: ClassVar[str] = 'witness_block'
    index: int
    fields: Tuple[str, ...] = WITNESS_FIELDS

    def field_labels(self) -> Tuple[str, ...]:
        """Labels with the witness number applied to the name fields."""
        labels = []
        for name in self.fields:
            if name in ('Signature', 'Printed Name'):
                labels.append(f'Witness {self.index} {name}')
            else:
                labels.append(name)
        return tuple(labels)


@dataclass(frozen=True)
class Separator:
    kind: ClassVar[str] = 'separator'


ContentNode = Union[Paragraph, ItemList, LetteredList, SignatureLine, WitnessBlock, Separator]


# Sections

@dataclass(frozen=True)
class Title:
    kind: ClassVar[str] = 'title'
    heading: str
    subheading: str


@dataclass(frozen=True)
class Preamble:
    kind: ClassVar[str] = 'preamble'
    content: Tuple[ContentNode, ...]


@dataclass(frozen=True)
class Article:
    kind: ClassVar[str] = 'article'
    title: str
    content: Tuple[ContentNode, ...]
    number: int = 0
    clause_id: str = ''

    @property
    def is_long(self) -> bool:
        """Long articles may break across pages in paginated output."""
        return len(self.content) > 5 or any(isinstance(n, LetteredList) for n in self.content)


@dataclass(frozen=True)
class SignatureBlock:
    kind: ClassVar[str] = 'signature'
    content: Tuple[ContentNode, ...]


@dataclass(frozen=True)
class Attestation:
    kind: ClassVar[str] = 'attestation'
    heading: str
    content: Tuple[ContentNode, ...]


@dataclass(frozen=True)
class Affidavit:
    kind: ClassVar[str] = 'affidavit'
    heading: str
    subheading: str
    content: Tuple[ContentNode, ...]


@dataclass(frozen=True)
class Disclaimer:
    kind: ClassVar[str] = 'disclaimer'
    heading: str
    content: Tuple[ContentNode, ...]


Section = Union[Title, Preamble, Article, SignatureBlock, Attestation, Affidavit, Disclaimer]


@dataclass(frozen=True)
class StructuredDocument:
    sections: Tuple[Section, ...]
    jurisdiction_code: str
    jurisdiction_name: str
    witness_count: int
    generation_ready: bool
    jurisdiction_defaulted: bool = False
    notices: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def articles(self) -> Tuple[Article, ...]:
        return tuple(s for s in self.sections if isinstance(s, Article))

    def find_article(self, title: str):
        for article in self.articles:
            if article.title == title:
                return article
        return None

    def sections_of(self, section_type) -> Tuple:
        return tuple(s for s in self.sections if isinstance(s, section_type))


def _node_to_dict(node) -> Dict[str, Any]:
    data = {'type': node.kind}
    for f in fields(node):
        value = getattr(node, f.name)
        if f.name == 'content':
            value = [_node_to_dict(child) for child in value]
        elif isinstance(value, tuple):
            value = list(value)
        data[f.name] = value
    return data


def document_to_dict(document: StructuredDocument) -> Dict[str, Any]:
    """Convert a structured document to JSON-safe primitives."""
    return {
        'jurisdiction_code': document.jurisdiction_code,
        'jurisdiction_name': document.jurisdiction_name,
        'witness_count': document.witness_count,
        'generation_ready': document.generation_ready,
        'jurisdiction_defaulted': document.jurisdiction_defaulted,
        'notices': list(document.notices),
        'article_count': len(document.articles),
        'sections': [_node_to_dict(section) for section in document.sections],
    }
