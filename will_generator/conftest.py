"""
Shared pytest fixtures.
"""

import pytest

from will_generator import create_app, db


def make_payload(**overrides):
    """A complete, valid Florida questionnaire; top-level keys can be overridden."""
    payload = {
        'testator': {
            'fullName': 'Jane Q. Public',
            'address': '100 Main Street',
            'city': 'Miami',
            'zip': '33101',
            'county': 'Miami-Dade',
            'maritalStatus': 'married',
            'spouseName': 'John Public',
            'residenceState': 'FL',
        },
        'executor': {
            'name': 'Mary Smith',
            'relationship': 'sister',
            'address': '200 Oak Avenue',
            'city': 'Tampa',
            'state': 'FL',
            'zip': '33602',
        },
        'children': [
            {'name': 'Alex Public', 'relationship': 'biological', 'isMinor': False},
        ],
        'guardian': {},
        'specificGifts': [],
        'residuaryEstate': {
            'distributionType': 'split',
            'spouseShare': 60,
            'childrenShare': 40,
            'perStirpes': True,
        },
        'digitalAssets': {'include': False},
        'pets': {'include': False, 'items': []},
        'funeral': {'include': False},
        'realProperty': {'include': False, 'items': []},
        'debtsAndTaxes': {'include': False},
        'customProvisions': {'include': False, 'items': []},
        'disinheritance': {'include': False, 'persons': []},
        'survivorshipPeriod': 30,
        'noContestClause': True,
    }
    payload.update(overrides)
    return payload


@pytest.fixture
def payload():
    return make_payload()


@pytest.fixture
def app():
    app = create_app({
        'TESTING': True,
        'SECRET_KEY': 'test-secret',
        'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
        'RATELIMIT_ENABLED': False,
        'AUDIT_ENABLED': True,
    })
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def payload_factory():
    return make_payload
