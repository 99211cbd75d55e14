"""
API tests through the Flask test client.
"""

from unittest import mock

import pytest

from will_generator import db
from will_generator.audit_logger import AuditAction, verify_audit_integrity
from will_generator.models import AuditLog
from will_generator.pdf_generator import PDFGenerationError


def _audit_actions(app):
    with app.app_context():
        return [row.action for row in AuditLog.query.order_by(AuditLog.id).all()]


class TestJurisdictions:
    def test_list(self, client):
        response = client.get('/api/jurisdictions')
        data = response.get_json()
        assert response.status_code == 200
        assert len(data['jurisdictions']) == 51
        codes = [j['code'] for j in data['jurisdictions']]
        assert 'DC' in codes and 'LA' in codes
        assert data['groups']['three_witness'] == ['SC', 'VT']
        assert data['groups']['unsupported'] == ['LA']
        assert data['groups']['marital_property'] == ['WI']

    def test_known(self, client):
        data = client.get('/api/jurisdictions/sc').get_json()['jurisdiction']
        assert data['code'] == 'SC'
        assert data['witnesses'] == 3
        assert data['defaulted'] is False

    def test_unknown_defaults(self, client):
        data = client.get('/api/jurisdictions/zz').get_json()['jurisdiction']
        assert data['code'] == 'FL'
        assert data['defaulted'] is True
        assert data['requested'] == 'ZZ'


class TestValidate:
    def test_valid_payload(self, client, payload):
        response = client.post('/api/validate', json=payload)
        assert response.status_code == 200
        assert response.get_json()['ok'] is True

    def test_invalid_payload(self, client, payload):
        payload['executor']['name'] = ''
        response = client.post('/api/validate', json=payload)
        data = response.get_json()
        assert response.status_code == 422
        assert data['ok'] is False
        assert {'field': 'executor.name', 'message': 'Personal Representative name is required',
                'code': 'required', 'section': 'executor'} in data['errors']
        assert data['errors_by_section'] == {'executor': ['executor.name']}

    def test_single_step(self, client, payload):
        payload['executor']['name'] = ''
        response = client.post('/api/validate?step=0', json=payload)
        assert response.status_code == 200

    @pytest.mark.parametrize('step', ['8', '-1', 'abc'])
    def test_bad_step(self, client, payload, step):
        response = client.post(f'/api/validate?step={step}', json=payload)
        assert response.status_code == 400
        assert response.get_json()['errors'][0]['code'] == 'invalid_step'

    @pytest.mark.parametrize('body', ['not json', '[1, 2]', ''])
    def test_bad_payload(self, client, body):
        response = client.post('/api/validate', data=body, content_type='application/json')
        assert response.status_code == 400
        assert response.get_json()['errors'][0]['field'] == 'payload'

    def test_audited_without_names(self, app, client, payload):
        payload['executor']['name'] = ''
        client.post('/api/validate', json=payload)
        with app.app_context():
            row = AuditLog.query.one()
            assert row.action == AuditAction.VALIDATION_FAILED
            assert row.jurisdiction_code == 'FL'
            assert row.to_dict()['details']['fields'] == ['executor.name']
            assert 'Jane' not in row.details_json
            assert row.verify_integrity()


class TestPreview:
    def test_preview(self, client, payload):
        data = client.post('/api/preview', json=payload).get_json()
        assert data['ok'] is True
        assert data['text'].startswith('LAST WILL AND TESTAMENT')
        assert data['generation_ready'] is True
        assert data['errors'] == {}
        assert data['placeholders'] == []

    def test_preview_of_incomplete_payload(self, client):
        response = client.post('/api/preview', json={})
        data = response.get_json()
        assert response.status_code == 200
        assert 'testator' in data['errors']
        assert '[NAME]' in data['placeholders']

    def test_louisiana_not_ready(self, client, payload):
        payload['testator']['residenceState'] = 'LA'
        data = client.post('/api/preview', json=payload).get_json()
        assert data['generation_ready'] is False
        assert 'jurisdiction_unsupported' in data['notices']
        assert 'Civil Law' in data['errors']['testator.residenceState']

    def test_sanitized(self, client, payload):
        payload['testator']['fullName'] = '<script>x()</script>Jane Q. Public'
        data = client.post('/api/preview', json=payload).get_json()
        assert '<script>' not in data['text']
        assert 'x()' not in data['text']
        assert 'OF JANE Q. PUBLIC' in data['text']

    def test_warnings(self, client, payload):
        payload['children'].append({'name': 'Sam Step', 'relationship': 'stepchild'})
        data = client.post('/api/preview', json=payload).get_json()
        assert [w['field'] for w in data['warnings']] == ['stepchildren']


class TestDocument:
    def test_structured_document(self, client, payload):
        data = client.post('/api/document', json=payload).get_json()
        assert data['ok'] is True
        assert data['document']['jurisdiction_code'] == 'FL'
        assert 'residuary_estate' in data['clauses']['selected']
        assert 'guardian' in data['clauses']['omitted']
        assert data['clauses']['order_valid'] is True
        assert data['clauses']['titles']['residuary_estate']


class TestDownload:
    def test_pdf(self, app, client, payload):
        response = client.post('/api/download', json=payload)
        assert response.status_code == 200
        assert response.mimetype == 'application/pdf'
        assert response.data[:4] == b'%PDF'
        assert len(response.headers['X-Document-SHA256']) == 64
        disposition = response.headers['Content-Disposition']
        assert 'attachment' in disposition
        assert 'Will_Jane_Q_Public_' in disposition
        assert response.headers['Cache-Control'] == 'no-store'

        with app.app_context():
            row = AuditLog.query.filter_by(action=AuditAction.DOCUMENT_GENERATED).one()
            assert row.document_sha256 == response.headers['X-Document-SHA256']

    def test_numeric_name(self, app, client, payload):
        payload['testator']['fullName'] = 12345
        response = client.post('/api/download', json=payload)
        assert response.status_code == 200
        assert 'Will_12345_' in response.headers['Content-Disposition']
        assert _audit_actions(app) == [AuditAction.DOCUMENT_GENERATED]

    def test_no_audit_record_when_response_fails(self, app, client, payload):
        with mock.patch('will_generator.routes.send_file', side_effect=RuntimeError('send')):
            with pytest.raises(RuntimeError):
                client.post('/api/download', json=payload)
        assert _audit_actions(app) == []

    def test_validation_failed(self, app, client, payload):
        payload['testator']['zip'] = '123'
        response = client.post('/api/download', json=payload)
        data = response.get_json()
        assert response.status_code == 422
        assert data['code'] == 'validation_failed'
        assert 'testator.zip' in data['fields']
        assert _audit_actions(app) == [AuditAction.FINALIZE_BLOCKED]

    def test_jurisdiction_not_supported(self, client, payload):
        payload['testator']['residenceState'] = 'LA'
        with mock.patch('will_generator.routes.validate_full_form', return_value={}):
            response = client.post('/api/download', json=payload)
        data = response.get_json()
        assert response.status_code == 422
        assert data['code'] == 'jurisdiction_not_supported'
        assert 'Louisiana' in data['errors'][0]['message']

    def test_defaulted_jurisdiction_blocked(self, client, payload):
        payload['testator']['residenceState'] = 'ZZ'
        with mock.patch('will_generator.routes.validate_full_form', return_value={}):
            response = client.post('/api/download', json=payload)
        assert response.status_code == 422
        assert response.get_json()['code'] == 'jurisdiction_not_supported'

    def test_leftover_placeholder_blocked(self, client, payload):
        payload['testator']['address'] = '12 Main Street [UNIT]'
        response = client.post('/api/download', json=payload)
        data = response.get_json()
        assert response.status_code == 422
        assert data['code'] == 'incomplete_document'
        assert data['placeholders'] == ['[UNIT]']

    def test_generation_error(self, client, payload):
        with mock.patch('will_generator.routes.generate_pdf_with_footer',
                        side_effect=PDFGenerationError('boom')):
            response = client.post('/api/download', json=payload)
        assert response.status_code == 500
        assert response.get_json()['errors'][0]['code'] == 'generation_error'

    def test_audit_chain_intact(self, app, client, payload):
        client.post('/api/validate', json=payload)
        client.post('/api/preview', json=payload)
        client.post('/api/download', json=payload)
        with app.app_context():
            assert AuditLog.query.count() == 3
            assert verify_audit_integrity() == (3, 0, [])


class TestErrors:
    def test_not_found(self, client):
        response = client.get('/api/nowhere')
        assert response.status_code == 404
        assert response.get_json() == {'ok': False, 'error': 'Not found'}

    def test_method_not_allowed(self, client):
        response = client.get('/api/download')
        assert response.status_code == 405
        assert response.get_json()['ok'] is False


class TestAuditTrail:
    def test_tampering_detected(self, app, client, payload):
        client.post('/api/validate', json=payload)
        client.post('/api/preview', json=payload)
        with app.app_context():
            row = AuditLog.query.filter_by(action=AuditAction.PREVIEW_RENDERED).one()
            row.jurisdiction_code = 'TX'
            db.session.commit()
            assert verify_audit_integrity() == (1, 1, [row.id])

    def test_disabled(self, app, client, payload):
        app.config['AUDIT_ENABLED'] = False
        client.post('/api/validate', json=payload)
        with app.app_context():
            assert AuditLog.query.count() == 0
