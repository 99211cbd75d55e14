"""
Security Tests

Tests for security features:
- Input sanitization
- Response headers
- Rate limit configuration
"""

import unittest

from will_generator import create_app
from will_generator.security import (
    RATE_LIMITS, sanitize_payload, sanitize_string, summarize_payload
)


class TestInputSanitization(unittest.TestCase):
    """Test input sanitization functions."""

    def test_sanitize_string_removes_script(self):
        sanitized = sanitize_string('<script>alert("xss")</script>Jane')
        self.assertEqual(sanitized, 'Jane')

    def test_sanitize_string_removes_tags(self):
        sanitized = sanitize_string('123 <b>Main</b> Street')
        self.assertEqual(sanitized, '123 Main Street')

    def test_sanitize_string_removes_event_handlers_with_their_tag(self):
        self.assertEqual(sanitize_string('Ann<img src=x onerror=alert(1)>'), 'Ann')

    def test_sanitize_string_keeps_prose_with_equals(self):
        text = 'Donation = $500 to the Lion Foundation; condition=none'
        self.assertEqual(sanitize_string(text), text)

    def test_sanitize_string_preserves_safe_text(self):
        safe = 'John O\'Connor-Smith'
        self.assertEqual(sanitize_string(safe), safe)

    def test_sanitize_string_handles_unicode(self):
        unicode_text = 'José García-Müller'
        self.assertEqual(sanitize_string(unicode_text), unicode_text)

    def test_sanitize_string_drops_control_characters(self):
        self.assertEqual(sanitize_string('Line one\nLine\x00 two\x07'), 'Line one\nLine two')

    def test_sanitize_string_trims_and_truncates(self):
        self.assertEqual(sanitize_string('  John Smith  '), 'John Smith')
        self.assertEqual(len(sanitize_string('a' * 50, max_length=10)), 10)

    def test_sanitize_string_empty_input(self):
        self.assertEqual(sanitize_string(''), '')
        self.assertEqual(sanitize_string(None), '')

    def test_sanitize_payload_nested(self):
        payload = {
            'testator': {
                'fullName': '<script>alert(1)</script>Jane',
                'county': '<i>Dade</i>',
            },
            'children': [{'name': '<b>Alex</b>', 'isMinor': True}],
            'survivorshipPeriod': 30,
            'spouseShare': 62.5,
            'noContestClause': False,
            'guardian': None,
        }
        sanitized = sanitize_payload(payload)

        self.assertEqual(sanitized['testator']['fullName'], 'Jane')
        self.assertEqual(sanitized['testator']['county'], 'Dade')
        self.assertEqual(sanitized['children'][0]['name'], 'Alex')
        self.assertIs(sanitized['children'][0]['isMinor'], True)
        self.assertEqual(sanitized['survivorshipPeriod'], 30)
        self.assertEqual(sanitized['spouseShare'], 62.5)
        self.assertIs(sanitized['noContestClause'], False)
        self.assertIsNone(sanitized['guardian'])

    def test_sanitize_payload_returns_copy(self):
        payload = {'testator': {'fullName': '<b>Jane</b>'}}
        sanitize_payload(payload)
        self.assertEqual(payload['testator']['fullName'], '<b>Jane</b>')

    def test_summarize_payload_hides_values(self):
        summary = summarize_payload({
            'testator': {'fullName': 'Jane'},
            'children': [{}, {}],
            'survivorshipPeriod': 30,
        })
        self.assertEqual(summary, {
            'children': 'list[2]',
            'survivorshipPeriod': 'int',
            'testator': 'dict',
        })
        self.assertNotIn('Jane', str(summary))


class TestSecurityHeaders(unittest.TestCase):
    """Headers are added to every response."""

    def setUp(self):
        self.app = create_app({
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'RATELIMIT_ENABLED': False,
            'AUDIT_ENABLED': False,
        })
        self.client = self.app.test_client()

    def test_headers_on_success(self):
        response = self.client.get('/api/jurisdictions')
        self.assertEqual(response.headers['X-Content-Type-Options'], 'nosniff')
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')
        self.assertEqual(response.headers['Cache-Control'], 'no-store')
        self.assertIn("default-src 'none'", response.headers['Content-Security-Policy'])
        self.assertEqual(response.headers['Referrer-Policy'], 'no-referrer')

    def test_headers_on_error(self):
        response = self.client.get('/api/does-not-exist')
        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.headers['X-Frame-Options'], 'DENY')


class TestRateLimits(unittest.TestCase):

    def test_every_post_endpoint_limited(self):
        self.assertEqual(set(RATE_LIMITS), {'download', 'document', 'preview', 'validate'})

    def test_download_is_strictest(self):
        per_hour = {k: int(v.split()[0]) for k, v in RATE_LIMITS.items()}
        self.assertEqual(min(per_hour, key=per_hour.get), 'download')

    def test_limit_enforced(self):
        app = create_app({
            'TESTING': True,
            'SQLALCHEMY_DATABASE_URI': 'sqlite:///:memory:',
            'RATELIMIT_ENABLED': True,
            'RATELIMIT_STORAGE_URI': 'memory://',
            'AUDIT_ENABLED': False,
        })
        client = app.test_client()
        limit = int(RATE_LIMITS['download'].split()[0])

        statuses = [client.post('/api/download', json={}).status_code for _ in range(limit + 1)]

        self.assertNotIn(429, statuses[:limit])
        self.assertEqual(statuses[-1], 429)
        self.assertFalse(client.post('/api/download', json={}).get_json()['ok'])


if __name__ == '__main__':
    unittest.main()
