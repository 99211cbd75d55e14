"""
Database models for the Will Generator application.

Only an audit trail is persisted. Questionnaire payloads and generated
documents are never stored; a record keeps the document fingerprint so a
downloaded will can later be matched to the event that produced it.
"""

import json
import hashlib
from datetime import datetime
from will_generator import db


class AuditLog(db.Model):
    """
    One validation, preview, generation or blocked-download event.

    Rows are append-only and sealed with a SHA256 over their content.
    """
    __tablename__ = 'audit_logs'

    # Columns covered by the integrity hash, in hashing order
    SEALED_FIELDS = (
        'timestamp', 'action', 'action_category', 'jurisdiction_code',
        'document_sha256', 'details_json', 'success', 'error_message',
    )

    id = db.Column(db.Integer, primary_key=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)

    action = db.Column(db.String(50), nullable=False, index=True)  # AuditAction value
    action_category = db.Column(db.String(20), nullable=False)     # AuditCategory value

    jurisdiction_code = db.Column(db.String(2), nullable=True)
    document_sha256 = db.Column(db.String(64), nullable=True)

    # Field paths and counts only
    details_json = db.Column(db.Text, nullable=True)

    success = db.Column(db.Boolean, nullable=False)
    error_message = db.Column(db.Text, nullable=True)

    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.String(500), nullable=True)

    integrity_hash = db.Column(db.String(64), nullable=False)

    def __repr__(self):
        return f'<AuditLog {self.id} {self.action} {self.jurisdiction_code or "--"}>'

    @property
    def details(self):
        return json.loads(self.details_json) if self.details_json else None

    def to_dict(self):
        data = {name: getattr(self, name) for name in self.SEALED_FIELDS if name != 'details_json'}
        data['id'] = self.id
        data['timestamp'] = self.timestamp.isoformat() if self.timestamp else None
        data['details'] = self.details
        return data

    def compute_integrity_hash(self) -> str:
        """SHA256 of the sealed columns as canonical JSON."""
        content = {name: getattr(self, name) for name in self.SEALED_FIELDS}
        content['timestamp'] = self.timestamp.isoformat() if self.timestamp else None
        canonical = json.dumps(content, sort_keys=True, separators=(',', ':'))
        return hashlib.sha256(canonical.encode('utf-8')).hexdigest()

    def seal(self):
        """Fix the timestamp and store the integrity hash; call before insert."""
        if self.timestamp is None:
            self.timestamp = datetime.utcnow()
        self.integrity_hash = self.compute_integrity_hash()
        return self

    def verify_integrity(self) -> bool:
        return self.integrity_hash == self.compute_integrity_hash()
