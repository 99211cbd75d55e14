"""
Flask routes for the Will Generator API.

Every endpoint takes the questionnaire as a camelCase JSON object and
works on a sanitized snapshot of it. Nothing but the audit trail is stored.

Endpoints:
- GET  /api/jurisdictions           all 51 jurisdiction records
- GET  /api/jurisdictions/<code>    one record, flagged when defaulted
- POST /api/validate[?step=N]       per-step or full validation
- POST /api/preview                 plain-text will, always allowed
- POST /api/document                structured document as JSON
- POST /api/download                finalize gate, returns the PDF
"""

import io
from datetime import datetime

from flask import Blueprint, request, jsonify, send_file, current_app

from will_generator.audit_logger import (
    log_validation_result, log_preview_rendered, log_document_generated,
    log_finalize_blocked
)
from will_generator.clause_logic import get_clauses_summary
from will_generator.clause_renderer import assemble
from will_generator.completeness import completeness_errors, scan_for_placeholders
from will_generator.document import document_to_dict
from will_generator.form_data import build_form_data
from will_generator.jurisdictions import (
    COMMUNITY_PROPERTY_STATES, MARITAL_PROPERTY_STATES, THREE_WITNESS_STATES,
    UNSUPPORTED_STATES, is_known_jurisdiction, list_jurisdictions, lookup, normalize_code
)
from will_generator.pdf_generator import PDFGenerationError, generate_pdf_with_footer
from will_generator.security import rate_limit, sanitize_payload, summarize_payload
from will_generator.text_renderer import render_text
from will_generator.utils import sanitize_filename
from will_generator.validation import (
    NUM_STEPS, collect_warnings, validate_form, validate_full_form
)


api_bp = Blueprint('api', __name__, url_prefix='/api')


def _bad_payload(message: str = 'No JSON payload provided'):
    return jsonify({
        'ok': False,
        'errors': [{'field': 'payload', 'message': message, 'code': 'missing_payload'}]
    }), 400


def _read_payload():
    """Sanitized JSON object from the request body, or None."""
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return None
    return sanitize_payload(payload)


def _blocked(code: str, message: str, **extra):
    body = {'ok': False, 'code': code, 'errors': [{'field': '', 'message': message, 'code': code}]}
    body.update(extra)
    return jsonify(body), 422


@api_bp.route('/jurisdictions')
def api_jurisdictions():
    """List every jurisdiction rule."""
    return jsonify({
        'ok': True,
        'jurisdictions': [rule.to_dict() for rule in list_jurisdictions()],
        'groups': {
            'three_witness': list(THREE_WITNESS_STATES),
            'community_property': list(COMMUNITY_PROPERTY_STATES),
            'marital_property': list(MARITAL_PROPERTY_STATES),
            'unsupported': list(UNSUPPORTED_STATES),
        },
    }), 200


@api_bp.route('/jurisdictions/<code>')
def api_jurisdiction(code: str):
    """
    Look up one jurisdiction.

    Unknown codes resolve to the default rule; the response says so.
    """
    rule = lookup(code)
    data = rule.to_dict()
    data['defaulted'] = not is_known_jurisdiction(code)
    data['requested'] = normalize_code(code)
    return jsonify({'ok': True, 'jurisdiction': data}), 200


@api_bp.route('/validate', methods=['POST'])
@rate_limit('validate')
def api_validate():
    """
    Validate a will payload, one step or all of them.

    Query Args:
        step: 0-based questionnaire step; the whole form when absent

    Returns:
        JSON validation result; 422 when there are errors
    """
    payload = _read_payload()
    if payload is None:
        return _bad_payload()

    step_index = None
    step_arg = request.args.get('step')
    if step_arg is not None:
        try:
            step_index = int(step_arg)
        except ValueError:
            step_index = -1
        if not 0 <= step_index < NUM_STEPS:
            return jsonify({
                'ok': False,
                'errors': [{
                    'field': 'step',
                    'message': f'Step must be between 0 and {NUM_STEPS - 1}',
                    'code': 'invalid_step'
                }]
            }), 400

    result = validate_form(payload, step_index)
    jurisdiction = lookup(build_form_data(payload).testator.residence_state)

    log_validation_result(jurisdiction.code, list(result.error_map()), step_index)
    current_app.logger.info(
        f'Validation step={step_index} errors={len(result.errors)} warnings={len(result.warnings)}'
    )

    body = result.to_dict()
    body['errors_by_section'] = {
        section: [e.field for e in errors]
        for section, errors in result.get_errors_by_section().items()
    }
    return jsonify(body), 200 if result.is_valid else 422


@api_bp.route('/preview', methods=['POST'])
@rate_limit('preview')
def api_preview():
    """
    Render the plain-text preview.

    Always allowed: validation errors and placeholders are reported
    alongside the text, never instead of it.
    """
    payload = _read_payload()
    if payload is None:
        return _bad_payload()

    document = assemble(payload)
    text = render_text(document)
    placeholders = scan_for_placeholders(text)

    log_preview_rendered(document.jurisdiction_code, len(document.articles), len(placeholders))
    current_app.logger.debug(f'Preview payload shape: {summarize_payload(payload)}')

    return jsonify({
        'ok': True,
        'text': text,
        'jurisdiction': document.jurisdiction_code,
        'generation_ready': document.generation_ready,
        'jurisdiction_defaulted': document.jurisdiction_defaulted,
        'notices': list(document.notices),
        'errors': validate_full_form(payload),
        'warnings': collect_warnings(payload),
        'placeholders': placeholders,
    }), 200


@api_bp.route('/document', methods=['POST'])
@rate_limit('document')
def api_document():
    """Return the structured document and clause selection as JSON."""
    payload = _read_payload()
    if payload is None:
        return _bad_payload()

    form = build_form_data(payload)
    document = assemble(form)

    return jsonify({
        'ok': True,
        'document': document_to_dict(document),
        'clauses': get_clauses_summary(form),
    }), 200


@api_bp.route('/download', methods=['POST'])
@rate_limit('download')
def api_download():
    """
    Finalize the will and return it as a PDF.

    The gate refuses, in order: validation errors, a jurisdiction that is
    unsupported or was defaulted, and leftover placeholders.

    Returns:
        PDF attachment, or a 422 JSON body naming the blocking reason
    """
    payload = _read_payload()
    if payload is None:
        return _bad_payload()

    form = build_form_data(payload)
    document = assemble(form)
    code = document.jurisdiction_code

    errors = validate_full_form(payload)
    if errors:
        log_finalize_blocked(code, 'validation_failed', list(errors))
        return _blocked(
            'validation_failed',
            'Please fix the errors in your answers before downloading.',
            fields=errors
        )

    if not document.generation_ready:
        rule = lookup(code)
        log_finalize_blocked(code, 'jurisdiction_not_supported')
        return _blocked(
            'jurisdiction_not_supported',
            f'Will documents for {rule.name} cannot be generated by this service.'
            if not rule.supported else
            'Please select your state of residence before downloading.'
        )

    text = render_text(document)
    incomplete = completeness_errors(text)
    if incomplete:
        log_finalize_blocked(code, 'incomplete_document')
        return _blocked(
            'incomplete_document',
            incomplete['placeholders'],
            placeholders=scan_for_placeholders(text)
        )

    generation_timestamp = datetime.utcnow()
    try:
        pdf_bytes, pdf_hash = generate_pdf_with_footer(document, generation_timestamp)
    except PDFGenerationError as e:
        current_app.logger.error(f'PDF generation error: {str(e)}')
        return jsonify({
            'ok': False,
            'errors': [{'field': '', 'message': 'Failed to generate will', 'code': 'generation_error'}]
        }), 500

    filename = f'Will_{sanitize_filename(form.testator.full_name)}_{generation_timestamp.strftime("%Y-%m-%d")}.pdf'

    response = send_file(
        io.BytesIO(pdf_bytes),
        mimetype='application/pdf',
        as_attachment=True,
        download_name=filename
    )
    response.headers['X-Document-SHA256'] = pdf_hash

    log_document_generated(code, pdf_hash, len(document.articles))
    current_app.logger.info(f'Generated will for {code}: {len(pdf_bytes)} bytes, sha256 {pdf_hash[:16]}')
    return response
