"""
app/receipts/routes.py
──────────────────────
JSON endpoints around the pricing and layout engines.

Every endpoint is stateless: the client posts the whole receipt each
time. Nothing is stored between requests.
"""
import io

from flask import current_app, jsonify, request, send_file

from app.catalog.models import catalog_lookup
from app.layout.export import export_filename, write_pdf, write_png
from app.pricing.cart import apply_import
from app.pricing.totals import price_receipt
from app.receipts import receipts
from app.receipts.errors import ReceiptValidationError, UpstreamError
from app.receipts.importing import parse_extraction
from app.receipts.serialization import pricing_to_json, receipt_from_json, receipt_to_json
from app.receipts.service import build_layout


# ── ERRORS ────────────────────────────────────────────────────────

@receipts.errorhandler(ReceiptValidationError)
def invalid_receipt(exc):
    current_app.logger.warning(f"Receipt rejected: {exc.message}")
    return jsonify({'error': exc.message}), 400


@receipts.errorhandler(UpstreamError)
def upstream_failure(exc):
    current_app.logger.warning(f"Import collaborator failure: {exc.message}")
    return jsonify({'error': exc.message}), 502


def _posted_receipt():
    return receipt_from_json(request.get_json(silent=True))


def _render(receipt):
    """Lay out the receipt; the layout's measurer is returned so painting uses the same fonts."""
    layout   = build_layout(current_app.config)
    pricing  = price_receipt(receipt)
    document = layout.render(receipt, pricing)
    return document, pricing, layout.measurer


# ── PRICING ───────────────────────────────────────────────────────

@receipts.route('/totals', methods=['POST'])
def totals():
    """Subtotal, automatic and manual discounts, and the final total."""
    receipt = _posted_receipt()
    return jsonify(pricing_to_json(price_receipt(receipt)))


# ── DOCUMENT ──────────────────────────────────────────────────────

@receipts.route('/document', methods=['POST'])
def document():
    """Download the receipt as PDF."""
    receipt = _posted_receipt()
    doc, pricing, fonts = _render(receipt)

    buf = io.BytesIO()
    write_pdf(doc, buf, dpi=current_app.config['RECEIPT_PREVIEW_DPI'], fonts=fonts)
    buf.seek(0)

    filename = export_filename(receipt, current_app.config['RECEIPT_LABEL'], 'pdf')
    current_app.logger.info(
        f"Receipt generated: {filename} | Pages: {len(doc)} | Total: {pricing.total}"
    )
    return send_file(buf, mimetype='application/pdf', as_attachment=True, download_name=filename)


@receipts.route('/preview', methods=['POST'])
def preview():
    """PNG of one page (?page=N, 1-based) for on-screen preview."""
    receipt = _posted_receipt()
    page = request.args.get('page', 1, type=int)
    doc, _pricing, fonts = _render(receipt)

    buf = io.BytesIO()
    try:
        write_png(doc, buf, page=page - 1, dpi=current_app.config['RECEIPT_PREVIEW_DPI'],
                  fonts=fonts)
    except IndexError as exc:
        return jsonify({'error': str(exc), 'pages': len(doc)}), 404
    buf.seek(0)

    response = send_file(buf, mimetype='image/png')
    response.headers['X-Page-Count'] = str(len(doc))
    return response


# ── TEXT IMPORT ───────────────────────────────────────────────────

@receipts.route('/import', methods=['POST'])
def import_extraction():
    """
    Merge the import service's extraction into the posted receipt.

    Body: {"receipt": {...}, "extraction": {"clientData": {...}, "items": [...]}}
    """
    body = request.get_json(silent=True) or {}
    receipt    = receipt_from_json(body.get('receipt') or {})
    extraction = parse_extraction(body.get('extraction'))

    outcome = apply_import(receipt, extraction, catalog_lookup())
    if outcome.dropped:
        current_app.logger.info(f"Import dropped unknown products: {outcome.dropped}")

    return jsonify({
        'receipt': receipt_to_json(receipt),
        'pricing': pricing_to_json(price_receipt(receipt)),
        'added':   outcome.added,
        'merged':  outcome.merged,
        'dropped': outcome.dropped,
    })
