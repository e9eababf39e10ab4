"""
Contact Service
===============
Language  : Python
Framework : Flask + Gunicorn

Backend for the repair business website. One business endpoint behind a
handful of small layers:
  validation.py      — field rules (mirrored client-side)
  templates.py       — notification email renderer
  transport.py       — SMTP delivery (the only module that knows about SMTP)
  submission_log.py  — append-only daily JSON-lines log
  pipeline.py        — validate → render → deliver → log

Also serves the static site in contact-frontend/ at "/".

Run:
  python main.py                                  (development)
  gunicorn --chdir contact-service main:app       (production)
"""

import os
import signal
import sys
import logging
import threading

from dotenv import load_dotenv
from flask import Flask, request, jsonify
from flask_cors import CORS

# Modules below read their configuration from the environment at import time.
load_dotenv()

import pipeline  # noqa: E402
import submission_log  # noqa: E402
import transport  # noqa: E402

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s [contact-service] %(levelname)s %(message)s'
)
log = logging.getLogger(__name__)

FRONTEND_DIR = os.path.abspath(os.environ.get(
    'FRONTEND_DIR',
    os.path.join(os.path.dirname(os.path.abspath(__file__)), '..', 'contact-frontend'),
))
CORS_ORIGINS = os.environ.get('CORS_ORIGINS', '*')
VERIFY_SMTP_ON_STARTUP = os.environ.get('VERIFY_SMTP_ON_STARTUP', 'true').lower() == 'true'

SUCCESS_MESSAGE = "Thank you for contacting us! We'll get back to you within 24 hours."
VALIDATION_MESSAGE = "Please correct the following errors:"
FAILURE_MESSAGE = "We're experiencing technical difficulties. Please try again or call us directly."

app = Flask(__name__, static_folder=FRONTEND_DIR, static_url_path='')
CORS(app, origins=[o.strip() for o in CORS_ORIGINS.split(',')] if CORS_ORIGINS != '*' else '*')

submission_log.ensure_log_dir()


@app.route('/')
def index():
    return app.send_static_file('index.html')


@app.route('/health')
def health():
    return jsonify({
        "status": "Server is running",
        "timestamp": submission_log.utc_timestamp(),
        "emailReady": transport.email_ready(),
        "transport": transport.smtp_config_summary(),
    })


@app.route('/contact', methods=['POST'])
def contact():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    result = pipeline.process(data)

    if result.status == "validation_error":
        return jsonify({"error": VALIDATION_MESSAGE, "details": result.errors}), 400
    if result.status == "error":
        return jsonify({"error": FAILURE_MESSAGE, "success": False}), 500
    return jsonify({"message": SUCCESS_MESSAGE, "success": True}), 200


@app.route('/admin/recent-logs', methods=['GET'])
def recent_logs():
    try:
        logs = submission_log.recent(limit=10)
    except (OSError, ValueError) as e:
        log.error(f"Could not read today's submission log: {e}")
        return jsonify({"error": "Could not retrieve logs"}), 500

    if logs is None:
        return jsonify({"logs": [], "message": "No logs found for today"})
    return jsonify({"logs": logs})


def _shutdown(signum, frame):
    log.info("Server shutting down gracefully...")
    sys.exit(0)


if VERIFY_SMTP_ON_STARTUP:
    threading.Thread(target=transport.verify, name="smtp-verify", daemon=True).start()


if __name__ == '__main__':
    port = int(os.environ.get('PORT', 3000))
    signal.signal(signal.SIGTERM, _shutdown)
    smtp = transport.smtp_config_summary()
    log.info(f"Repair Service Contact API starting on :{port}")
    log.info(f"  Transport: SMTP {smtp['host']}:{smtp['port']} (mode={smtp['mode']}, tls={smtp['tls']})")
    log.info(f"  Email configured for: {smtp['from']}")
    log.info(f"  Emails will be sent to: {smtp['recipient']}")
    log.info(f"  Submission logs: {submission_log.LOG_DIR}")
    log.info(f"  Frontend: {FRONTEND_DIR}")
    app.run(host='0.0.0.0', port=port)
