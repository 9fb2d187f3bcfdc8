"""
batchsearch/app.py — Flask application factory + all routes.

Routes:
  GET  /               → serve the keyword form
  POST /search         → run a keyword batch, reply with the output file name
  GET  /search/active  → ids of batches still running
  POST /search/stop    → stop a running batch by id
  GET  /health         → public health check
"""
import os

from flask import Flask, jsonify, make_response, request, send_from_directory
from flask_cors import CORS
from werkzeug.exceptions import MethodNotAllowed

from batchsearch.config import Config
from batchsearch.batch import BatchLogger, BatchOrchestrator, BatchRequest, ResultSink, SinkCreateError
from batchsearch.batch.state import active_batches, cleanup_stop, register_stop, request_stop
from batchsearch.search import SearchClient, SearchConfig

_ANY_METHOD = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def create_app(config: Config = None, client: SearchClient = None) -> Flask:
    config = config or Config()
    client = client or SearchClient(SearchConfig.from_config(config))

    app = Flask(__name__, static_folder="static", static_url_path="")
    CORS(app, origins=config.CORS_ORIGINS)

    orchestrator = BatchOrchestrator(client)

    # ── Static / Frontend ─────────────────────────────────────────────────────

    @app.route("/")
    def index():
        return send_from_directory(app.static_folder, "index.html")

    @app.route("/<path:path>")
    def static_files(path):
        full = os.path.join(app.static_folder, path)
        if os.path.isfile(full):
            return send_from_directory(app.static_folder, path)
        return send_from_directory(app.static_folder, "index.html")

    # ── Search batch ──────────────────────────────────────────────────────────
    # Registered for every method so GET /search answers 405 instead of
    # falling through to the static catch-all.

    @app.route("/search", methods=_ANY_METHOD, provide_automatic_options=False)
    def search_endpoint():
        if request.method != "POST":
            raise MethodNotAllowed(valid_methods=["POST"])

        batch  = BatchRequest.from_form(request.form)
        logger = BatchLogger()

        try:
            sink = ResultSink.open(config.OUTPUT_DIR)
        except SinkCreateError as e:
            logger.error(f"Output file error: {e}")
            return _text("could not create the output file", 500)

        with sink:
            stop_event = register_stop(sink.name)
            try:
                orchestrator.run(batch, sink, logger, stop_event=stop_event)
            finally:
                cleanup_stop(sink.name)

        resp = _text(f'Done. See "{sink.name}".')
        resp.headers["X-Batch-Id"] = sink.name
        return resp

    @app.route("/search/active")
    def active_endpoint():
        return jsonify({"batches": active_batches()})

    @app.route("/search/stop", methods=["POST"])
    def stop_endpoint():
        batch_id = (request.form.get("batch_id") or "").strip()
        if not batch_id:
            return jsonify({"error": "batch_id required"}), 400
        found = request_stop(batch_id)
        return jsonify({"stopped": found, "batch_id": batch_id})

    # ── Health ────────────────────────────────────────────────────────────────

    @app.route("/health")
    def health():
        return jsonify({
            "status":     "ok",
            "api_key":    client.cfg.has_key,
            "output_dir": config.OUTPUT_DIR,
        })

    return app


def _text(body: str, status: int = 200):
    resp = make_response(body, status)
    resp.headers["Content-Type"] = "text/plain; charset=utf-8"
    return resp
