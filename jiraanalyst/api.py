"""
api.py

HTTP API for report generation.

Endpoints:
- POST /report   JSON {"rows": [[...], ...], "focus": "..."} or {"projectKey": "PROJ", "focus": "..."},
                 or multipart/form-data with a 'file' upload and optional 'focus'/'language' fields.
- GET  /health

Typed failures are returned as {"error": <type>, "message": <text>} with a matching status code.
"""
import argparse
import asyncio
import os

from flask import Flask, jsonify, request
from marshmallow import Schema, ValidationError, fields, validate, validates_schema

from jiraanalyst import __version__
from jiraanalyst.cli_logging_setup import setup_logging
from jiraanalyst.config import ConfigLoader
from jiraanalyst.constants import LLM_TIMEOUT, SUPPORTED_LANGUAGES
from jiraanalyst.errors import (
    ConfigError, ExtractionFailure, AggregationFailure, JiraAnalystError,
    NoUsableDataError, SourceError, TransportFailure,
)
from jiraanalyst.jira_client import JiraClient
from jiraanalyst.pipeline import ReportPipeline
from jiraanalyst.sources import load_upload
from jiraanalyst.utils.fields import ProjectKeyField
from jiraanalyst.utils.llm import OpenAITextGenerationClient
from jiraanalyst.utils.logging import contextual_log

MAX_UPLOAD_BYTES = 5 * 1024 * 1024

ERROR_STATUS = {
    NoUsableDataError: 422,
    SourceError: 400,
    ExtractionFailure: 502,
    AggregationFailure: 502,
    TransportFailure: 502,
    ConfigError: 500,
}

TRANSPORT_STATUS = {
    "timeout": 504,
    "auth": 502,
    "not_found": 502,
    "bad_request": 400,
}


class ReportRequestSchema(Schema):
    rows = fields.List(fields.List(fields.Raw()), load_default=None)
    projectKey = ProjectKeyField(load_default=None)
    focus = fields.Str(load_default=None, allow_none=True)
    language = fields.Str(load_default=None, allow_none=True, validate=validate.OneOf(SUPPORTED_LANGUAGES))

    @validates_schema
    def validate_source(self, data, **kwargs):
        if (data.get('rows') is None) == (data.get('projectKey') is None):
            raise ValidationError("Provide exactly one of 'rows' or 'projectKey'.")


def status_for(exc):
    if isinstance(exc, TransportFailure):
        return TRANSPORT_STATUS.get(exc.kind, 502)
    for exc_type, status in ERROR_STATUS.items():
        if isinstance(exc, exc_type):
            return status
    return 500


def create_app(loader=None, client_factory=None, jira_factory=None):
    """
    Build the Flask app.
    Args:
        loader (ConfigLoader, optional): Configuration; read from config.yaml/env when omitted.
        client_factory (callable, optional): Returns a TextGenerationClient.
        jira_factory (callable, optional): Returns a JiraClient.
    """
    app = Flask(__name__)
    app.config['MAX_CONTENT_LENGTH'] = MAX_UPLOAD_BYTES
    loader = loader or ConfigLoader()
    report_options = loader.get_report_options()
    client_factory = client_factory or (lambda: OpenAITextGenerationClient(loader.get_openai_config()))
    jira_factory = jira_factory or (lambda: JiraClient(loader.get_jira_config()))

    @app.errorhandler(JiraAnalystError)
    def handle_analyst_error(exc):
        status = status_for(exc)
        contextual_log('warning' if status < 500 else 'error', f"[api] {type(exc).__name__}: {exc}", feature="api", operation="report", status="error", error_type=type(exc).__name__)
        body = {"error": type(exc).__name__, "message": str(exc)}
        if isinstance(exc, TransportFailure):
            body["kind"] = exc.kind
        return jsonify(body), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc):
        return jsonify({"error": "ValidationError", "message": exc.messages}), 400

    @app.route('/health', methods=['GET'])
    def health():
        return jsonify({"status": "ok", "version": __version__}), 200

    @app.route('/report', methods=['POST'])
    def report():
        if request.files:
            upload = request.files.get('file')
            if upload is None:
                raise SourceError("Multipart requests must include a 'file' field.")
            data = ReportRequestSchema().load({
                'focus': request.form.get('focus'),
                'language': request.form.get('language') or None,
                'rows': [],
            })
            raw_table = load_upload(upload.filename, upload.stream)
            source = "file"
        else:
            payload = request.get_json(silent=True)
            if not isinstance(payload, dict):
                raise ValidationError("Request body must be a JSON object.")
            data = ReportRequestSchema().load(payload)
            language = data.get('language') or report_options['language']
            if data.get('projectKey') is not None:
                raw_table = jira_factory().fetch_issue_table(data['projectKey'], language=language)
                source = "jira"
            else:
                raw_table = data['rows']
                source = "api"
        language = data.get('language') or report_options['language']
        client = client_factory()
        pipeline = ReportPipeline(client, language=language, timeout=getattr(client, 'timeout', None) or LLM_TIMEOUT, source=source)
        result = asyncio.run(pipeline.generate(raw_table, focus=data.get('focus')))
        return jsonify(result.to_dict()), 200

    return app


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description="Jira AI Analyst API Server")
    parser.add_argument('--port', type=int, default=int(os.environ.get('JIRAANALYST_API_PORT', 5050)), help='Port to run the API server on')
    parser.add_argument('--host', default=os.environ.get('JIRAANALYST_API_HOST', '127.0.0.1'))
    args = parser.parse_args()
    setup_logging()
    create_app().run(host=args.host, port=args.port)
