"""Deployment wrapper for the news summarization Cloud Function."""

from __future__ import annotations

import sys
from pathlib import Path

import flask
import functions_framework

project_root = Path(__file__).resolve().parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.news_summarization.functions.main import create_app

app = create_app()


@functions_framework.http
def news_summarization_handler(request: flask.Request) -> flask.Response:
    """Route a Cloud Functions request through the summarization API."""

    with app.request_context(request.environ):
        return app.full_dispatch_request()
