"""Local development server for the news summarization API."""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure project root is on sys.path
project_root = Path(__file__).parent.parent.parent.parent.parent.absolute()
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from src.functions.news_summarization.core.config import load_config
from src.functions.news_summarization.functions.main import create_app


def main() -> None:
    config = load_config()
    app = create_app(config)
    port = config.service.port
    print(f"Starting local news summarization server on http://localhost:{port}")
    print(f"Health check: http://localhost:{port}/health")
    print(
        "Test with: curl -X POST http://localhost:{port}/api/articles/summarize/english "
        "-H 'Content-Type: application/json' -d '{{\"articles\": [...]}}'".format(port=port)
    )
    print("")
    app.run(host=config.service.host, port=port, debug=config.service.environment == "development")


if __name__ == "__main__":
    main()
