"""Vercel serverless function for tallying a voting round."""

import json
import logging
import sys
from pathlib import Path
from urllib.parse import urlparse

import httpx

# Add the project root to the path so we can import filmclub modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from filmclub.config import configure_logging, get_settings
from filmclub.parsers.base import BallotValidationError
from filmclub.parsers.json_export import JsonExportParser
from filmclub.tally import TallyError, tally_round, tally_snapshot

configure_logging()
logger = logging.getLogger(__name__)


def handler(request):
    """Handle incoming requests to tally a round.

    Accepts POST with a JSON body, either:
    - an inline round: {"candidates": [...], "ballots": [...], "roundId": ...}
    - a link to an export: {"url": "https://.../round.json"}

    Both forms take an optional "algorithm" (default: condorcet).

    Returns JSON with the tally result.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response(
            "",
            status=204,
            headers={
                "Access-Control-Allow-Origin": "*",
                "Access-Control-Allow-Methods": "POST, OPTIONS",
                "Access-Control-Allow-Headers": "Content-Type",
            },
        )

    if request.method != "POST":
        return create_response(
            {"error": "Method not allowed. Use POST."},
            status=405,
        )

    try:
        content_type = request.headers.get("content-type", "")
        if "application/json" not in content_type:
            return create_response(
                {"error": f"Unsupported content type: {content_type}"},
                status=400,
            )

        data = json.loads(request.body.decode("utf-8"))
        if not isinstance(data, dict):
            return create_response(
                {"error": "Request body must be a JSON object"},
                status=400,
            )
        algorithm = data.get("algorithm")
        if algorithm is not None and not isinstance(algorithm, str):
            return create_response(
                {"error": "'algorithm' must be a string"},
                status=400,
            )

        if data.get("url"):
            source, content = fetch_url(data["url"])
            result = tally_round(source, content, algorithm)
        elif "ballots" in data:
            try:
                snapshot = JsonExportParser().parse_data(data)
            except BallotValidationError as e:
                raise TallyError(str(e)) from e
            except ValueError as e:
                raise TallyError(f"Failed to parse ballots: {e}") from e
            result = tally_snapshot(snapshot, algorithm)
        else:
            return create_response(
                {"error": "Provide 'url' or 'candidates' and 'ballots' in request body"},
                status=400,
            )

        return create_response(result.to_dict())

    except TallyError as e:
        return create_response(
            {"error": str(e)},
            status=400,
        )
    except json.JSONDecodeError as e:
        return create_response(
            {"error": f"Invalid JSON: {e}"},
            status=400,
        )
    except Exception as e:
        logger.exception("Unhandled error while tallying")
        return create_response(
            {"error": f"Internal error: {e}"},
            status=500,
        )


def fetch_url(url: str) -> tuple[str, bytes]:
    """Fetch a round export from a URL.

    Returns (source_identifier, content_bytes).
    """
    # Validate URL
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https"):
        raise TallyError(f"Invalid URL scheme: {parsed.scheme}")

    try:
        timeout = get_settings().fetch_timeout
        with httpx.Client(follow_redirects=True, timeout=timeout) as client:
            response = client.get(url)
            response.raise_for_status()
            return url, response.content
    except httpx.HTTPStatusError as e:
        raise TallyError(f"HTTP error fetching URL: {e.response.status_code}")
    except httpx.RequestError as e:
        raise TallyError(f"Error fetching URL: {e}")


def create_response(body, status: int = 200, headers: dict | None = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
