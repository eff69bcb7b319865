"""DataForSEO Labs client: build the ranked keywords task, call the API, flatten the answer.

Endpoint: POST /v3/dataforseo_labs/google/ranked_keywords/live

The live endpoint answers with an envelope whose items sit one level below
the result list (abbreviated)::

    {
        "tasks": [
            {
                "status_code": 20000,
                "result": [
                    {
                        "target": "example.com",
                        "items": [
                            {
                                "keyword_data": {
                                    "keyword": "example",
                                    "keyword_info": {
                                        "search_volume": 1300,
                                        "competition": 0.12,
                                        "cpc": 1.8
                                    }
                                },
                                "ranked_serp_element": {
                                    "serp_item": {
                                        "rank_absolute": 3,
                                        "url": "https://example.com/"
                                    }
                                }
                            }
                        ]
                    }
                ]
            }
        ]
    }
"""

import logging

import requests
from requests.auth import HTTPBasicAuth

from config import Settings
from errors import UpstreamProtocolError, UpstreamTransportFailure
from models import KeywordQuery, KeywordRecord, UpstreamTask

ORDER_BY = "keyword_data.keyword_info.search_volume,desc"
NO_RESULTS_MESSAGE = "No ranked keywords found for this domain"

_REQUEST_HEADERS = {"Content-Type": "application/json"}

logger = logging.getLogger(__name__)


def build_upstream_request(query: KeywordQuery) -> list[UpstreamTask]:
    """Map a validated query onto the one-task batch DataForSEO expects."""
    return [
        {
            "target": query["domain"],
            "location_name": query["location"],
            "language_name": query["language"],
            "limit": int(query["limit"]),
            "order_by": [ORDER_BY],
        }
    ]


def post_ranked_keywords(tasks: list[UpstreamTask], settings: Settings) -> object:
    """POST the task batch and return the decoded JSON body.

    Raises UpstreamTransportFailure for network errors and non-2xx statuses,
    UpstreamProtocolError when the body is not JSON.
    """
    try:
        response = requests.post(
            settings.endpoint,
            json=tasks,
            auth=HTTPBasicAuth(settings.dataforseo_login, settings.dataforseo_password),
            headers=_REQUEST_HEADERS,
        )
        response.raise_for_status()
    except requests.RequestException as exc:
        raise UpstreamTransportFailure(str(exc)) from exc

    try:
        return response.json()
    except ValueError as exc:
        raise UpstreamProtocolError() from exc


def _dig(data: object, *path: str) -> object:
    current = data
    for key in path:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current


def _keyword_metric(keyword_data: object, name: str) -> object:
    value = _dig(keyword_data, "keyword_info", name)
    if value is None:
        value = _dig(keyword_data, name)
    return value


def flatten_item(item: object) -> KeywordRecord:
    """Project one raw item; unreachable fields become None."""
    keyword_data = _dig(item, "keyword_data")
    serp_item = _dig(item, "ranked_serp_element", "serp_item")
    return {
        "keyword": _dig(keyword_data, "keyword"),
        "search_volume": _keyword_metric(keyword_data, "search_volume"),
        "competition": _keyword_metric(keyword_data, "competition"),
        "cpc": _keyword_metric(keyword_data, "cpc"),
        "position": _dig(serp_item, "rank_absolute"),
        "url": _dig(serp_item, "url"),
    }


def reshape_response(envelope: object, query: KeywordQuery) -> dict:
    """Turn the DataForSEO envelope into the client-facing result."""
    tasks = _dig(envelope, "tasks")
    if not isinstance(tasks, list) or not tasks or not tasks[0]:
        raise UpstreamProtocolError()

    task = tasks[0]
    result = _dig(task, "result")
    if not isinstance(result, list) or not result:
        status_message = _dig(task, "status_message")
        if status_message:
            logger.info("DATAFORSEO TASK: domain=%s status=%s", query["domain"], status_message)
        return {
            "domain": query["domain"],
            "message": NO_RESULTS_MESSAGE,
            "keywords": [],
        }

    items = _dig(result[0], "items")
    if not isinstance(items, list):
        items = []
    keywords = [flatten_item(item) for item in items]

    return {
        "domain": query["domain"],
        "location": query["location"],
        "language": query["language"],
        "total_keywords": len(keywords),
        "keywords": keywords,
    }


def fetch_ranked_keywords(query: KeywordQuery, settings: Settings) -> dict:
    """Pipeline: build task -> call DataForSEO -> reshape."""
    logger.info("Fetching keywords for domain: %s", query["domain"])
    envelope = post_ranked_keywords(build_upstream_request(query), settings)
    return reshape_response(envelope, query)
