"""Rebind the datasources of a Grafana dashboard model.

Dashboards exported from one Grafana instance carry that instance's
datasource identifier on every panel and templating variable. Provisioning
the same model elsewhere means pointing every one of them at the new
datasource, while removing the datasource-selector variables so the target
instance can offer its own datasources.
"""

import json

from typing import Any

from src.grafana.errors import ParseError
from src.helpers.constants import DATASOURCE_VARIABLE_TYPE
from src.helpers.http_models import JsonArray, JsonObject, JsonValue
from src.helpers.logging import get_logger


logger = get_logger(__name__)


def datasource_ref(uid: str, datasource_type: str | None = None) -> JsonValue:
    """Build a datasource target.

    Grafana 8.3+ models reference datasources as ``{"type", "uid"}`` objects;
    older models use a bare name or UID string.

    Example:
        ```python
        datasource_ref("P1809F7CD0C75ACF3")  # "P1809F7CD0C75ACF3"
        datasource_ref("P1809F7CD0C75ACF3", "prometheus")
        # {"type": "prometheus", "uid": "P1809F7CD0C75ACF3"}
        ```
    """
    if datasource_type:
        return {"type": datasource_type, "uid": uid}
    return uid


def _rebind_panels(panels: JsonArray, datasource: JsonValue) -> JsonArray:
    rebound: JsonArray = []
    for panel in panels:
        match panel:
            case dict():
                rebound.append({**panel, "datasource": datasource})
            case _:
                logger.debug("Dropping non-object panel: %r", panel)
    return rebound


def _rebind_variables(variables: JsonArray, datasource: JsonValue) -> JsonArray:
    rebound: JsonArray = []
    for variable in variables:
        match variable:
            case {"type": str(kind)} if kind == DATASOURCE_VARIABLE_TYPE:
                logger.debug("Dropping datasource variable %r", variable.get("name"))
            case {"type": str()}:
                rebound.append({**variable, "datasource": datasource})
            case _:
                logger.debug("Dropping malformed templating variable: %r", variable)
    return rebound


def rewrite_dashboard(document: JsonObject, datasource: JsonValue) -> JsonObject:
    """Point every panel and templating variable at ``datasource``.

    - Every object in ``panels`` gets ``datasource`` set; other entries are dropped.
    - Every object in ``templating.list`` with a string ``type`` gets
      ``datasource`` set; ``type == "datasource"`` variables and entries
      without a string ``type`` are dropped.
    - Everything else is passed through. Documents without a ``panels`` array
      are returned as they are.

    The input is not mutated.

    Args:
        document: Parsed dashboard model
        datasource: Datasource name/UID string or reference object

    Returns:
        Rewritten dashboard model
    """
    match document.get("panels"):
        case list(panels):
            rewritten = {**document, "panels": _rebind_panels(panels, datasource)}
        case _:
            return document

    match rewritten.get("templating"):
        case {"list": list(variables)} as templating:
            rewritten["templating"] = {
                **templating,
                "list": _rebind_variables(variables, datasource),
            }

    return rewritten


def load_dashboard(raw: str | bytes) -> JsonObject:
    """Parse dashboard JSON text into a dashboard model.

    Raises:
        ParseError: If ``raw`` is not UTF-8 JSON or not a JSON object
    """
    try:
        text = raw.decode() if isinstance(raw, bytes) else raw
        document: Any = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        msg = f"Dashboard is not valid JSON: {e}"
        raise ParseError(msg) from e

    if not isinstance(document, dict):
        msg = f"Dashboard must be a JSON object, got {type(document).__name__}"
        raise ParseError(msg)
    return document


def dump_dashboard(document: JsonObject) -> str:
    """Serialize a dashboard model as compact JSON."""
    return json.dumps(document, separators=(",", ":"), ensure_ascii=False)


def rewrite_datasource(raw: str | bytes, datasource: JsonValue) -> str:
    """Rewrite the datasources of a serialized dashboard model.

    Args:
        raw: Dashboard JSON text
        datasource: Datasource name/UID string or reference object

    Returns:
        Rewritten dashboard JSON text; the input text itself when the
        dashboard has no ``panels`` array

    Raises:
        ParseError: If ``raw`` is not a JSON object

    Example:
        ```python
        raw = '{"panels":[{"datasource":"old"}]}'
        rewrite_datasource(raw, "new")  # '{"panels":[{"datasource":"new"}]}'
        ```
    """
    document = load_dashboard(raw)
    if not isinstance(document.get("panels"), list):
        logger.info("Dashboard has no panels array, leaving datasources as they are")
        return raw.decode() if isinstance(raw, bytes) else raw

    rewritten = rewrite_dashboard(document, datasource)
    logger.info(
        "Rebound %d panels to datasource %s",
        len(rewritten["panels"]),
        json.dumps(datasource),
    )
    return dump_dashboard(rewritten)


__all__ = [
    "datasource_ref",
    "dump_dashboard",
    "load_dashboard",
    "rewrite_dashboard",
    "rewrite_datasource",
]
