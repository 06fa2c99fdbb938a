import logging
from typing import Any, Callable, Dict, Optional

from linkedart.analyzer.parser import get_entity_hierarchy, get_parsed_entity_stats, parse_entity
from linkedart.config import get_settings
from linkedart.extractors.base import ExtractionResult, is_found
from linkedart.extractors.context_extractor import ContextExtractor
from linkedart.extractors.digital_object_extractor import DigitalObjectExtractor
from linkedart.extractors.identification_extractor import IdentificationExtractor
from linkedart.extractors.physical_extractor import PhysicalExtractor
from linkedart.extractors.production_extractor import ProductionExtractor
from linkedart.extractors.reference_extractor import ReferenceExtractor
from linkedart.extractors.statement_extractor import StatementExtractor
from linkedart.models.log_messages import LogMessages
from linkedart.models.parsed import VisitedSet
from linkedart.services.fetcher import (
    AnalysisCancelled,
    FetchError,
    HttpFetcher,
    MemoizedFetcher,
    fetch_json,
)
from linkedart.utils.graph import detect_entity_type, primary_type
from linkedart.utils.uris import expand_numeric_ids

logger = logging.getLogger(__name__)

Extractor = Callable[..., ExtractionResult]

# --------------------------------------------------
# GENERIC EXTRACTORS (every entity type)
# --------------------------------------------------

GENERIC_EXTRACTORS = (
    IdentificationExtractor.extract_names,
    IdentificationExtractor.extract_identifiers,
    IdentificationExtractor.extract_work_type,
    StatementExtractor.extract_statements,
    ReferenceExtractor.extract_references,
)


# --------------------------------------------------
# TYPE SPECIFIC EXTRACTION
# --------------------------------------------------

def _extract_images(data, fetcher, log_messages, results: ExtractionResult):
    results.update(DigitalObjectExtractor.extract_digital_objects(data, fetcher, log_messages))

    manifests = results.get("IIIF Manifest")
    if is_found(manifests):
        results.update(
            DigitalObjectExtractor.extract_images_from_iiif(manifests[0], fetcher, log_messages)
        )
    else:
        results.update(DigitalObjectExtractor.empty_images())


def _extract_human_made_object(data, fetcher, log_messages, results: ExtractionResult):
    for extractor in (
        ProductionExtractor.extract_creators,
        ProductionExtractor.extract_timespan,
        PhysicalExtractor.extract_dimensions,
        PhysicalExtractor.extract_materials,
    ):
        results.update(extractor(data, fetcher, log_messages))

    _extract_images(data, fetcher, log_messages, results)


def _extract_digital_object(data, fetcher, log_messages, results: ExtractionResult):
    _extract_images(data, fetcher, log_messages, results)

    if data.get("created_by"):
        results.update(ProductionExtractor.extract_creators(data, fetcher, log_messages))


def _extract_person(data, fetcher, log_messages, results: ExtractionResult):
    results.update(ContextExtractor.extract_person(data, fetcher, log_messages))


def _extract_group(data, fetcher, log_messages, results: ExtractionResult):
    results.update(ContextExtractor.extract_group(data, fetcher, log_messages))


def _extract_place(data, fetcher, log_messages, results: ExtractionResult):
    results.update(ContextExtractor.extract_place(data, fetcher, log_messages))


def _extract_activity(data, fetcher, log_messages, results: ExtractionResult):
    results.update(ContextExtractor.extract_activity(data, fetcher, log_messages, existing=results))


TYPE_EXTRACTORS: Dict[str, Callable[..., None]] = {
    "HumanMadeObject": _extract_human_made_object,
    "DigitalObject": _extract_digital_object,
    "Person": _extract_person,
    "Group": _extract_group,
    "Place": _extract_place,
    "Activity": _extract_activity,
    "Event": _extract_activity,
}


# --------------------------------------------------
# RESULT SHAPES
# --------------------------------------------------

def _failure(error: str, log_messages: Optional[LogMessages] = None) -> Dict[str, Any]:
    return {
        "success": False,
        "error": error,
        "results": {},
        "log_messages": log_messages.as_list() if log_messages is not None else [],
    }


def _cancelled(log_messages: Optional[LogMessages] = None) -> Dict[str, Any]:
    result = _failure(str(AnalysisCancelled()), log_messages)
    result["cancelled"] = True
    return result


# --------------------------------------------------
# ORCHESTRATOR
# --------------------------------------------------

def analyze_document(
    data: Any,
    url: Optional[str],
    fetcher,
    log_messages: Optional[LogMessages] = None
) -> Dict[str, Any]:
    """
    Run the generic extractors, then the subset for the document's type.
    Extractors absorb their own failures; only cancellation escapes.
    """
    log_messages = log_messages if log_messages is not None else LogMessages()

    if not isinstance(data, dict):
        return _failure("Document is not a JSON object", log_messages)

    data = expand_numeric_ids(data, log_messages)
    entity_info = detect_entity_type(data)

    results: ExtractionResult = {
        "Entity Type": [entity_info["friendly_name"]],
        "Entity ID": [data.get("id") or url],
    }

    for extractor in GENERIC_EXTRACTORS:
        results.update(extractor(data, fetcher, log_messages))

    type_extractor = TYPE_EXTRACTORS.get(primary_type(data.get("type")))
    if type_extractor is not None:
        type_extractor(data, fetcher, log_messages, results)
    else:
        logger.info(f"No type specific extractors for {entity_info['type']}")

    logger.info(f"✅ Extracted {len(results)} field(s), {len(log_messages)} log message(s)")

    return {
        "success": True,
        "url": url,
        "entity_type": entity_info["friendly_name"],
        "results": results,
        "log_messages": log_messages.as_list(),
    }


def analyze_url(url: str, fetcher=None) -> Dict[str, Any]:
    """
    Fetch a Linked Art document and extract its descriptive fields.

    Pass an HttpFetcher to keep a handle for cancelling the run from
    another thread.
    """
    fetcher = fetcher or HttpFetcher()
    log_messages = LogMessages()

    try:
        data = fetch_json(fetcher, url)
        return analyze_document(data, url, MemoizedFetcher(fetcher), log_messages)

    except AnalysisCancelled:
        logger.info(f"Analysis of {url} cancelled")
        return _cancelled(log_messages)

    except FetchError as e:
        logger.warning(f"Analysis of {url} failed: {e}")
        return _failure(str(e), log_messages)

    except Exception as e:
        logger.exception("🔥 ORCHESTRATOR HARD FAILURE")
        return _failure(str(e), log_messages)


def parse_url(
    url: str,
    fetcher=None,
    max_depth: Optional[int] = None,
    resolve_references: bool = True
) -> Dict[str, Any]:
    """
    Fetch a document and build the complete ParsedNode tree for it.
    """
    fetcher = fetcher or HttpFetcher()
    log_messages = LogMessages()
    max_depth = get_settings().max_depth if max_depth is None else max_depth

    try:
        data = expand_numeric_ids(fetch_json(fetcher, url), log_messages)

        parsed = parse_entity(
            data,
            fetcher,
            log_messages,
            resolve_references=resolve_references,
            max_depth=max_depth,
            current_depth=0,
            visited=VisitedSet(),
        )

    except AnalysisCancelled:
        logger.info(f"Parse of {url} cancelled")
        return _cancelled(log_messages)

    except FetchError as e:
        logger.warning(f"Parse of {url} failed: {e}")
        return _failure(str(e), log_messages)

    return {
        "success": True,
        "url": url,
        "parsed": parsed,
        "stats": get_parsed_entity_stats(parsed),
        "hierarchy": get_entity_hierarchy(parsed),
        "log_messages": log_messages.as_list(),
    }
