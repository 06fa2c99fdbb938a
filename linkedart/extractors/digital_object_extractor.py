import json
import logging
from typing import Any, Callable, Dict, List, Optional, Set

from linkedart.extractors.base import AAT, NOT_FOUND, ExtractionResult, or_not_found
from linkedart.services.fetcher import FetchError
from linkedart.utils.graph import as_list, find_classified_as, iterative_search

logger = logging.getLogger(__name__)

WEB_PAGE_URI = AAT + "300264578"

IIIF_PRESENTATION = "http://iiif.io/api/presentation"
IIIF_PRESENTATION_2 = "http://iiif.io/api/presentation/2/context.json"
IIIF_PRESENTATION_3 = "http://iiif.io/api/presentation/3/context.json"

IMAGE_FIELDS = ("Primary Image", "Primary Thumbnail", "All Images", "All Thumbnails")


class DigitalObjectExtractor:
    """
    Web pages and IIIF manifests reachable through digitally_carried_by,
    and the images listed in the first IIIF manifest.
    """

    # --------------------------------------------------
    # Digital objects
    # --------------------------------------------------

    @staticmethod
    def content_key(digital_object: Dict[str, Any]) -> Optional[str]:
        access_points = digital_object.get("access_point")
        if isinstance(access_points, list) and access_points and isinstance(access_points[0], dict):
            return access_points[0].get("id")
        return digital_object.get("id")

    @staticmethod
    def _collect(
        data: Any,
        target: str,
        type_check: Callable[[Dict[str, Any], str], bool],
        seen: Set[Optional[str]],
        log_messages
    ) -> List[Dict[str, Any]]:

        collected: List[Dict[str, Any]] = []

        def accept(candidate: Any) -> bool:
            if not isinstance(candidate, dict) or not type_check(candidate, target):
                return False
            key = DigitalObjectExtractor.content_key(candidate)
            if key in seen:
                return False
            seen.add(key)
            collected.append(candidate)
            return True

        def visit(node):
            if not isinstance(node, dict):
                return

            if node.get("digitally_carried_by"):
                for digital_object in as_list(node["digitally_carried_by"]):
                    accept(digital_object)

            elif accept(node):
                log_messages.add(
                    f"Digital object {node.get('id')} was not embedded in a "
                    f"digitally_carried_by property as expected."
                )

        iterative_search(data, visit)
        return collected

    @staticmethod
    def extract_digital_objects(data, fetcher, log_messages) -> ExtractionResult:
        seen: Set[Optional[str]] = set()

        def is_web_page(obj, target):
            return bool(obj.get("classified_as")) and find_classified_as(obj["classified_as"], [target]) is not None

        def conforms_to(obj, target):
            entries = obj.get("conforms_to")
            if not entries:
                return False
            if not isinstance(entries, list):
                log_messages.add(f"conforms_to is not an array: {json.dumps(entries, default=str)}")
                return False
            return any(
                isinstance(entry, dict)
                and isinstance(entry.get("id"), str)
                and entry["id"].startswith(target)
                for entry in entries
            )

        collect = DigitalObjectExtractor._collect
        content_key = DigitalObjectExtractor.content_key

        web_pages = collect(data, WEB_PAGE_URI, is_web_page, seen, log_messages)

        manifests = collect(data, IIIF_PRESENTATION_3, conforms_to, seen, log_messages)
        if not manifests:
            manifests = collect(data, IIIF_PRESENTATION, conforms_to, seen, log_messages)

        logger.info(f"Digital objects: {len(web_pages)} web page(s), {len(manifests)} IIIF manifest(s)")

        return {
            "Web Pages": or_not_found(content_key(page) for page in web_pages),
            "IIIF Manifest": or_not_found(content_key(manifest) for manifest in manifests),
        }

    # --------------------------------------------------
    # IIIF images
    # --------------------------------------------------

    @staticmethod
    def empty_images() -> ExtractionResult:
        return {name: [NOT_FOUND] for name in IMAGE_FIELDS}

    @staticmethod
    def _id_of(value: Any, key: str) -> Optional[str]:
        if isinstance(value, str):
            return value
        if isinstance(value, dict):
            return value.get(key)
        return None

    @staticmethod
    def _collect_v2(manifest: Dict[str, Any], images: Dict[str, None], thumbnails: Dict[str, None]):
        id_of = DigitalObjectExtractor._id_of

        manifest_thumbnail = id_of(manifest.get("thumbnail"), "@id")
        if manifest_thumbnail:
            thumbnails[manifest_thumbnail] = None

        sequences = as_list(manifest.get("sequences"))
        canvases = sequences[0].get("canvases") or [] if sequences and isinstance(sequences[0], dict) else []

        for canvas in canvases:
            if not isinstance(canvas, dict):
                continue
            for image in as_list(canvas.get("images")):
                uri = id_of(image.get("resource"), "@id") if isinstance(image, dict) else None
                if uri:
                    images[uri] = None
            thumbnail = id_of(canvas.get("thumbnail"), "@id")
            if thumbnail:
                thumbnails[thumbnail] = None

    @staticmethod
    def _collect_v3(manifest: Dict[str, Any], images: Dict[str, None], thumbnails: Dict[str, None]):
        id_of = DigitalObjectExtractor._id_of

        for thumbnail in as_list(manifest.get("thumbnail")):
            uri = id_of(thumbnail, "id")
            if uri:
                thumbnails[uri] = None

        for canvas in as_list(manifest.get("items")):
            if not isinstance(canvas, dict):
                continue
            for page in as_list(canvas.get("items")):
                annotations = page.get("items") if isinstance(page, dict) else None
                for annotation in as_list(annotations):
                    uri = id_of(annotation.get("body"), "id") if isinstance(annotation, dict) else None
                    if uri:
                        images[uri] = None
            for thumbnail in as_list(canvas.get("thumbnail")):
                uri = id_of(thumbnail, "id")
                if uri:
                    thumbnails[uri] = None

    @staticmethod
    def extract_images_from_iiif(manifest_url: str, fetcher, log_messages) -> ExtractionResult:
        """
        Image and thumbnail URIs of a IIIF Presentation 2 or 3 manifest,
        in discovery order. The first of each is the primary one.
        """
        results = DigitalObjectExtractor.empty_images()

        try:
            response = fetcher(manifest_url)
            if not response.ok:
                log_messages.add(f"Failed to fetch IIIF Manifest data from {manifest_url}")
                return results
            manifest = response.json()
        except FetchError as e:
            log_messages.add(f"Error processing IIIF manifest: {e}")
            return results

        if not isinstance(manifest, dict):
            return results

        contexts = as_list(manifest.get("@context"))
        images: Dict[str, None] = {}
        thumbnails: Dict[str, None] = {}

        if IIIF_PRESENTATION_2 in contexts:
            DigitalObjectExtractor._collect_v2(manifest, images, thumbnails)
        elif IIIF_PRESENTATION_3 in contexts:
            DigitalObjectExtractor._collect_v3(manifest, images, thumbnails)
        else:
            log_messages.add(f"Unrecognised IIIF manifest context in {manifest_url}")

        images_list = list(images)
        thumbnails_list = list(thumbnails)

        results["Primary Image"] = or_not_found(images_list[:1])
        results["Primary Thumbnail"] = or_not_found(thumbnails_list[:1])
        results["All Images"] = or_not_found(images_list)
        results["All Thumbnails"] = or_not_found(thumbnails_list)

        logger.info(f"IIIF manifest {manifest_url}: {len(images_list)} image(s)")
        return results
