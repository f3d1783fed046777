"""Classification of reverse geocoding results into prefecture / city / town."""
from typing import Any, Dict, List, Optional, Sequence
from phototrail.core.config import GEOCODE_PLACE_TYPES
from phototrail.core.exceptions import GeocodingError
from phototrail.core.models import AdminAddress, ContextEntry, PlaceFeature
from phototrail.core.normalization import clean_text, normalize_chome

WARD_SUFFIX = "区"


def _localized(entry: Dict[str, Any], key: str) -> Optional[str]:
    # Prefer the Japanese label when the provider returns both
    return clean_text(entry.get(f"{key}_ja")) or clean_text(entry.get(key))


def parse_place_features(payload: Any) -> List[PlaceFeature]:
    """
    Parse a reverse geocoding response into typed place features.

    Args:
        payload: Decoded JSON response body

    Returns:
        Ranked list of PlaceFeature

    Raises:
        GeocodingError: If the payload is not a FeatureCollection
    """
    if not isinstance(payload, dict) or not isinstance(payload.get("features"), list):
        raise GeocodingError("Geocoding response is not a feature collection")

    features = []
    for raw in payload["features"]:
        if not isinstance(raw, dict):
            continue

        place_types = raw.get("place_type") or []
        if isinstance(place_types, str):
            place_types = [place_types]
        elif not isinstance(place_types, (list, tuple)):
            place_types = []

        raw_context = raw.get("context")
        if not isinstance(raw_context, (list, tuple)):
            raw_context = []

        context = []
        for ctx in raw_context:
            if isinstance(ctx, dict) and ctx.get("id"):
                context.append(ContextEntry(id=str(ctx["id"]), text=_localized(ctx, "text")))

        features.append(PlaceFeature(
            place_types=tuple(str(t) for t in place_types),
            text=_localized(raw, "text"),
            context=tuple(context),
        ))
    return features


def collect_place_names(features: Sequence[PlaceFeature]) -> Dict[str, Optional[str]]:
    """
    Collect the first-seen name for each place category.

    Categories missing from the ranked features are back-filled from the
    context chain of the top feature without overwriting anything found.

    Returns:
        Dict keyed by region, district, place, locality, neighborhood
        and address
    """
    names: Dict[str, Optional[str]] = {category: None for category in GEOCODE_PLACE_TYPES}

    for feature in features:
        category = feature.category
        if category not in names or names[category] is not None:
            continue
        names[category] = feature.text

    if features:
        for ctx in features[0].context:
            category = ctx.category
            if category in GEOCODE_PLACE_TYPES and names[category] is None:
                names[category] = ctx.text

    return names


def classify_admin_names(names: Dict[str, Optional[str]]) -> AdminAddress:
    """Apply ward/city precedence rules to collected place names."""
    region = names.get("region")
    district = names.get("district")
    place = names.get("place")
    locality = names.get("locality")
    neighborhood = names.get("neighborhood")

    # The address text is already a clean line such as "弥生町3丁目13番"
    chome = clean_text(normalize_chome(names.get("address") or ""))

    if locality and locality.endswith(WARD_SUFFIX):
        # Special ward tagged as locality
        city = locality
        town = neighborhood or chome
    elif district and district.endswith(WARD_SUFFIX):
        # Special ward tagged as district
        city = district
        town = neighborhood or chome or locality
    elif place and place != region:
        city = place
        town = neighborhood or chome or locality
    elif place == region and locality:
        # Some providers repeat the prefecture at place level (e.g. 東京都)
        city = locality
        town = neighborhood or chome
    else:
        city = place or district or locality
        town = neighborhood or chome

    if town and city and town == city:
        town = None

    return AdminAddress(prefecture=region, city=city, town=town)


def resolve_admin_address(features: Sequence[PlaceFeature]) -> AdminAddress:
    """
    Resolve a normalized administrative address from ranked place features.

    Never raises; missing categories propagate as None, so an empty feature
    list yields a fully unresolved address.
    """
    return classify_admin_names(collect_place_names(features))
