# src/utils/odontogram.py
"""
Tooth catalogs and the sparse tooth-condition map.

A map entry looks like ``{"status": "caries", "surfaces": ["top"], "notes": "..."}``
keyed by the tooth number as a string. A tooth without an entry is healthy and
unannotated; an explicit healthy entry only exists when it carries notes or
surfaces.
"""
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Optional, Union
from models.odontogram import ToothStatus, ToothSurface

# FDI numbering, in chart order (patient's right to left)
ADULT_UPPER = [18, 17, 16, 15, 14, 13, 12, 11, 21, 22, 23, 24, 25, 26, 27, 28]
ADULT_LOWER = [48, 47, 46, 45, 44, 43, 42, 41, 31, 32, 33, 34, 35, 36, 37, 38]
PEDIATRIC_UPPER = [55, 54, 53, 52, 51, 61, 62, 63, 64, 65]
PEDIATRIC_LOWER = [85, 84, 83, 82, 81, 71, 72, 73, 74, 75]

ADULT_TEETH = ADULT_UPPER + ADULT_LOWER
PEDIATRIC_TEETH = PEDIATRIC_UPPER + PEDIATRIC_LOWER

# condition -> (treatment type, base cost)
TREATMENT_FOR_CONDITION = {
    ToothStatus.CARIES: ("Empaste", Decimal("100")),
    ToothStatus.EXTRACTION: ("Extracción", Decimal("120")),
    ToothStatus.ROOT_CANAL: ("Tratamiento de Conducto", Decimal("600")),
    ToothStatus.CROWN: ("Corona", Decimal("500")),
    ToothStatus.IMPLANT: ("Implante", Decimal("1200")),
}

ToothMap = Dict[str, Dict[str, Any]]


class SuggestedTreatment(NamedTuple):
    tooth: int
    condition: ToothStatus
    type: str
    cost: Decimal
    notes: Optional[str] = None


def tooth_catalog(is_pediatric: bool) -> Dict[str, List[int]]:
    if is_pediatric:
        return {"upper": list(PEDIATRIC_UPPER), "lower": list(PEDIATRIC_LOWER)}
    return {"upper": list(ADULT_UPPER), "lower": list(ADULT_LOWER)}


def is_valid_tooth(tooth: Union[int, str], is_pediatric: bool) -> bool:
    try:
        number = int(tooth)
    except (TypeError, ValueError):
        return False
    return number in (PEDIATRIC_TEETH if is_pediatric else ADULT_TEETH)


def normalize_surfaces(
    surfaces: Optional[Iterable[Union[ToothSurface, str]]],
) -> List[str]:
    """Validate surfaces and drop duplicates, keeping the first occurrence"""
    result: List[str] = []
    for surface in surfaces or ():
        value = ToothSurface(surface).value
        if value not in result:
            result.append(value)
    return result


def toggle_surface(
    surfaces: Optional[Iterable[Union[ToothSurface, str]]],
    surface: Union[ToothSurface, str],
) -> List[str]:
    current = normalize_surfaces(surfaces)
    value = ToothSurface(surface).value
    if value in current:
        return [s for s in current if s != value]
    return current + [value]


def _field(condition: Any, name: str) -> Any:
    if isinstance(condition, Mapping):
        return condition.get(name)
    return getattr(condition, name, None)


def build_condition(
    status: Union[ToothStatus, str],
    surfaces: Optional[Iterable[Union[ToothSurface, str]]] = None,
    notes: Optional[str] = None,
) -> Optional[Dict[str, Any]]:
    """Stored form of one tooth, or None when there is nothing to store"""
    status = ToothStatus(status)
    surface_list = normalize_surfaces(surfaces)
    notes = (notes or "").strip() or None

    if status == ToothStatus.HEALTHY and not notes and not surface_list:
        return None

    condition: Dict[str, Any] = {"status": status.value}
    if notes:
        condition["notes"] = notes
    if surface_list:
        condition["surfaces"] = surface_list
    return condition


def set_tooth_condition(
    teeth: Optional[Mapping[str, Any]],
    tooth: Union[int, str],
    status: Union[ToothStatus, str],
    surfaces: Optional[Iterable[Union[ToothSurface, str]]] = None,
    notes: Optional[str] = None,
) -> ToothMap:
    """Return a new map with one tooth set; the input map is left untouched"""
    key = str(int(tooth))
    updated = normalize_tooth_map(teeth)
    condition = build_condition(status, surfaces, notes)
    if condition is None:
        updated.pop(key, None)
    else:
        updated[key] = condition
    return updated


def normalize_tooth_map(teeth: Optional[Mapping[str, Any]]) -> ToothMap:
    """Canonical stored form of a whole map (string keys, minimal entries)"""
    normalized: ToothMap = {}
    for tooth, condition in (teeth or {}).items():
        stored = build_condition(
            _field(condition, "status"),
            _field(condition, "surfaces"),
            _field(condition, "notes"),
        )
        if stored is not None:
            normalized[str(int(tooth))] = stored
    return normalized


def suggest_treatments(teeth: Optional[Mapping[str, Any]]) -> List[SuggestedTreatment]:
    """Treatments implied by the conditions in a tooth map.

    Healthy teeth and existing fillings need nothing. The result is ordered by
    tooth number, so it does not depend on the map's iteration order.
    """
    suggestions = []
    for tooth, condition in sorted(
        (teeth or {}).items(), key=lambda item: int(item[0])
    ):
        status = ToothStatus(_field(condition, "status"))
        if status not in TREATMENT_FOR_CONDITION:
            continue
        treatment_type, cost = TREATMENT_FOR_CONDITION[status]
        suggestions.append(
            SuggestedTreatment(
                tooth=int(tooth),
                condition=status,
                type=treatment_type,
                cost=cost,
                notes=_field(condition, "notes"),
            )
        )
    return suggestions
