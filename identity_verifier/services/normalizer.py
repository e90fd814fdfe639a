"""Response normalizer - permissive repair of verification payloads."""

from typing import Any

EXTRACTED_DATA_FIELDS = ("name", "idNumber", "dob")


def normalize(raw: Any) -> Any:
    """
    Repair cosmetic inconsistencies in a verification payload.

    A missing or non-list ``explanation`` becomes an empty list, and each
    ``extractedData`` field that is missing or not a string becomes "".
    Every other field passes through for validation. The input is not
    mutated, and the function never raises.

    Args:
        raw (Any): Decoded JSON body.

    Returns:
        Any: The repaired payload, or ``raw`` itself if it is not an object.
    """
    if not isinstance(raw, dict):
        return raw

    payload = dict(raw)

    if not isinstance(payload.get("explanation"), list):
        payload["explanation"] = []

    extracted = payload.get("extractedData")
    repaired = dict(extracted) if isinstance(extracted, dict) else {}
    for field in EXTRACTED_DATA_FIELDS:
        if not isinstance(repaired.get(field), str):
            repaired[field] = ""
    payload["extractedData"] = repaired

    return payload
