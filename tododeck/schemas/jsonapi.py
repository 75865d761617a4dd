import json
from typing import Any, Dict, List, Optional, Tuple
from pydantic import BaseModel, ValidationError
from tododeck.api.errors import IdMismatch, InvalidJson, MissingData, TypeMismatch, ValidationFailed

class ResourcePayload(BaseModel):
    """The parts of a JSON:API write document handed to the domain layer"""
    attributes: Any = {}
    relationships: Optional[Any] = None

def parse_document(body: bytes, expected_type: str, expected_id: Optional[str] = None) -> ResourcePayload:
    """
    Validate the envelope of a JSON:API create or update body.

    Args:
        body: Raw request body
        expected_type: Resource type the endpoint accepts, e.g. "todos"
        expected_id: Path id for updates; data.id must equal it

    Raises:
        InvalidJson: body is not JSON
        MissingData: body is not an object with a data member
        TypeMismatch: data.type is absent or names another resource
        IdMismatch: data.id differs from the path id
    """
    try:
        document = json.loads(body)
    except ValueError:
        raise InvalidJson()

    if not isinstance(document, dict) or "data" not in document:
        raise MissingData()

    data = document["data"]
    if not isinstance(data, dict) or data.get("type") != expected_type:
        raise TypeMismatch()

    if expected_id is not None and data.get("id") != expected_id:
        raise IdMismatch()

    return ResourcePayload(
        attributes=data.get("attributes") or {},
        relationships=data.get("relationships")
    )

def relationship_id(relationships: Any, name: str) -> Tuple[bool, Optional[str]]:
    """
    Read a to-one relationship linkage.

    Returns (supplied, id): supplied is False when the relationship is absent
    or carries no usable linkage; id is None when the linkage is null.
    """
    if not isinstance(relationships, dict):
        return False, None
    relationship = relationships.get(name)
    if not isinstance(relationship, dict) or "data" not in relationship:
        return False, None

    linkage = relationship["data"]
    if linkage is None:
        return True, None
    if isinstance(linkage, dict) and linkage.get("id") is not None:
        return True, str(linkage["id"])
    return False, None

def check_attribute_map(model, attribute_map: Dict[str, str]) -> None:
    """Fail at import time if a wire attribute names a column the model lacks"""
    columns = set(model.__table__.columns.keys())
    unknown = set(attribute_map) - columns
    if unknown:
        raise RuntimeError(f"{model.__name__} has no columns {sorted(unknown)}")

def humanize(key: str) -> str:
    return key.replace("-", " ").replace("_", " ").capitalize()

def validation_messages(error: ValidationError) -> List[str]:
    """Full messages for a pydantic error, one per offending attribute"""
    messages = {}
    for item in error.errors():
        field = str(item["loc"][0]) if item["loc"] else "base"
        if field in messages:
            continue

        if item["type"] == "missing":
            reason = "can't be blank"
        elif item["type"] == "value_error" and "error" in item.get("ctx", {}):
            reason = str(item["ctx"]["error"])
        else:
            reason = item["msg"][:1].lower() + item["msg"][1:]
        messages[field] = f"{humanize(field)} {reason}"
    return list(messages.values())

def validate_attributes(schema, attributes: Any):
    """Validate wire attributes against ``schema`` or raise ValidationFailed"""
    try:
        return schema.model_validate(attributes)
    except ValidationError as e:
        raise ValidationFailed(validation_messages(e))
