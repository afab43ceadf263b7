"""Exportación de etiquetas/protocolos y resultados.

Por qué está en adapters:
- Escribir archivos es infraestructura; el Core solo conoce `LabelResponse`.
"""

from __future__ import annotations

import base64
import binascii
import json
from pathlib import Path

from pydantic import BaseModel

from dpd_pl.core.domain.models import LabelResponse, ProtocolResponse
from dpd_pl.core.errors import ServiceError

_EXTENSIONS = {"PDF": ".pdf", "ZPL": ".zpl", "EPL": ".epl"}


def extension_for(label_format: str) -> str:
    return _EXTENSIONS.get(label_format.upper(), ".bin")


def decode_document(data: str) -> bytes:
    """Decodifica el documento base64 devuelto por DPD."""

    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ServiceError("Document data is not valid base64", "INVALID_RESPONSE", cause=exc) from exc


def export_document(*, data: str, output_path: Path, label_format: str = "PDF") -> Path:
    """Escribe el documento; añade la extensión del formato si falta."""

    if not output_path.suffix:
        output_path = output_path.with_suffix(extension_for(label_format))
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(decode_document(data))
    return output_path


def export_label(*, label: LabelResponse, output_path: Path) -> Path:
    return export_document(data=label.label_data, output_path=output_path, label_format=label.format)


def export_protocol(*, protocol: ProtocolResponse, output_path: Path) -> Path:
    return export_document(data=protocol.protocol_data, output_path=output_path, label_format="PDF")


def export_json(*, model: BaseModel | list[BaseModel], output_path: Path) -> Path:
    """Exporta resultados a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(to_json(model) + "\n", encoding="utf-8")
    return output_path


def to_json(model: BaseModel | list[BaseModel] | None) -> str:
    if model is None:
        payload: object = None
    elif isinstance(model, list):
        payload = [m.model_dump(mode="json", by_alias=True) for m in model]
    else:
        payload = model.model_dump(mode="json", by_alias=True)
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
