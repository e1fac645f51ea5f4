"""Exportación JSON del reporte de pases.

El archivo incluye IP, coordenadas y pases (con todos sus campos originales).
"""

from __future__ import annotations

import json
from pathlib import Path

from core.domain.models import FlyoverReport


def export_report_json(*, report: FlyoverReport, output_path: Path) -> Path:
    """Exporta `FlyoverReport` a JSON UTF-8 con formato estable."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(report_to_json(report) + "\n", encoding="utf-8")
    return output_path


def report_to_json(report: FlyoverReport) -> str:
    payload = report.model_dump(mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)
