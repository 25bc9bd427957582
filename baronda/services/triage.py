"""Threat triage for incoming reports using a hosted language model."""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol

import google.generativeai as genai

from baronda.core.config import settings
from baronda.models.report import ThreatLevel

logger = logging.getLogger(__name__)

TRIAGE_PROMPT = """Anda adalah asisten AI yang berspesialisasi dalam melakukan triase laporan untuk menilai tingkat ancamannya.

Analisis laporan berikut dan tentukan tingkat ancamannya (rendah, sedang, atau tinggi) berdasarkan konten dan kategorinya (jika tersedia).

Berikan alasan singkat untuk penilaian Anda dalam Bahasa Indonesia.

Jawab hanya dengan JSON: {{"threatLevel": "low" | "medium" | "high", "reason": "..."}}

Laporan:
{category_line}Teks: {report_text}"""

_JSON_BLOCK = re.compile(r"\{.*\}", re.DOTALL)


@dataclass
class TriageResult:
    threat_level: ThreatLevel
    reason: str


class TriageProvider(Protocol):
    def generate_text(self, prompt: str) -> str:
        ...


class GeminiTriageProvider:
    def __init__(self) -> None:
        genai.configure(api_key=settings.GEMINI_API_KEY)
        self.model = genai.GenerativeModel(settings.GEMINI_MODEL)

    def generate_text(self, prompt: str) -> str:
        result = self.model.generate_content(prompt)
        return getattr(result, "text", str(result))


def build_prompt(report_text: str, category: Optional[str] = None) -> str:
    category_line = f"Kategori: {category}\n" if category else ""
    return TRIAGE_PROMPT.format(category_line=category_line, report_text=report_text)


def parse_triage(raw: str) -> Optional[TriageResult]:
    """Pull ``{threatLevel, reason}`` out of the model's reply; None if it is unusable."""
    match = _JSON_BLOCK.search(raw or "")
    if not match:
        return None
    try:
        payload = json.loads(match.group(0))
    except json.JSONDecodeError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        level = ThreatLevel(str(payload.get("threatLevel", "")).strip().lower())
    except ValueError:
        return None
    return TriageResult(threat_level=level, reason=str(payload.get("reason") or "").strip())


_provider: Optional[TriageProvider] = None


def get_triage_provider() -> Optional[TriageProvider]:
    """Lazily built Gemini provider; None when no API key is configured."""
    global _provider
    if _provider is None and settings.GEMINI_API_KEY:
        _provider = GeminiTriageProvider()
    return _provider


def triage_report(
    report_text: str,
    category: Optional[str] = None,
    provider: Optional[TriageProvider] = None,
) -> Optional[TriageResult]:
    provider = provider or get_triage_provider()
    if provider is None:
        logger.info("Triage skipped: GEMINI_API_KEY is not set")
        return None
    try:
        raw = provider.generate_text(build_prompt(report_text, category))
    except Exception:
        logger.exception("Triage request failed")
        return None
    result = parse_triage(raw)
    if result is None:
        logger.warning("Triage reply could not be parsed: %.200s", raw)
    return result
