import re
from typing import Optional

# Los modelos no siempre respetan "devuelve SOLO X", así que limpiamos la respuesta.
# Mejor dejar algo de relleno que borrar contenido real: los patrones son conservadores.

MODE_STRICT = "strict"
MODE_SUMMARY = "summary"

_SUMMARY_PREFIXES = [
    re.compile(r"^Here is\b.*?:\s*", re.IGNORECASE),
    re.compile(r"^Based on\b.*?:\s*", re.IGNORECASE),
]

_STRICT_PREFIXES = _SUMMARY_PREFIXES + [
    re.compile(r"^Sure\b.*?:\s*", re.IGNORECASE),
    re.compile(r"^The quote is\b.*?:\s*", re.IGNORECASE),
    re.compile(r"^The essence is\b.*?:\s*", re.IGNORECASE),
]

# Explicaciones añadidas al final; solo cuentan si empiezan una frase o una línea nueva
_EXPLANATION_SUFFIX = re.compile(
    r"(?:(?<=[.!?\"”])\s+|\s*\n\s*)(?:This quote captures|This reflects|In this passage)\b[\s\S]*$",
    re.IGNORECASE,
)

_CITATION = re.compile(r"\[\d+\]")


def _strip_prefixes(text: str, patterns) -> str:
    for pattern in patterns:
        text = pattern.sub("", text, count=1).strip()
    return text


def _strip_wrapping_quotes(text: str) -> str:
    if text.startswith('"'):
        text = text[1:]
    if text.endswith('"'):
        text = text[:-1]
    return text.strip()


def _clean_once(text: str, mode: str) -> str:
    if mode == MODE_SUMMARY:
        text = _strip_prefixes(text.strip(), _SUMMARY_PREFIXES)
        return _CITATION.sub("", text).strip()

    text = _strip_prefixes(text.strip(), _STRICT_PREFIXES)
    text = _EXPLANATION_SUFFIX.sub("", text)
    text = _CITATION.sub("", text).strip()
    return _strip_wrapping_quotes(text)


def normalize(text: Optional[str], mode: str = MODE_STRICT) -> str:
    """
    Elimina el relleno conversacional de una respuesta de un modelo.

    Args:
        text: Respuesta cruda del modelo (puede estar vacía)
        mode: "strict" para esencia, cita y prompt de imagen;
              "summary" para el resumen estructurado (conserva viñetas)

    Returns:
        El texto limpio. La limpieza se repite hasta que deja de cambiar,
        por lo que aplicarla dos veces da el mismo resultado.
    """
    if mode not in (MODE_STRICT, MODE_SUMMARY):
        raise ValueError(f"Modo de limpieza desconocido: {mode}")
    if not text:
        return ""

    previous = None
    cleaned = text
    while cleaned != previous:
        previous = cleaned
        cleaned = _clean_once(cleaned, mode)
    return cleaned


def clean_text(text: Optional[str]) -> str:
    return normalize(text, MODE_STRICT)


def clean_summary(text: Optional[str]) -> str:
    return normalize(text, MODE_SUMMARY)
