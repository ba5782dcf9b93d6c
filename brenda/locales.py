"""
Locale variants and the persona text attached to each of them.

One table serves both the text chat relay (short written persona) and the
realtime voice session (spoken instructions), so the two cannot drift apart.
"""

from enum import Enum
from typing import Iterable, NamedTuple, Optional


class LocaleVariant(str, Enum):
    """Supported locale variants."""
    EN_US = "en-US"
    EN_GB = "en-GB"
    ES_ES = "es-ES"
    ES_419 = "es-419"


DEFAULT_LOCALE = LocaleVariant.EN_US


class Persona(NamedTuple):
    chat: str
    voice: str


PERSONAS = {
    LocaleVariant.EN_US: Persona(
        chat="You are Brenda. Respond in American English with a warm, natural tone.",
        voice=(
            "You are a voice assistant. Speak American English.\n"
            "- Prefer US vocabulary (cell phone, elevator, truck, gas).\n"
            "Be warm, natural, and concise."
        ),
    ),
    LocaleVariant.EN_GB: Persona(
        chat="You are Brenda. Respond in British English with a warm, natural tone.",
        voice=(
            "You are a voice assistant. Speak British English.\n"
            "- Prefer UK vocabulary (mobile, lift, lorry, petrol).\n"
            "- Use natural UK phrasing and spelling when transcribing.\n"
            "Be warm, natural, and concise."
        ),
    ),
    LocaleVariant.ES_ES: Persona(
        chat=(
            "Eres Brenda. Responde en español de España (castellano peninsular), "
            "con tono cálido y natural."
        ),
        voice=(
            "Eres una asistente de voz. Habla en español de España (castellano peninsular).\n"
            "- Pronunciación y entonación propias de España.\n"
            "- Usa “vosotros”, “vale”, “de acuerdo”.\n"
            "- Vocabulario preferido: “ordenador”, “móvil”, “coche”, “zumo”.\n"
            "- Pronuncia los términos técnicos en español: \"Wüifi\", \"CeDe\", \"GePeEse\".\n"
            "- Evita voseo (“vos”) y expresiones típicas de Latinoamérica "
            "(“chévere”, “computadora”, “carro”, etc.).\n"
            "Responde de forma natural, cálida y concisa."
        ),
    ),
    LocaleVariant.ES_419: Persona(
        chat=(
            "Eres Brenda. Responde en español latinoamericano neutro, "
            "con tono cálido y natural."
        ),
        voice=(
            "Eres una asistente de voz. Habla en español latinoamericano neutro.\n"
            "- Usa “ustedes” (no “vosotros”).\n"
            "- Vocabulario preferido: “computadora”, “celular”, “carro”, “jugo”.\n"
            "- Pronuncia los términos técnicos en inglés: \"Güayfai\", \"SiDi\", \"Yipies\".\n"
            "- Evita modismos muy locales de un solo país.\n"
            "Responde de forma natural, cálida y concisa."
        ),
    ),
}


def resolve_locale(tag: Optional[str]) -> LocaleVariant:
    """Map a locale tag to a supported variant, falling back to en-US."""
    try:
        return LocaleVariant(tag)
    except ValueError:
        return DEFAULT_LOCALE


def chat_persona(tag: Optional[str]) -> str:
    return PERSONAS[resolve_locale(tag)].chat


def voice_instructions(tag: Optional[str]) -> str:
    return PERSONAS[resolve_locale(tag)].voice


def detect_locale(languages: Iterable[str]) -> LocaleVariant:
    """
    Pick a variant from an ordered list of language preferences.

    Only the first non-empty tag is considered. Spanish maps to es-ES for the
    ES region and to es-419 otherwise; English maps to en-GB for the GB region
    and to en-US otherwise. Any other language falls back to en-US.
    """
    first = next((lang for lang in languages if lang), "en-US")
    lang, _, region = first.replace("_", "-").partition("-")
    lang = lang.lower()
    region = region.split("-")[0].upper()

    if lang == "es":
        return LocaleVariant.ES_ES if region == "ES" else LocaleVariant.ES_419
    if lang == "en":
        return LocaleVariant.EN_GB if region == "GB" else LocaleVariant.EN_US
    return DEFAULT_LOCALE
