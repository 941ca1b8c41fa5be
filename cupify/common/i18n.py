from typing import Dict

LANGUAGES = ("ar", "en")
DEFAULT_LANGUAGE = "ar"

MESSAGES: Dict[str, Dict[str, str]] = {
    "store_closed": {
        "ar": "المتجر مغلق حالياً",
        "en": "Store is currently closed",
    },
    "unknown_color": {
        "ar": "اللون {color_code} غير موجود",
        "en": "Color {color_code} not found",
    },
    "insufficient_stock": {
        "ar": "عذراً، الكمية المتوفرة من \"{name}\" غير كافية حالياً.",
        "en": "Sorry, insufficient stock for \"{name}\".",
    },
    "activity_order": {
        "ar": "{name} من {city} طلب طقم {pack_size} قطع! ✨",
        "en": "{name} from {city} ordered {pack_size} pieces! ✨",
    },
    "activity_low_stock": {
        "ar": "بقي {stock} قطع فقط من \"{name}\"! ⚡",
        "en": "Only {stock} left of \"{name}\"! ⚡",
    },
    "morning": {"ar": "صباحاً", "en": "Morning"},
    "evening": {"ar": "مساءً", "en": "Evening"},
    "cups": {"ar": "أكواب", "en": "cups"},
    "currency": {"ar": "درهم", "en": "AED"},
    "order_code": {"ar": "رقم الطلب", "en": "Order code"},
}


def normalize_language(lang) -> str:
    if isinstance(lang, str) and lang.lower() in LANGUAGES:
        return lang.lower()
    return DEFAULT_LANGUAGE


def translate(key: str, lang: str, **params) -> str:
    table = MESSAGES[key]
    text = table.get(lang) or table[DEFAULT_LANGUAGE]
    return text.format(**params) if params else text
