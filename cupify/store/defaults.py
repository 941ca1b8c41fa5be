"""Default store configuration and seed catalogue.

``DEFAULT_STORE_SETTINGS`` is the single default-configuration constant; the
persisted ``admin_settings`` rows are always merged on top of it.
"""

from typing import Any, Dict, List

DEFAULT_PACK_PRICES: Dict[str, int] = {"2": 50, "3": 65, "4": 80}

DEFAULT_STORE_SETTINGS: Dict[str, Any] = {
    "pack_prices": DEFAULT_PACK_PRICES,
    "delivery_fee": 0,
    "min_order": 1,
    "whatsapp_number": "971500000000",
    "store_active": True,
}

DEFAULT_COLORS: List[Dict[str, Any]] = [
    {"colorCode": "BROWN", "nameAr": "رمل البحر", "nameEn": "Sea Sand", "hex": "#D2B48C", "sortOrder": 0, "stock": 32},
    {"colorCode": "BLUE", "nameAr": "سماء دبي", "nameEn": "Dubai Sky", "hex": "#4A90E2", "sortOrder": 1, "stock": 35},
    {"colorCode": "PINK", "nameAr": "ورد جوري", "nameEn": "Damask Rose", "hex": "#F4C2C2", "sortOrder": 2, "stock": 46},
    {"colorCode": "BLACK", "nameAr": "ليل عميق", "nameEn": "Deep Night", "hex": "#2C2C2C", "sortOrder": 3, "stock": 9},
    {"colorCode": "GREEN", "nameAr": "واحة خضراء", "nameEn": "Green Oasis", "hex": "#4F7942", "sortOrder": 4, "stock": 37},
    {"colorCode": "BLUE_DOTS", "nameAr": "غمام أبيض", "nameEn": "White Clouds", "hex": "#F5F5DC", "sortOrder": 5, "stock": 35},
    {"colorCode": "BROWN_DOTS", "nameAr": "أرض طيبة", "nameEn": "Good Earth", "hex": "#8B4513", "sortOrder": 6, "stock": 34},
]

DEFAULT_PACKS: List[Dict[str, Any]] = [
    {
        "size": 2,
        "titleAr": "مزاج الهدوء ☕",
        "titleEn": "Serenity Duo",
        "descAr": "مثالي للحظاتك الخاصة أو كهدية رقيقة.",
        "descEn": "Perfect for your private moments or a gentle gift.",
        "badge": "لذيذ",
        "sortOrder": 0,
    },
    {
        "size": 3,
        "titleAr": "طاقة المكتب ✨",
        "titleEn": "Office Energy",
        "descAr": "لأيام العمل الطويلة، طقم يبعث فيك الحيوية.",
        "descEn": "For long workdays, a set that boosts your energy.",
        "badge": "الأكثر حيوية 🔥",
        "sortOrder": 1,
    },
    {
        "size": 4,
        "titleAr": "الضيافة الملكية 👑",
        "titleEn": "Royal Hosting",
        "descAr": "كن المضيف الأروع، ألوان تخطف الأنظار.",
        "descEn": "Be the coolest host, colors that catch eyes.",
        "badge": "قيمة مذهلة 💎",
        "sortOrder": 2,
    },
]
