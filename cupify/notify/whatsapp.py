from typing import Any, Dict, Mapping, Optional
from urllib.parse import quote

from ..common.i18n import translate

WHATSAPP_BASE_URL = "https://wa.me/"


def digits_only(number: Optional[str]) -> str:
    return "".join(ch for ch in (number or "") if ch.isdigit())


def build_order_message(order: Mapping[str, Any], color_names: Mapping[str, str], lang: str) -> str:
    """Human-readable order summary sent to the store over WhatsApp."""
    items_line = "\n".join(
        f"• {color_names.get(item['colorCode'], item['colorCode'])} x{item['qty']}" for item in order["items"]
    )
    customer = order["customer"]
    preferred = translate("morning" if customer.get("preferredTime") == "Morning" else "evening", lang)
    cups = translate("cups", lang)
    currency = translate("currency", lang)
    code_label = translate("order_code", lang)
    customer_block = "\n".join(
        [customer.get("name", ""), customer.get("mobile", ""), customer.get("city", ""), customer.get("address", "")]
    )
    if lang == "ar":
        return (
            f"*طلب جديد - Cupify*\n\n{code_label}: {order['orderCode']}\n*الحجم:* {order['packSize']} {cups}\n\n"
            f"*الألوان:*\n{items_line}\n\n*العميل:*\n{customer_block}\n"
            f"{translate('morning', lang)}/{translate('evening', lang)}: {preferred}\n\n"
            f"*الإجمالي:* {order['totalPrice']} {currency}"
        )
    return (
        f"*New order - Cupify*\n\n{code_label}: {order['orderCode']}\n*Pack:* {order['packSize']} {cups}\n\n"
        f"*Items:*\n{items_line}\n\n*Customer:*\n{customer_block}\nPreferred: {preferred}\n\n"
        f"*Total:* {order['totalPrice']} {currency}"
    )


def whatsapp_url(number: Optional[str], body: str) -> str:
    return f"{WHATSAPP_BASE_URL}{digits_only(number)}?text={quote(body, safe='')}"


def order_whatsapp_link(
    order: Dict[str, Any],
    color_names: Mapping[str, str],
    number: Optional[str],
    lang: Optional[str] = None,
) -> str:
    lang = lang or order.get("language") or "ar"
    return whatsapp_url(number, build_order_message(order, color_names, lang))
