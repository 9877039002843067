"""Localized message tables for sheet feedback (en, fr, ar).

Templates use ``{field}``, ``{value}``, ``{message}`` and ``{suggestion}``
placeholders. ``DEFAULT_ERROR`` / ``DEFAULT_WARNING`` cover codes without a
dedicated template.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import TYPE_CHECKING, Final

from sheetorders.domain.model import Locale

if TYPE_CHECKING:
    from collections.abc import Mapping

type MessageTable = Mapping[Locale, Mapping[str, str]]

DEFAULT_ERROR: Final = "DEFAULT_ERROR"
DEFAULT_WARNING: Final = "DEFAULT_WARNING"
VALIDATION_SUMMARY: Final = "VALIDATION_SUMMARY"


def _freeze(tables: dict[Locale, dict[str, str]]) -> MessageTable:
    return MappingProxyType({locale: MappingProxyType(table) for locale, table in tables.items()})


ERROR_MESSAGES: Final = _freeze(
    {
        Locale.EN: {
            "REQUIRED_FIELD_MISSING": "{field} is required",
            "INVALID_FORMAT": "{field} has invalid format",
            "INVALID_LENGTH": "{field} length is invalid",
            "INVALID_VALUE": "{field} has invalid value",
            "INVALID_TYPE": "{field} must be a valid number",
            "PRODUCT_NOT_FOUND": 'Product "{value}" not found in catalog',
            "NAME_MISMATCH": "{field} does not match catalog",
            "VALIDATION_ERROR": "Error validating {field}",
            DEFAULT_ERROR: "{field}: {message}",
        },
        Locale.FR: {
            "REQUIRED_FIELD_MISSING": "{field} est requis",
            "INVALID_FORMAT": "{field} a un format invalide",
            "INVALID_LENGTH": "La longueur de {field} est invalide",
            "INVALID_VALUE": "{field} a une valeur invalide",
            "INVALID_TYPE": "{field} doit être un nombre valide",
            "PRODUCT_NOT_FOUND": 'Produit "{value}" non trouvé dans le catalogue',
            "NAME_MISMATCH": "{field} ne correspond pas au catalogue",
            "VALIDATION_ERROR": "Erreur de validation de {field}",
            DEFAULT_ERROR: "{field}: {message}",
        },
        Locale.AR: {
            "REQUIRED_FIELD_MISSING": "{field} مطلوب",
            "INVALID_FORMAT": "{field} له تنسيق غير صحيح",
            "INVALID_LENGTH": "طول {field} غير صحيح",
            "INVALID_VALUE": "{field} له قيمة غير صحيحة",
            "INVALID_TYPE": "{field} يجب أن يكون رقماً صحيحاً",
            "PRODUCT_NOT_FOUND": 'المنتج "{value}" غير موجود في الكتالوج',
            "NAME_MISMATCH": "{field} لا يطابق الكتالوج",
            "VALIDATION_ERROR": "خطأ في التحقق من {field}",
            DEFAULT_ERROR: "{field}: {message}",
        },
    }
)

WARNING_MESSAGES: Final = _freeze(
    {
        Locale.EN: {
            "SUSPICIOUS_VALUE": "{field} value seems suspicious, please verify",
            "PRICE_MISMATCH": "{field} differs from catalog price",
            "PRECISION_WARNING": "{field} has unusual precision",
            "PRODUCT_NOT_FOUND": 'Product "{value}" not found in catalog',
            "NAME_MISMATCH": "{field} does not match catalog",
            "INVALID_FORMAT": "{field} has invalid format",
            DEFAULT_WARNING: "{field}: {message}",
        },
        Locale.FR: {
            "SUSPICIOUS_VALUE": "La valeur de {field} semble suspecte, veuillez vérifier",
            "PRICE_MISMATCH": "{field} diffère du prix du catalogue",
            "PRECISION_WARNING": "{field} a une précision inhabituelle",
            "PRODUCT_NOT_FOUND": 'Produit "{value}" non trouvé dans le catalogue',
            "NAME_MISMATCH": "{field} ne correspond pas au catalogue",
            "INVALID_FORMAT": "{field} a un format invalide",
            DEFAULT_WARNING: "{field}: {message}",
        },
        Locale.AR: {
            "SUSPICIOUS_VALUE": "قيمة {field} تبدو مشبوهة، يرجى التحقق",
            "PRICE_MISMATCH": "{field} يختلف عن سعر الكتالوج",
            "PRECISION_WARNING": "{field} له دقة غير عادية",
            "PRODUCT_NOT_FOUND": 'المنتج "{value}" غير موجود في الكتالوج',
            "NAME_MISMATCH": "{field} لا يطابق الكتالوج",
            "INVALID_FORMAT": "{field} له تنسيق غير صحيح",
            DEFAULT_WARNING: "{field}: {message}",
        },
    }
)

FIELD_NAMES: Final = _freeze(
    {
        Locale.EN: {
            "customerName": "Customer Name",
            "phone": "Phone Number",
            "address": "Address",
            "city": "City",
            "email": "Email",
            "productName": "Product Name",
            "productSku": "Product SKU",
            "productQuantity": "Quantity",
            "price": "Price",
            "date": "Order Date",
        },
        Locale.FR: {
            "customerName": "Nom du Client",
            "phone": "Numéro de Téléphone",
            "address": "Adresse",
            "city": "Ville",
            "email": "Email",
            "productName": "Nom du Produit",
            "productSku": "SKU du Produit",
            "productQuantity": "Quantité",
            "price": "Prix",
            "date": "Date de Commande",
        },
        Locale.AR: {
            "customerName": "اسم العميل",
            "phone": "رقم الهاتف",
            "address": "العنوان",
            "city": "المدينة",
            "email": "البريد الإلكتروني",
            "productName": "اسم المنتج",
            "productSku": "رمز المنتج",
            "productQuantity": "الكمية",
            "price": "السعر",
            "date": "تاريخ الطلب",
        },
    }
)

SUMMARY_MESSAGES: Final = _freeze(
    {
        Locale.EN: {
            VALIDATION_SUMMARY: (
                "Validation completed: {totalRows} total, {validRows} valid, "
                "{errorRows} errors, {warningRows} warnings"
            ),
        },
        Locale.FR: {
            VALIDATION_SUMMARY: (
                "Validation terminée: {totalRows} total, {validRows} valides, "
                "{errorRows} erreurs, {warningRows} avertissements"
            ),
        },
        Locale.AR: {
            VALIDATION_SUMMARY: (
                "اكتمل التحقق: {totalRows} إجمالي، {validRows} صحيح، "
                "{errorRows} أخطاء، {warningRows} تحذيرات"
            ),
        },
    }
)


def messages_for(table: MessageTable, locale: Locale) -> Mapping[str, str]:
    return table.get(locale) or table[Locale.EN]


def field_name(field: str, locale: Locale) -> str:
    return messages_for(FIELD_NAMES, locale).get(field, field)
