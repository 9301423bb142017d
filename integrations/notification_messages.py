"""
Centralized operator message templates with i18n support.

Usage:
    from integrations.notification_messages import get_message

    title, message = get_message(
        NotificationCode.SAVE_SUCCEEDED,
        shelf_id="A1",
        count=12
    )
"""

from models.notification import NotificationCode

from config import settings

C = NotificationCode

# code -> (title, message template)
MESSAGES: dict[str, dict[NotificationCode, tuple[str, str]]] = {
    "en": {
        C.EVENT_STARTED: ("Organization event started", "Event ID: {event_id}"),
        C.EVENT_ENDED: ("Organization event finished", "Event {event_id} closed"),
        C.SHELF_SCAN_STARTED: ("Scanning started", "Scanning products for shelf: {shelf_id}"),
        C.INVALID_SHELF_ID: ("Invalid shelf", "Enter a valid shelf code"),
        C.REVIEW_MODE: ("Review mode on", "Reviewing scanned products"),
        C.SCAN_MODE: ("Scan mode on", "Scan products to add them to the shelf"),
        C.SAVE_SUCCEEDED: ("Shelf saved", "Shelf '{shelf_id}' saved with {count} products"),
        C.SAVE_FAILED: ("Could not save the shelf", "{reason}"),
        C.NOTHING_TO_SAVE: ("Nothing to save", "There are no scanned products to save"),
        C.NEW_SHELF: ("New shelf", "Enter the code of the next shelf"),
        C.SHELF_CANCELLED: ("Shelf cancelled", "{count} scanned products were discarded"),
        C.SCAN_ACCEPTED: ("Product scanned", "Code: {barcode}"),
        C.DUPLICATE_SCAN: ("Scanned again", "Code {barcode} is already on this shelf ({count} times)"),
        C.SCAN_REJECTED_SAVING: ("Scan not added", "Code {barcode} arrived while the shelf was being saved"),
        C.ROUTER_NOT_CONFIGURED: ("Configuration error", "No handler is configured for {mode}"),
        C.SCAN_FAILED: ("Could not process code", "{reason}"),
        C.PRODUCT_FOUND: ("Product found", "Found {product_name}"),
        C.PRODUCT_NOT_FOUND: ("Product not found", "No product registered for {barcode}"),
        C.MISSING_PRODUCT_REPORTED: ("Report sent", "Thanks for reporting {barcode}"),
    },
    "es": {
        C.EVENT_STARTED: ("Evento de organización iniciado", "ID del evento: {event_id}"),
        C.EVENT_ENDED: ("Evento de organización finalizado", "Evento {event_id} cerrado"),
        C.SHELF_SCAN_STARTED: ("Escaneo iniciado", "Escaneando productos para el estante: {shelf_id}"),
        C.INVALID_SHELF_ID: ("Error", "Por favor ingrese un código de estante válido"),
        C.REVIEW_MODE: ("Modo de revisión activado", "Revisando productos escaneados"),
        C.SCAN_MODE: ("Modo de escaneo activado", "Escanee productos para añadirlos al estante"),
        C.SAVE_SUCCEEDED: ("Estante guardado exitosamente", "Estante '{shelf_id}' guardado con {count} productos."),
        C.SAVE_FAILED: ("Error al guardar el estante", "{reason}"),
        C.NOTHING_TO_SAVE: ("Error al guardar", "No hay productos escaneados para guardar"),
        C.NEW_SHELF: ("Nuevo estante", "Ingrese el código del nuevo estante"),
        C.SHELF_CANCELLED: ("Estante cancelado", "Se han descartado {count} productos escaneados"),
        C.SCAN_ACCEPTED: ("Código escaneado", "Código: {barcode}"),
        C.DUPLICATE_SCAN: ("Producto ya escaneado", "El código {barcode} ya está en este estante ({count} veces)"),
        C.SCAN_REJECTED_SAVING: ("Código no añadido", "El código {barcode} llegó mientras se guardaba el estante"),
        C.ROUTER_NOT_CONFIGURED: ("Error de configuración", "No hay un manejador configurado para {mode}"),
        C.SCAN_FAILED: ("Error al procesar código", "{reason}"),
        C.PRODUCT_FOUND: ("Producto encontrado", "Se encontró {product_name}"),
        C.PRODUCT_NOT_FOUND: ("Producto no encontrado", "No hay producto registrado para {barcode}"),
        C.MISSING_PRODUCT_REPORTED: ("Reporte enviado", "Gracias por reportar {barcode}"),
    },
}


def get_message(code: NotificationCode, lang: str = None, **kwargs) -> tuple[str, str]:
    """
    Get a localized title and message.

    Args:
        code: Notification code
        lang: Language code (en, es). Defaults to the configured language
        **kwargs: Template variables

    Returns:
        (title, formatted message). Falls back to English, and to the
        raw template if a variable is missing.
    """
    lang = lang or settings.notification_language
    templates = MESSAGES.get(lang, MESSAGES["en"])
    title, template = templates.get(code) or MESSAGES["en"][code]

    try:
        return title, template.format(**kwargs)
    except (KeyError, IndexError):
        return title, template
