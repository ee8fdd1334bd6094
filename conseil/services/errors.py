"""
Error taxonomy shared by services and request handlers.

Every error carries the message sent to the client and its HTTP status.
The exception handlers registered in ``conseil.main`` turn them into
``{"error": message}`` JSON responses.
"""


class ServiceError(Exception):
    status_code = 500
    message = "Erreur interne du serveur."

    def __init__(self, message: str = None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidInput(ServiceError):
    """Missing or wrongly typed request fields"""

    status_code = 400
    message = "Requête invalide."


class EmptyOrUnreadableDocument(InvalidInput):
    """A document yielded no usable text"""

    message = "Le fichier PDF est vide ou illisible."


class ResourceUnavailable(ServiceError):
    status_code = 500
    message = "Ressource indisponible."


class KnowledgeUnavailable(ResourceUnavailable):
    message = "Les données juridiques ne sont pas disponibles."


class ProviderError(ServiceError):
    """
    Completion or synthesis API failure.

    ``detail`` is for server logs only; clients only ever see ``message``.
    """

    status_code = 500
    message = "Erreur lors de la génération de la réponse."

    def __init__(self, detail: str = "", message: str = None):
        super().__init__(message)
        self.detail = detail


class InternalError(ServiceError):
    status_code = 500
