"""
Erreurs de domaine Stockroom.

Chaque erreur porte un `kind` lisible par machine et le statut HTTP associé ;
les handlers FastAPI (stockroom.app.api.errors) les rendent telles quelles.
"""


class StockroomError(Exception):
    """Base de toutes les erreurs remontées à l'appelant."""

    kind = "Internal"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StockroomError):
    """Entrée mal formée ou manquante (quantité <= 0, liste vide, ...)."""

    kind = "ValidationError"
    status_code = 400


class NotFound(StockroomError):
    kind = "NotFound"
    status_code = 404


class Unauthorized(StockroomError):
    """Rôle / flag insuffisant, ou identifiants invalides."""

    kind = "Unauthorized"
    status_code = 401


class InvalidTransition(StockroomError):
    kind = "InvalidTransition"
    status_code = 409


class Conflict(StockroomError):
    """Violation d'unicité ou écriture concurrente perdue."""

    kind = "Conflict"
    status_code = 409


class Internal(StockroomError):
    kind = "Internal"
    status_code = 500
