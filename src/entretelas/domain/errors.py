class AppError(Exception):
    """Base app error."""

    code = "DB_ERROR"


class ValidationError(AppError):
    code = "INVALID_INPUT"


class NotFoundError(AppError):
    code = "NOT_FOUND"


class PersistenceError(AppError):
    code = "DB_ERROR"


ERROR_MESSAGES = {
    "DB_ERROR": "Error al guardar los datos",
    "NOT_FOUND": "Entrada no encontrada",
    "INVALID_INPUT": "Por favor, revisa los datos ingresados",
}


def user_message(error: BaseException) -> str:
    code = getattr(error, "code", "DB_ERROR")
    return ERROR_MESSAGES.get(code) or str(error) or ERROR_MESSAGES["DB_ERROR"]
