"""Message catalogs for user-facing error titles and details (en, es, pt)."""

DEFAULT_LOCALE = "en"

MESSAGES: dict[str, dict[str, str]] = {
    "en": {
        "exception_auth_wrong_credentials": "Wrong credentials",
        "exception_auth_wrong_credentials_detail": "The username or password is incorrect.",
        "exception_auth_user_disabled": "User disabled",
        "exception_auth_user_disabled_detail": "This account is disabled. Contact an administrator.",
        "exception_auth_user_locked": "User locked",
        "exception_auth_user_locked_detail": "This account is locked. Contact an administrator.",
        "exception_auth_unknown_error": "Authentication error",
        "exception_auth_unknown_error_detail": "The request could not be authenticated.",
        "exception_auth_required": "Authentication required",
        "exception_auth_required_detail": "Log in and send the token as 'Authorization: Bearer <token>'.",
        "exception_jwt_revoked": "Invalid session",
        "exception_jwt_revoked_detail": "The token is no longer valid. Log in again to get a new one.",
        "exception_jwt_processing": "Token processing error",
        "exception_jwt_processing_detail": "The token could not be processed.",
        "exception_auth_permission_error": "Permission denied",
        "exception_auth_permission_error_detail": "You do not have permission to perform this action.",
        "exception_not_the_owner": "Not the owner",
        "exception_not_the_owner_detail": "Only the creator of this resource can modify it.",
        "exception_forbidden_action": "Forbidden action",
        "exception_forbidden_action_detail": "This action is not allowed.",
        "exception_id_not_found": "Resource not found",
        "exception_id_not_found_detail": "No resource exists with id {0}.",
        "exception_id_not_found_user_detail": "No user exists with id {0}.",
        "exception_id_not_found_manager_detail": "No manager exists with id {0}.",
        "exception_id_not_found_json_detail": "No JSON document exists with id {0}.",
        "exception_id_not_found_token_user": "No sessions exist for the user with id {0}.",
        "exception_username_not_found": "User not found",
        "exception_username_not_found_detail": "No user exists with username {0}.",
        "error_invalid_body_field": "Invalid field",
        "error_invalid_body_field_detail": "One or more fields of the request are not valid.",
        "error_manager_role": "Managers can only have the ADMIN or SUPERVISOR role.",
        "error_user_role": "Users cannot have the ADMIN or SUPERVISOR role.",
        "exception_data_integrity": "Duplicated value",
        "exception_data_integrity_detail": "A unique field (username, email, id card or name) already exists.",
        "exception_data_integrity_unique_name_json": "You already have a JSON document with this name.",
        "exception_server_error": "Server error",
        "exception_server_error_detail": "An unexpected error occurred.",
        "exception_repository_error_detail": "The data could not be saved. Try again.",
        "exception_repository_save_error_token_revoke": "The sessions of the user could not be revoked. Try again.",
        "exception_repository_save_error_invalid_user": "The user could not be saved.",
        "error_auditor_empty": "There is no authenticated user for this request.",
        "error_delete_own_user": "You cannot delete your own account.",
        "error_delete_user": "Managers cannot be deleted through user management.",
        "error_deactivate_own_user": "You cannot deactivate your own account.",
        "error_deactivate_manager": "Only managers can be deactivated through manager management.",
        "error_deactivate_user": "Managers cannot be deactivated through user management.",
        "error_update_not_the_owner": "Only the creator of this document can update it.",
        "error_delete_not_the_owner": "Only the creator of this document can delete it.",
    },
    "es": {
        "exception_auth_wrong_credentials": "Credenciales incorrectas",
        "exception_auth_wrong_credentials_detail": "El usuario o la contraseña son incorrectos.",
        "exception_auth_user_disabled": "Usuario deshabilitado",
        "exception_auth_user_disabled_detail": "Esta cuenta está deshabilitada. Contacte a un administrador.",
        "exception_auth_user_locked": "Usuario bloqueado",
        "exception_auth_user_locked_detail": "Esta cuenta está bloqueada. Contacte a un administrador.",
        "exception_auth_unknown_error": "Error de autenticación",
        "exception_auth_unknown_error_detail": "No se pudo autenticar la solicitud.",
        "exception_auth_required": "Autenticación requerida",
        "exception_auth_required_detail": "Inicie sesión y envíe el token como 'Authorization: Bearer <token>'.",
        "exception_jwt_revoked": "Sesión inválida",
        "exception_jwt_revoked_detail": "El token ya no es válido. Inicie sesión nuevamente.",
        "exception_jwt_processing": "Error al procesar el token",
        "exception_jwt_processing_detail": "No se pudo procesar el token.",
        "exception_auth_permission_error": "Permiso denegado",
        "exception_auth_permission_error_detail": "No tiene permiso para realizar esta acción.",
        "exception_not_the_owner": "No es el propietario",
        "exception_not_the_owner_detail": "Solo el creador de este recurso puede modificarlo.",
        "exception_forbidden_action": "Acción prohibida",
        "exception_forbidden_action_detail": "Esta acción no está permitida.",
        "exception_id_not_found": "Recurso no encontrado",
        "exception_id_not_found_detail": "No existe un recurso con id {0}.",
        "exception_id_not_found_user_detail": "No existe un usuario con id {0}.",
        "exception_id_not_found_manager_detail": "No existe un gestor con id {0}.",
        "exception_id_not_found_json_detail": "No existe un documento JSON con id {0}.",
        "exception_id_not_found_token_user": "No existen sesiones para el usuario con id {0}.",
        "exception_username_not_found": "Usuario no encontrado",
        "exception_username_not_found_detail": "No existe un usuario con nombre {0}.",
        "error_invalid_body_field": "Campo inválido",
        "error_invalid_body_field_detail": "Uno o más campos de la solicitud no son válidos.",
        "error_manager_role": "Los gestores solo pueden tener el rol ADMIN o SUPERVISOR.",
        "error_user_role": "Los usuarios no pueden tener el rol ADMIN o SUPERVISOR.",
        "exception_data_integrity": "Valor duplicado",
        "exception_data_integrity_detail": "Un campo único (usuario, correo, documento o nombre) ya existe.",
        "exception_data_integrity_unique_name_json": "Ya tiene un documento JSON con este nombre.",
        "exception_server_error": "Error del servidor",
        "exception_server_error_detail": "Ocurrió un error inesperado.",
        "exception_repository_error_detail": "No se pudieron guardar los datos. Intente nuevamente.",
        "exception_repository_save_error_token_revoke": "No se pudieron revocar las sesiones del usuario. Intente nuevamente.",
        "exception_repository_save_error_invalid_user": "No se pudo guardar el usuario.",
        "error_auditor_empty": "No hay un usuario autenticado para esta solicitud.",
        "error_delete_own_user": "No puede eliminar su propia cuenta.",
        "error_delete_user": "Los gestores no se pueden eliminar desde la gestión de usuarios.",
        "error_deactivate_own_user": "No puede desactivar su propia cuenta.",
        "error_deactivate_manager": "Solo se pueden desactivar gestores desde la gestión de gestores.",
        "error_deactivate_user": "Los gestores no se pueden desactivar desde la gestión de usuarios.",
        "error_update_not_the_owner": "Solo el creador de este documento puede actualizarlo.",
        "error_delete_not_the_owner": "Solo el creador de este documento puede eliminarlo.",
    },
    "pt": {
        "exception_auth_wrong_credentials": "Credenciais incorretas",
        "exception_auth_wrong_credentials_detail": "O usuário ou a senha estão incorretos.",
        "exception_auth_user_disabled": "Usuário desativado",
        "exception_auth_user_disabled_detail": "Esta conta está desativada. Contate um administrador.",
        "exception_auth_user_locked": "Usuário bloqueado",
        "exception_auth_user_locked_detail": "Esta conta está bloqueada. Contate um administrador.",
        "exception_auth_unknown_error": "Erro de autenticação",
        "exception_auth_unknown_error_detail": "Não foi possível autenticar a solicitação.",
        "exception_auth_required": "Autenticação necessária",
        "exception_auth_required_detail": "Faça login e envie o token como 'Authorization: Bearer <token>'.",
        "exception_jwt_revoked": "Sessão inválida",
        "exception_jwt_revoked_detail": "O token não é mais válido. Faça login novamente.",
        "exception_jwt_processing": "Erro ao processar o token",
        "exception_jwt_processing_detail": "Não foi possível processar o token.",
        "exception_auth_permission_error": "Permissão negada",
        "exception_auth_permission_error_detail": "Você não tem permissão para realizar esta ação.",
        "exception_not_the_owner": "Não é o proprietário",
        "exception_not_the_owner_detail": "Somente o criador deste recurso pode modificá-lo.",
        "exception_forbidden_action": "Ação proibida",
        "exception_forbidden_action_detail": "Esta ação não é permitida.",
        "exception_id_not_found": "Recurso não encontrado",
        "exception_id_not_found_detail": "Não existe um recurso com id {0}.",
        "exception_id_not_found_user_detail": "Não existe um usuário com id {0}.",
        "exception_id_not_found_manager_detail": "Não existe um gestor com id {0}.",
        "exception_id_not_found_json_detail": "Não existe um documento JSON com id {0}.",
        "exception_id_not_found_token_user": "Não existem sessões para o usuário com id {0}.",
        "exception_username_not_found": "Usuário não encontrado",
        "exception_username_not_found_detail": "Não existe um usuário com nome {0}.",
        "error_invalid_body_field": "Campo inválido",
        "error_invalid_body_field_detail": "Um ou mais campos da solicitação não são válidos.",
        "error_manager_role": "Gestores só podem ter o papel ADMIN ou SUPERVISOR.",
        "error_user_role": "Usuários não podem ter o papel ADMIN ou SUPERVISOR.",
        "exception_data_integrity": "Valor duplicado",
        "exception_data_integrity_detail": "Um campo único (usuário, e-mail, documento ou nome) já existe.",
        "exception_data_integrity_unique_name_json": "Você já tem um documento JSON com este nome.",
        "exception_server_error": "Erro do servidor",
        "exception_server_error_detail": "Ocorreu um erro inesperado.",
        "exception_repository_error_detail": "Não foi possível salvar os dados. Tente novamente.",
        "exception_repository_save_error_token_revoke": "Não foi possível revogar as sessões do usuário. Tente novamente.",
        "exception_repository_save_error_invalid_user": "Não foi possível salvar o usuário.",
        "error_auditor_empty": "Não há um usuário autenticado para esta solicitação.",
        "error_delete_own_user": "Você não pode excluir sua própria conta.",
        "error_delete_user": "Gestores não podem ser excluídos pela gestão de usuários.",
        "error_deactivate_own_user": "Você não pode desativar sua própria conta.",
        "error_deactivate_manager": "Somente gestores podem ser desativados pela gestão de gestores.",
        "error_deactivate_user": "Gestores não podem ser desativados pela gestão de usuários.",
        "error_update_not_the_owner": "Somente o criador deste documento pode atualizá-lo.",
        "error_delete_not_the_owner": "Somente o criador deste documento pode excluí-lo.",
    },
}

SUPPORTED_LOCALES = frozenset(MESSAGES)


def resolve_locale(accept_language: str | None) -> str:
    """
    Pick the best supported locale from an Accept-Language header value.

    Tags are ranked by their q-value (default 1.0); region subtags are ignored
    (es-PE -> es). Falls back to English when nothing matches.
    """
    if not accept_language:
        return DEFAULT_LOCALE
    candidates: list[tuple[float, int, str]] = []
    for index, part in enumerate(accept_language.split(",")):
        pieces = part.strip().split(";")
        tag = pieces[0].strip().lower()
        if not tag:
            continue
        quality = 1.0
        for param in pieces[1:]:
            name, _, value = param.strip().partition("=")
            if name.strip() == "q":
                try:
                    quality = float(value)
                except ValueError:
                    quality = 0.0
        if quality <= 0:
            continue
        candidates.append((-quality, index, tag.split("-")[0]))
    for _, _, language in sorted(candidates):
        if language in SUPPORTED_LOCALES:
            return language
    return DEFAULT_LOCALE


def get_message(key: str, locale: str = DEFAULT_LOCALE, args: tuple = ()) -> str:
    """Look up key in the locale's catalog (English fallback) and format positional args."""
    catalog = MESSAGES.get(locale, MESSAGES[DEFAULT_LOCALE])
    template = catalog.get(key) or MESSAGES[DEFAULT_LOCALE].get(key, key)
    if args:
        return template.format(*args)
    return template
