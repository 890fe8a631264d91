from flask import request

from vmforge.errors import ValidationFailed


def json_object():
    """
    Corpo JSON da requisição como dict.
    Corpo ausente ou inválido vira {}; lista ou escalar é recusado com 400.
    """
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValidationFailed([{'field': 'body', 'message': 'O corpo da requisição deve ser um objeto JSON.'}])
    return data


def text_errors(data, fields):
    """
    Erros dos campos de texto presentes em `data`.
    fields: {chave: tamanho máximo} (None = sem limite). None como valor é aceito.
    """
    errors = []
    for key, max_length in fields.items():
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, str):
            errors.append({'field': key, 'message': f'{key} deve ser texto.'})
        elif max_length and len(value) > max_length:
            errors.append({'field': key, 'message': f'{key} deve ter no máximo {max_length} caracteres.'})
    return errors


def require_text(data, fields):
    errors = text_errors(data, fields)
    if errors:
        raise ValidationFailed(errors)
