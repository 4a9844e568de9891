"""Определение IP-адреса клиента."""
from fastapi import Request


def get_client_ip(request: Request) -> str:
    """
    Получить IP-адрес клиента из запроса.

    Учитывает X-Forwarded-For и X-Real-IP, если запрос идёт через прокси.
    """
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        # Первый IP в цепочке - исходный клиент
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("X-Real-IP")
    if real_ip:
        return real_ip.strip()

    return request.client.host if request.client else "unknown"
