"""
PasswordHasher usando os hashers do Django.

O algoritmo segue ``settings.PASSWORD_HASHERS`` (PBKDF2 por padrão).
"""

from django.contrib.auth.hashers import check_password, make_password


class DjangoPasswordHasher:
    """Implementação do port PasswordHasher."""

    def hash(self, senha: str) -> str:
        return make_password(senha)

    def verificar(self, senha: str, senha_hash: str) -> bool:
        if not senha_hash:
            return False
        return check_password(senha, senha_hash)
