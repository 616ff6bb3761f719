"""
Core Domain Layer - O Hexágono.

Regras de negócio do ACLP (custodiados, comparecimentos, usuários),
sem dependências de frameworks.
Características:
- Zero dependências externas (Django, Celery, etc.)
- 100% testável sem banco de dados
- Agnóstico a infraestrutura
"""
