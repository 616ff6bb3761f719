"""
Conteúdo dos emails enviados pelos handlers de eventos.

Cada função recebe os dados do evento (``event_data["data"]``) e
retorna ``(assunto, corpo)`` em texto simples.
"""

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

ASSINATURA = "Atenciosamente,\nSistema ACLP - TJBA"

TIPOS_USUARIO = {
    "ADMIN": "Administrador",
    "USUARIO": "Usuário",
}


def _formatar_data_hora(valor: Optional[str]) -> str:
    if not valor:
        return "-"
    try:
        return datetime.fromisoformat(valor).strftime("%d/%m/%Y %H:%M")
    except ValueError:
        return valor


def email_convite(dados: Dict[str, Any]) -> Tuple[str, str]:
    assunto = "Convite para Sistema ACLP - TJBA"
    corpo = (
        "Olá!\n\n"
        "Você foi convidado para acessar o Sistema ACLP do Tribunal de Justiça da Bahia.\n\n"
        f"Perfil: {TIPOS_USUARIO.get(dados.get('tipo_usuario', ''), dados.get('tipo_usuario'))}\n"
        f"Comarca: {dados.get('comarca') or 'Não definida'}\n"
        f"Departamento: {dados.get('departamento') or 'Não definido'}\n"
        f"Email: {dados.get('email')}\n\n"
        "Para criar sua conta, acesse o link abaixo:\n"
        f"{dados.get('link')}\n\n"
        f"IMPORTANTE: Este link é de uso único e válido até: {_formatar_data_hora(dados.get('expira_em'))}\n\n"
        f"{ASSINATURA}\n"
    )
    return assunto, corpo


def email_codigo_verificacao(dados: Dict[str, Any]) -> Tuple[str, str]:
    assunto = "Código de Verificação - Sistema ACLP"
    saudacao = f"Olá {dados['nome']}," if dados.get("nome") else "Olá,"
    corpo = (
        f"{saudacao}\n\n"
        "Seu código de verificação é:\n\n"
        f"    {dados.get('codigo')}\n\n"
        f"O código expira em {_formatar_data_hora(dados.get('expira_em'))}.\n\n"
        "Se você não solicitou este código, ignore este email.\n\n"
        f"{ASSINATURA}\n"
    )
    return assunto, corpo


def email_boas_vindas(dados: Dict[str, Any], frontend_url: str) -> Tuple[str, str]:
    assunto = "Bem-vindo ao Sistema ACLP - TJBA"
    corpo = (
        f"Olá {dados.get('nome')},\n\n"
        "Sua conta no Sistema ACLP foi ativada com sucesso!\n\n"
        f"Email (login): {dados.get('email')}\n"
        f"Tipo de acesso: {TIPOS_USUARIO.get(dados.get('tipo', ''), dados.get('tipo'))}\n\n"
        "Você já pode acessar o sistema em:\n"
        f"{frontend_url}\n\n"
        "Use seu email e a senha que você cadastrou para fazer login.\n\n"
        f"{ASSINATURA}\n"
    )
    return assunto, corpo


def email_conta_bloqueada(dados: Dict[str, Any]) -> Tuple[str, str]:
    assunto = "Alerta de Segurança - Conta Bloqueada"
    corpo = (
        f"Olá {dados.get('nome')},\n\n"
        f"Sua conta foi bloqueada após {dados.get('tentativas')} tentativas de login sem sucesso.\n"
        f"O acesso será liberado em {_formatar_data_hora(dados.get('bloqueado_ate'))}.\n\n"
        "Se não foi você, entre em contato com o administrador do sistema.\n\n"
        f"{ASSINATURA}\n"
    )
    return assunto, corpo


def email_senha_alterada(dados: Dict[str, Any]) -> Tuple[str, str]:
    assunto = "Senha Alterada - Sistema ACLP"
    corpo = (
        f"Olá {dados.get('nome')},\n\n"
        "A senha da sua conta no Sistema ACLP foi alterada.\n\n"
        "Se não foi você, entre em contato imediatamente com o administrador do sistema.\n\n"
        f"{ASSINATURA}\n"
    )
    return assunto, corpo


def email_relatorio_diario(relatorio: Dict[str, Any]) -> Tuple[str, str]:
    assunto = f"Relatório Diário ACLP - {relatorio.get('data')}"
    linhas = [
        f"Relatório de {relatorio.get('data')}",
        "",
        f"Custodiados ativos: {relatorio.get('total_ativos', 0)}",
        f"Em conformidade: {relatorio.get('em_conformidade', 0)}",
        f"Inadimplentes: {relatorio.get('inadimplentes', 0)}",
        f"Comparecimentos previstos para hoje: {relatorio.get('comparecimentos_hoje', 0)}",
        f"Percentual de conformidade: {relatorio.get('percentual_conformidade', 0)}%",
        "",
        ASSINATURA,
    ]
    return assunto, "\n".join(linhas) + "\n"
